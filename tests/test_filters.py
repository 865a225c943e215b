"""
Tests for engine/filters.py — flat-AND matching and the no-results policy.
"""
import pytest

from conftest import make_record

from engine.filters import (
    FilterEvaluator,
    NoResultsPolicy,
    active_filters,
    all_unchecked,
    record_matches,
)
from engine.models import SENTINEL_RECORD


def _selection(**checked):
    """Selection over Color/Size with the given 'Trait=Value' keys checked."""
    sel = {
        "Color": {"Red": False, "Blue": False, "Green": False},
        "Size": {"Type10": False, "Type2": False, "Type1": False, "Alpha": False},
        "Hat": {"Cap": False},
    }
    for trait, values in checked.items():
        for v in values:
            sel[trait][v] = True
    return sel


class TestActiveFilters:
    def test_none_checked(self):
        assert active_filters(_selection()) == []
        assert all_unchecked(_selection())

    def test_collects_in_selection_order(self):
        sel = _selection(Size=["Type2"], Color=["Blue", "Red"])
        assert active_filters(sel) == [
            ("Color", "Red"), ("Color", "Blue"), ("Size", "Type2"),
        ]
        assert not all_unchecked(sel)

    def test_all_unchecked_on_empty_state(self):
        assert all_unchecked({})


class TestRecordMatches:
    def test_no_filters_matches_everything(self):
        assert record_matches(make_record("x"), [])

    def test_requires_every_pair(self):
        r = make_record("x", ("Color", "Red"), ("Size", "L"))
        assert record_matches(r, [("Color", "Red"), ("Size", "L")])
        assert not record_matches(r, [("Color", "Red"), ("Size", "M")])

    def test_duplicate_trait_record_can_satisfy_two_values(self):
        r = make_record("x", ("Color", "Red"), ("Color", "Blue"))
        assert record_matches(r, [("Color", "Red"), ("Color", "Blue")])


class TestFilterEvaluator:
    def test_default_policy_is_empty(self):
        assert FilterEvaluator().policy is NoResultsPolicy.EMPTY

    def test_single_value(self, sample_records):
        result = FilterEvaluator().evaluate(sample_records, _selection(Color=["Red"]))
        assert [r.name for r in result] == ["Item #1", "Item #3", "Item #5"]

    def test_and_across_trait_types(self, sample_records):
        result = FilterEvaluator().evaluate(
            sample_records, _selection(Color=["Red"], Hat=["Cap"]),
        )
        assert [r.name for r in result] == ["Item #3", "Item #5"]

    def test_two_values_same_trait_are_both_required(self, sample_records):
        # Flat AND: no record is both Red and Blue, so nothing matches
        result = FilterEvaluator().evaluate(
            sample_records, _selection(Color=["Red", "Blue"]),
        )
        assert result == ()

    def test_result_keeps_collection_order(self, sample_records):
        result = FilterEvaluator().evaluate(sample_records, _selection(Size=["Type2"]))
        names = [r.name for r in result]
        assert names == ["Item #2", "Item #5"]
        positions = [sample_records.index(r) for r in result]
        assert positions == sorted(positions)

    def test_empty_policy_nothing_selected(self, sample_records):
        assert FilterEvaluator(NoResultsPolicy.EMPTY).evaluate(
            sample_records, _selection()) == ()

    def test_sentinel_policy_nothing_selected(self, sample_records):
        assert FilterEvaluator(NoResultsPolicy.SENTINEL).evaluate(
            sample_records, _selection()) == (SENTINEL_RECORD,)

    def test_sentinel_policy_zero_matches(self, sample_records):
        result = FilterEvaluator(NoResultsPolicy.SENTINEL).evaluate(
            sample_records, _selection(Color=["Green"], Hat=["Cap"]),
        )
        assert result == (SENTINEL_RECORD,)

    def test_sentinel_policy_with_matches_has_no_sentinel(self, sample_records):
        result = FilterEvaluator(NoResultsPolicy.SENTINEL).evaluate(
            sample_records, _selection(Color=["Green"]),
        )
        assert [r.name for r in result] == ["Item #4"]

    @pytest.mark.parametrize("checked", [
        {"Color": ["Red"]},
        {"Color": ["Red"], "Size": ["Type2"]},
        {"Size": ["Type1", "Type2"]},
        {"Hat": ["Cap"], "Size": ["Alpha"]},
    ])
    def test_matches_iff_every_pair_present(self, sample_records, checked):
        sel = _selection(**checked)
        pairs = active_filters(sel)
        result = FilterEvaluator().evaluate(sample_records, sel)
        expected = [r for r in sample_records
                    if all(r.has_attribute(t, v) for t, v in pairs)]
        assert list(result) == expected


class TestNoResultsPolicyParse:
    def test_parse_case_insensitive(self):
        assert NoResultsPolicy.parse(" Sentinel ") is NoResultsPolicy.SENTINEL
        assert NoResultsPolicy.parse("empty") is NoResultsPolicy.EMPTY

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="no-results policy"):
            NoResultsPolicy.parse("blank")
