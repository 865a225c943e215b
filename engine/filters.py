"""
Filter evaluation against the current selection state.

Matching is a flat AND over every checked (trait_type, value) pair: a record
is kept only if it carries an attribute equal to each checked pair.  Two
values checked under the same trait type are therefore both required, so
checking ``Color=Red`` and ``Color=Blue`` matches nothing unless a record
lists both colours.  This is the established behaviour of the explorer and
is pinned in tests; it is not OR-within-trait-type.

What "nothing to show" looks like is a policy choice:

    NoResultsPolicy.EMPTY     → ()                     (default)
    NoResultsPolicy.SENTINEL  → (SENTINEL_RECORD,)

The same policy covers both the all-unchecked case and the zero-match case.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from engine.index import SelectionState
from engine.models import SENTINEL_RECORD, Record

FilterPair = tuple[str, str]


class NoResultsPolicy(str, Enum):
    """How an empty filtered result is presented."""

    EMPTY = "empty"
    SENTINEL = "sentinel"

    @classmethod
    def parse(cls, raw: str) -> "NoResultsPolicy":
        """Parse a config string (case-insensitive) into a policy."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown no-results policy {raw!r} (expected one of: {allowed})"
            ) from None


def active_filters(selection: SelectionState) -> list[FilterPair]:
    """Return the checked pairs in selection-state order."""
    return [
        (trait, value)
        for trait, values in selection.items()
        for value, checked in values.items()
        if checked
    ]


def all_unchecked(selection: SelectionState) -> bool:
    return not any(
        checked for values in selection.values() for checked in values.values()
    )


def record_matches(record: Record, active: Sequence[FilterPair]) -> bool:
    """True if *record* has an attribute equal to every pair in *active*."""
    return all(record.has_attribute(trait, value) for trait, value in active)


class FilterEvaluator:
    """Computes the filtered result for a selection state.

    Args:
        policy: What to return when nothing is selected or nothing matches.
    """

    def __init__(self, policy: NoResultsPolicy = NoResultsPolicy.EMPTY):
        self.policy = policy

    def no_results(self) -> tuple[Record, ...]:
        if self.policy is NoResultsPolicy.SENTINEL:
            return (SENTINEL_RECORD,)
        return ()

    def evaluate(
        self,
        records: Sequence[Record],
        selection: SelectionState,
    ) -> tuple[Record, ...]:
        """Return matching records in collection order, or the no-results value."""
        active = active_filters(selection)
        if not active:
            return self.no_results()

        matched = tuple(r for r in records if record_matches(r, active))
        return matched or self.no_results()
