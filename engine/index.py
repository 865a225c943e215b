"""
Trait index construction.

Derives the trait-type → distinct-values mapping and the matching all-false
selection state from a record collection.  Both structures keep
first-encounter order; display ordering is applied separately by
``engine.ordering``.
"""

from __future__ import annotations

from collections.abc import Iterable

from engine.models import Record

TraitIndex = dict[str, list[str]]
SelectionState = dict[str, dict[str, bool]]


def build_trait_index(records: Iterable[Record]) -> tuple[TraitIndex, SelectionState]:
    """Scan *records* in order and collect every non-empty trait value.

    Args:
        records: The record collection.  It is only read.

    Returns:
        ``(index, selection)`` where ``index[trait_type]`` lists the distinct
        values in first-seen order and ``selection[trait_type][value]`` is
        ``False`` for every indexed pair.  Trait types that only ever carry
        empty values are omitted from both, so no empty trait heading is
        ever listed.
    """
    index: TraitIndex = {}
    selection: SelectionState = {}
    # Per-trait membership sets so the scan stays linear
    seen: dict[str, set[str]] = {}

    for record in records:
        for attr in record.attributes:
            if attr.is_empty:
                continue
            values = seen.setdefault(attr.trait_type, set())
            if attr.value in values:
                continue
            values.add(attr.value)
            index.setdefault(attr.trait_type, []).append(attr.value)
            selection.setdefault(attr.trait_type, {})[attr.value] = False

    return index, selection


def blank_selection(index: TraitIndex) -> SelectionState:
    """Return a fresh all-unchecked selection state covering *index*."""
    return {trait: {value: False for value in values} for trait, values in index.items()}


def copy_selection(selection: SelectionState) -> SelectionState:
    """Return a two-level copy of *selection* safe to hand to callers."""
    return {trait: dict(values) for trait, values in selection.items()}
