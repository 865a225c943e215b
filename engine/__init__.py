"""Trait indexing and filtering engine.

Builds a trait-type → values index from a record collection, tracks which
values are checked, and recomputes the matching records on every change.
"""

from engine.errors import ExplorerError, InvalidKey, LoadFailure, SessionNotReady
from engine.filters import (
    FilterEvaluator,
    NoResultsPolicy,
    active_filters,
    all_unchecked,
    record_matches,
)
from engine.index import build_trait_index
from engine.models import SENTINEL_RECORD, Attribute, Record, is_sentinel
from engine.ordering import compare_values, display_index, sort_values, split_value
from engine.session import FilterSession, SelectionUpdate, SessionState

__all__ = [
    # Errors
    "ExplorerError",
    "InvalidKey",
    "LoadFailure",
    "SessionNotReady",
    # Models
    "Attribute",
    "Record",
    "SENTINEL_RECORD",
    "is_sentinel",
    # Index + filtering
    "build_trait_index",
    "FilterEvaluator",
    "NoResultsPolicy",
    "active_filters",
    "all_unchecked",
    "record_matches",
    # Ordering
    "compare_values",
    "display_index",
    "sort_values",
    "split_value",
    # Session
    "FilterSession",
    "SelectionUpdate",
    "SessionState",
]
