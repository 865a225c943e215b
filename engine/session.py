"""
FilterSession — owner of the record collection, trait index, selection
state and filtered result for one user session.

Lifecycle::

    EMPTY ──load()──▶ LOADING ──▶ READY ──toggle()/reset()──▶ READY
                          │
                          └──▶ FAILED   (LoadFailure from the source)

Everything except ``load()``, ``state`` and ``loading`` raises
SessionNotReady until the session is READY.  ``toggle()`` and ``reset()``
run under one lock so a selection change and its recomputed result are
never observed half-applied.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from engine.errors import ExplorerError, InvalidKey, LoadFailure, SessionNotReady
from engine.filters import FilterEvaluator, NoResultsPolicy, all_unchecked
from engine.index import (
    SelectionState,
    TraitIndex,
    blank_selection,
    build_trait_index,
    copy_selection,
)
from engine.models import Record
from engine.ordering import display_index

if TYPE_CHECKING:
    from loader.sources import RecordSource
    from pipeline.logging import StepReport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SelectionUpdate:
    """Outcome of a toggle or reset: the new selection and its result."""

    selection: SelectionState
    results: tuple[Record, ...]
    all_unchecked: bool


class FilterSession:
    """Single-user trait filtering session.

    Args:
        policy: How empty results are presented (see engine.filters).
    """

    def __init__(self, policy: NoResultsPolicy = NoResultsPolicy.EMPTY) -> None:
        self._evaluator = FilterEvaluator(policy)
        self._lock = threading.Lock()
        self._state = SessionState.EMPTY
        self._records: tuple[Record, ...] = ()
        self._index: TraitIndex = {}
        self._selection: SelectionState = {}
        self._results: tuple[Record, ...] = ()
        self.load_error: str | None = None
        self.load_report: StepReport | None = None

    # ── lifecycle ─────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state is SessionState.LOADING

    @property
    def policy(self) -> NoResultsPolicy:
        return self._evaluator.policy

    def load(self, source: RecordSource) -> None:
        """Load all records from *source* and build the trait index.

        Raises:
            LoadFailure: The source could not be read; the session moves to
                FAILED and keeps no partial data.  Any other exception from
                the source also moves the session to FAILED before it
                propagates.
            ExplorerError: A load is already running.
        """
        with self._lock:
            if self._state is SessionState.LOADING:
                raise ExplorerError("A load is already in progress")
            self._state = SessionState.LOADING
            self.load_error = None

        logger.info("Loading records from %s", source.describe())
        try:
            result = source.load()
        except LoadFailure as e:
            with self._lock:
                self._state = SessionState.FAILED
                self.load_error = str(e)
            logger.error("Record load failed (%s): %s", e.resource or "unknown", e)
            raise
        except Exception as e:
            with self._lock:
                self._state = SessionState.FAILED
                self.load_error = f"{type(e).__name__}: {e}"
            logger.exception("Record load failed unexpectedly")
            raise

        self.load_report = result.report
        self.set_records(result.records)
        logger.info(
            "Loaded %d records, %d trait types (%s)",
            len(self._records), len(self._index), result.report.console_summary(),
        )

    def set_records(self, records: Sequence[Record]) -> None:
        """Replace the record collection and rebuild everything derived from it."""
        records = tuple(records)
        index, selection = build_trait_index(records)
        with self._lock:
            self._records = records
            self._index = index
            self._selection = selection
            self._results = self._evaluator.evaluate(records, selection)
            self._state = SessionState.READY

    def _require_ready(self) -> None:
        if self._state is not SessionState.READY:
            raise SessionNotReady(self._state.value, self.load_error or "")

    # ── read access ───────────────────────────────────────────────────────

    @property
    def records(self) -> tuple[Record, ...]:
        self._require_ready()
        return self._records

    @property
    def trait_index(self) -> TraitIndex:
        self._require_ready()
        return {trait: list(values) for trait, values in self._index.items()}

    @property
    def selection(self) -> SelectionState:
        self._require_ready()
        with self._lock:
            return copy_selection(self._selection)

    @property
    def results(self) -> tuple[Record, ...]:
        self._require_ready()
        return self._results

    @property
    def all_unchecked(self) -> bool:
        self._require_ready()
        with self._lock:
            return all_unchecked(self._selection)

    def snapshot(self) -> SelectionUpdate:
        """Current selection and result, read together under the lock."""
        self._require_ready()
        with self._lock:
            return SelectionUpdate(
                selection=copy_selection(self._selection),
                results=self._results,
                all_unchecked=all_unchecked(self._selection),
            )

    def display_index(self) -> list[tuple[str, list[str]]]:
        """Trait types and their values in display order."""
        self._require_ready()
        return display_index(self._index)

    # ── mutation ──────────────────────────────────────────────────────────

    def toggle(self, trait_type: str, value: str) -> SelectionUpdate:
        """Flip one checkbox and recompute the filtered result.

        Raises:
            InvalidKey: The pair is not part of the current trait index.
            SessionNotReady: Records have not finished loading.
        """
        self._require_ready()
        with self._lock:
            values = self._selection.get(trait_type)
            if values is None or value not in values:
                raise InvalidKey(trait_type, value)

            checked = values[value] = not values[value]
            self._results = self._evaluator.evaluate(self._records, self._selection)
            update = SelectionUpdate(
                selection=copy_selection(self._selection),
                results=self._results,
                all_unchecked=all_unchecked(self._selection),
            )

        logger.debug(
            "toggle %s=%s -> %s (%d results)",
            trait_type, value, checked, len(update.results),
        )
        return update

    def reset(self) -> SelectionUpdate:
        """Uncheck everything and clear the result to empty in one step.

        The result is always empty here, whatever the no-results policy.
        """
        self._require_ready()
        with self._lock:
            self._selection = blank_selection(self._index)
            self._results = ()
            update = SelectionUpdate(
                selection=copy_selection(self._selection),
                results=(),
                all_unchecked=True,
            )
        logger.debug("selection reset")
        return update
