"""
Record sources — one ``load()`` interface over every supported data shape.

Shapes:
  - numbered files       <data_dir>/1.json … <data_dir>/N.json, one record each
  - combined file        one JSON array holding every record (see pipeline.join)
  - numbered URLs        <base_url>/1.json … <base_url>/N.json
  - combined URL         one JSON array served over HTTP

Numbered shapes fetch concurrently on a thread pool and reassemble the
records in index order.  An absent index is logged as a warning, recorded
as a ``missing_resource`` skip, and left out of the collection.  A payload
that is not valid JSON, or not shaped like a record, fails the whole load
with LoadFailure; no partial collection is returned in that case.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from engine.errors import LoadFailure
from engine.models import Record
from pipeline.logging import MISSING_RESOURCE, StepReport
from utils.common import read_json_file
from utils.config import LoadConfig
from utils.http import RetryStrategy, SessionManager, fetch_json

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Records produced by a source plus the accounting for how it went."""

    records: tuple[Record, ...]
    report: StepReport


def records_from_array(payload: Any, resource: str) -> list[Record]:
    """Convert a decoded JSON array of record objects into Records."""
    if not isinstance(payload, list):
        raise LoadFailure(
            f"Combined resource must be a JSON array, got {type(payload).__name__}",
            resource=resource,
        )
    return [
        Record.from_dict(item, resource=f"{resource}[{i}]")
        for i, item in enumerate(payload)
    ]


class RecordSource:
    """Base class: something that can produce the whole record collection."""

    def load(self) -> LoadResult:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


# ── Numbered (one record per resource) ────────────────────────────────────────


class NumberedRecordSource(RecordSource):
    """Fetches resources 1..count concurrently, skipping absent ones.

    Subclasses implement ``resource_name()`` and ``fetch()``.
    """

    def __init__(self, count: int, workers: int = 8) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self.count = count
        self.workers = max(1, workers)

    def resource_name(self, index: int) -> str:
        raise NotImplementedError

    def fetch(self, index: int) -> Any | None:
        """Return the decoded payload for *index*, or None if it is absent."""
        raise NotImplementedError

    def _fetch_all(self) -> dict[int, Any]:
        payloads: dict[int, Any] = {}
        with ThreadPoolExecutor(max_workers=self.workers,
                                thread_name_prefix="record-fetch") as pool:
            futures = {pool.submit(self.fetch, i): i for i in range(1, self.count + 1)}
            try:
                for future in as_completed(futures):
                    payloads[futures[future]] = future.result()
            except LoadFailure:
                for f in futures:
                    f.cancel()
                raise
        return payloads

    def load(self) -> LoadResult:
        report = StepReport(step_name="load")
        report.metrics["requested"] = self.count
        payloads = self._fetch_all()

        records: list[Record] = []
        for index in range(1, self.count + 1):
            name = self.resource_name(index)
            payload = payloads.get(index)
            if payload is None:
                logger.warning("Record %d does not exist (%s); skipping", index, name)
                report.add_skip(MISSING_RESOURCE, "resource not found", item=str(index))
                continue
            records.append(Record.from_dict(payload, resource=name))
            report.items_processed += 1

        report.finish()
        return LoadResult(records=tuple(records), report=report)


class DirectoryRecordSource(NumberedRecordSource):
    """Reads ``<directory>/<i>.json`` for i in 1..count."""

    def __init__(self, directory: Path | str, count: int, workers: int = 8) -> None:
        super().__init__(count, workers)
        self.directory = Path(directory)

    def resource_name(self, index: int) -> str:
        return str(self.directory / f"{index}.json")

    def fetch(self, index: int) -> Any | None:
        return read_json_file(self.directory / f"{index}.json")

    def describe(self) -> str:
        return f"{self.directory}/{{1..{self.count}}}.json"


class HttpRecordSource(NumberedRecordSource):
    """GETs ``<base_url>/<i>.json`` for i in 1..count; HTTP 404 means absent."""

    def __init__(
        self,
        base_url: str,
        count: int,
        workers: int = 8,
        session_manager: SessionManager | None = None,
        timeout: float = 30.0,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        super().__init__(count, workers)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session_manager is None
        self.session_manager = session_manager or SessionManager(
            retry_strategy=retry_strategy, pool_maxsize=self.workers,
        )

    def resource_name(self, index: int) -> str:
        return f"{self.base_url}/{index}.json"

    def fetch(self, index: int) -> Any | None:
        return fetch_json(self.session_manager.session, self.resource_name(index),
                          timeout=self.timeout)

    def load(self) -> LoadResult:
        # Create the session before the workers share it
        _ = self.session_manager.session
        try:
            return super().load()
        finally:
            if self._owns_session:
                self.session_manager.close()

    def describe(self) -> str:
        return f"{self.base_url}/{{1..{self.count}}}.json"


# ── Combined (one JSON array) ─────────────────────────────────────────────────


class CombinedFileSource(RecordSource):
    """Reads a pre-joined JSON array file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> LoadResult:
        report = StepReport(step_name="load")
        payload = read_json_file(self.path)
        if payload is None:
            raise LoadFailure("Combined file not found", resource=str(self.path))
        records = records_from_array(payload, str(self.path))
        report.items_processed = len(records)
        report.finish()
        return LoadResult(records=tuple(records), report=report)

    def describe(self) -> str:
        return str(self.path)


class HttpCombinedSource(RecordSource):
    """GETs a pre-joined JSON array from one URL."""

    def __init__(
        self,
        url: str,
        session_manager: SessionManager | None = None,
        timeout: float = 30.0,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._owns_session = session_manager is None
        self.session_manager = session_manager or SessionManager(retry_strategy=retry_strategy)

    def load(self) -> LoadResult:
        report = StepReport(step_name="load")
        try:
            payload = fetch_json(self.session_manager.session, self.url, timeout=self.timeout)
        finally:
            if self._owns_session:
                self.session_manager.close()
        if payload is None:
            raise LoadFailure("Combined resource not found (HTTP 404)", resource=self.url)
        records = records_from_array(payload, self.url)
        report.items_processed = len(records)
        report.finish()
        return LoadResult(records=tuple(records), report=report)

    def describe(self) -> str:
        return self.url


def source_from_config(config: LoadConfig) -> RecordSource:
    """Pick the record source described by *config*.

    Precedence: combined URL, numbered URLs, combined file, numbered files.
    """
    retry = RetryStrategy(max_retries=config.max_retries,
                          backoff_factor=config.backoff_factor)
    if config.combined_url:
        return HttpCombinedSource(config.combined_url, timeout=config.timeout_seconds,
                                  retry_strategy=retry)
    if config.data_url:
        return HttpRecordSource(config.data_url, config.record_count,
                                workers=config.workers, timeout=config.timeout_seconds,
                                retry_strategy=retry)
    if config.combined_file:
        return CombinedFileSource(config.combined_file)
    return DirectoryRecordSource(config.data_dir, config.record_count,
                                 workers=config.workers)
