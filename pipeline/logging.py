"""
Load accounting — structured skip/error records for record loading steps.

Provides:
  - StepReport: lightweight dataclass that captures what a load or join step
    did, what it skipped, and why.
  - SkipRecord: single skip event with a category and detail string.

Usage inside a loader::

    from pipeline.logging import StepReport

    report = StepReport(step_name="load")
    ...
    report.items_processed += 1
    report.add_skip(MISSING_RESOURCE, "file not found", item="3.json")
    ...
    report.finish()
    print(report.console_summary())   # "4 processed | 1 skipped (1 missing resource)"

Skip categories (for SkipRecord.category):
    missing_resource  — a numbered record file / URL does not exist
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

MISSING_RESOURCE = "missing_resource"


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass
class SkipRecord:
    """One thing that was skipped, with a machine-readable category."""

    category: str          # e.g. "missing_resource"
    detail: str            # human-readable explanation
    item: str = ""         # optional: file path, URL, record index

    def to_dict(self) -> dict[str, str]:
        d: dict[str, str] = {"category": self.category, "detail": self.detail}
        if self.item:
            d["item"] = self.item
        return d


@dataclass
class StepReport:
    """Structured summary of what one load or join step accomplished."""

    step_name: str
    status: str = "started"                    # started | completed | failed
    elapsed_seconds: float = 0.0
    items_processed: int = 0
    items_skipped: int = 0
    skips: list[SkipRecord] = field(default_factory=list)
    metrics: dict[str, Any] = field(default_factory=dict)
    _started: float = field(default_factory=time.monotonic, repr=False)

    # ── helpers ───────────────────────────────────────────────────────────

    def add_skip(self, category: str, detail: str, item: str = "") -> None:
        self.skips.append(SkipRecord(category=category, detail=detail, item=item))
        self.items_skipped += 1

    def finish(self, status: str = "completed") -> "StepReport":
        self.elapsed_seconds = time.monotonic() - self._started
        self.status = status
        return self

    def skipped_items(self, category: str | None = None) -> list[str]:
        return [s.item for s in self.skips if category is None or s.category == category]

    def skip_counts_by_category(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for s in self.skips:
            counts[s.category] = counts.get(s.category, 0) + 1
        return counts

    def console_summary(self) -> str:
        """One-line summary suitable for the terminal."""
        parts: list[str] = []
        if self.items_processed:
            parts.append(f"{self.items_processed:,} processed")
        if self.items_skipped:
            cats = self.skip_counts_by_category()
            skip_parts = [f"{v} {k.replace('_', ' ')}" for k, v in sorted(cats.items())]
            parts.append(f"{self.items_skipped:,} skipped ({', '.join(skip_parts)})")
        for key, val in self.metrics.items():
            if isinstance(val, (int, float)):
                parts.append(f"{key}: {val:,}" if isinstance(val, int) else f"{key}: {val:.1f}")
        return " | ".join(parts) if parts else "no activity"

    def to_dict(self) -> dict[str, Any]:
        d = {
            "step_name": self.step_name,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "items_processed": self.items_processed,
            "items_skipped": self.items_skipped,
            "metrics": self.metrics,
        }
        if self.skips:
            d["skips"] = [s.to_dict() for s in self.skips]
        return d
