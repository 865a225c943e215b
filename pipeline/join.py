"""
Offline join — concatenate numbered record files into one JSON array.

Reads ``<json_dir>/1.json`` … ``<json_dir>/<count>.json`` in order, skips
indices whose file does not exist (with a warning), and writes the decoded
payloads as a single indented JSON array.  The output is the "combined"
shape read by ``loader.CombinedFileSource``.

Payloads are copied as-is; record validation happens at load time.

Usage::

    from pipeline.join import join_record_files

    result = join_record_files(Path("public/json"), count=1600)
    result.output_path      # public/json/combined.json
    result.report.console_summary()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pipeline.logging import MISSING_RESOURCE, StepReport
from utils.common import read_json_file, write_json_file
from utils.config import DEFAULT_RECORD_COUNT

logger = logging.getLogger(__name__)

COMBINED_FILENAME = "combined.json"


@dataclass
class JoinResult:
    """Where the combined array went and what was skipped on the way."""

    output_path: Path
    records_written: int
    report: StepReport


def join_record_files(
    json_dir: Path,
    count: int = DEFAULT_RECORD_COUNT,
    output: Path | None = None,
) -> JoinResult:
    """Join numbered record files into one JSON array file.

    Args:
        json_dir: Directory holding the numbered ``<i>.json`` files.
        count: Highest index to look for (indices start at 1).
        output: Destination file (default: ``<json_dir>/combined.json``).

    Returns:
        JoinResult with the output path, the number of records written and
        a StepReport listing every missing index.

    Raises:
        LoadFailure: If any existing file holds malformed JSON.  Nothing is
            written in that case.
    """
    json_dir = Path(json_dir)
    output = Path(output) if output is not None else json_dir / COMBINED_FILENAME
    report = StepReport(step_name="join")
    report.metrics["requested"] = count

    combined = []
    for i in range(1, count + 1):
        path = json_dir / f"{i}.json"
        payload = read_json_file(path)
        if payload is None:
            logger.warning("File %d.json does not exist.", i)
            report.add_skip(MISSING_RESOURCE, "file not found", item=str(i))
            continue
        combined.append(payload)
        report.items_processed += 1

    write_json_file(output, combined)
    report.finish()
    logger.info("Combined JSON saved to %s (%s)", output, report.console_summary())
    return JoinResult(output_path=output, records_written=len(combined), report=report)
