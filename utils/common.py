"""Common helpers shared by the loaders and the offline join tool."""

import json
import time
from pathlib import Path
from typing import Any, Optional

from engine.errors import LoadFailure


def elapsed(start_time: float) -> str:
    """Format elapsed time from start_time to now as human-readable string.

    Examples:
        0m 30s, 2m 15s, 1h 05m 30s
    """
    secs = int(time.time() - start_time)
    m, s = divmod(secs, 60)
    h, m = divmod(m, 60)
    if h:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def read_json_file(path: Path) -> Optional[Any]:
    """Read and decode one JSON file.

    Returns:
        The decoded value, or None if *path* does not exist.

    Raises:
        LoadFailure: If the file cannot be read or is not valid JSON.
    """
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadFailure(f"Cannot read file: {e}", resource=str(path)) from e
    try:
        return json.loads(text)
    except ValueError as e:
        raise LoadFailure(f"Malformed JSON: {e}", resource=str(path)) from e
    except RecursionError as e:
        raise LoadFailure("Malformed JSON: nesting too deep", resource=str(path)) from e


def write_json_file(path: Path, data: Any) -> None:
    """Write *data* as indented UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
