"""
Pytest fixtures for trait explorer tests.

Provides reusable record collections (as Records and as raw JSON payloads),
a directory of numbered record files with a gap, and a pre-loaded
FilterSession.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from engine.models import Record  # noqa: E402
from engine.session import FilterSession  # noqa: E402


# ── Helpers ───────────────────────────────────────────────────────────────────

def make_record(name: str, *pairs: tuple[str, str], description: str = "") -> Record:
    """Build a Record from (trait_type, value) pairs."""
    return Record.from_dict({
        "name": name,
        "description": description,
        "attributes": [{"trait_type": t, "value": v} for t, v in pairs],
    })


def write_numbered_files(directory: Path, payloads: dict[int, object]) -> Path:
    """Write ``<index>.json`` for each payload; returns *directory*."""
    directory.mkdir(parents=True, exist_ok=True)
    for index, payload in payloads.items():
        (directory / f"{index}.json").write_text(
            json.dumps(payload, ensure_ascii=False), encoding="utf-8"
        )
    return directory


# Raw payloads for records 1..5 in the shape the data files use
SAMPLE_PAYLOADS: dict[int, dict] = {
    1: {"name": "Item #1", "description": "first", "attributes": [
        {"trait_type": "Color", "value": "Red"},
        {"trait_type": "Size", "value": "Type10"},
        {"trait_type": "Hat", "value": ""},
    ]},
    2: {"name": "Item #2", "description": "second", "attributes": [
        {"trait_type": "Color", "value": "Blue"},
        {"trait_type": "Size", "value": "Type2"},
    ]},
    3: {"name": "Item #3", "description": "third", "attributes": [
        {"trait_type": "Color", "value": "Red"},
        {"trait_type": "Size", "value": "Type1"},
        {"trait_type": "Hat", "value": "Cap"},
    ]},
    4: {"name": "Item #4", "description": "fourth", "attributes": [
        {"trait_type": "Color", "value": "Green"},
        {"trait_type": "Size", "value": "Alpha"},
    ]},
    5: {"name": "Item #5", "description": "fifth", "attributes": [
        {"trait_type": "Color", "value": "Red"},
        {"trait_type": "Size", "value": "Type2"},
        {"trait_type": "Hat", "value": "Cap"},
    ]},
}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def color_records():
    """The two-record collection: A is Red, B is Blue."""
    return (
        make_record("A", ("Color", "Red")),
        make_record("B", ("Color", "Blue")),
    )


@pytest.fixture()
def sample_records():
    """Records 1..5 of SAMPLE_PAYLOADS, in order."""
    return tuple(Record.from_dict(SAMPLE_PAYLOADS[i]) for i in sorted(SAMPLE_PAYLOADS))


@pytest.fixture()
def records_dir(tmp_path):
    """Directory holding 1.json, 2.json, 4.json, 5.json — index 3 is missing."""
    payloads = {i: p for i, p in SAMPLE_PAYLOADS.items() if i != 3}
    return write_numbered_files(tmp_path / "json", payloads)


@pytest.fixture()
def full_records_dir(tmp_path):
    """Directory holding all of 1.json .. 5.json."""
    return write_numbered_files(tmp_path / "json", SAMPLE_PAYLOADS)


@pytest.fixture()
def loaded_session(sample_records):
    """A READY FilterSession over sample_records with the default policy."""
    session = FilterSession()
    session.set_records(sample_records)
    return session
