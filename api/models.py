"""
Pydantic request/response models for the API.

Records are serialized in the same JSON shape they are loaded from, so a
front end can render API output and raw record files with the same code.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from engine.models import Record, is_sentinel
from engine.session import SelectionUpdate


# ── Record models ─────────────────────────────────────────────────────────────

class AttributeOut(BaseModel):
    """One trait/value pair of a record."""
    trait_type: str = Field(..., description="Trait name", examples=["Color"])
    value: str = Field(..., description="Trait value", examples=["Red"])


class RecordOut(BaseModel):
    """A record as loaded.  The no-match sentinel has name NONE_SENTINEL."""
    name: str = Field(..., description="Record name", examples=["Item #12"])
    description: str = Field("", description="Free-text description")
    attributes: list[AttributeOut] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: Record) -> "RecordOut":
        return cls(
            name=record.name,
            description=record.description,
            attributes=[
                AttributeOut(trait_type=a.trait_type, value=a.value)
                for a in record.attributes
            ],
        )


def records_out(records: tuple[Record, ...]) -> list[RecordOut]:
    return [RecordOut.from_record(r) for r in records]


# ── Trait index models ────────────────────────────────────────────────────────

class TraitOut(BaseModel):
    """A trait type and its values in display order, with checkbox state."""
    trait_type: str = Field(..., examples=["Color"])
    values: list[str] = Field(..., description="Distinct values, display-sorted",
                              examples=[["Blue", "Red"]])
    checked: dict[str, bool] = Field(..., description="Current checkbox state per value")


# ── Selection models ──────────────────────────────────────────────────────────

class ToggleRequest(BaseModel):
    """Which checkbox to flip.  Both keys must come from /traits."""
    trait_type: str = Field(..., examples=["Color"])
    value: str = Field(..., examples=["Red"])


class SelectionOut(BaseModel):
    """Selection state plus the filtered result it produces."""
    selection: dict[str, dict[str, bool]]
    all_unchecked: bool
    results: list[RecordOut]
    result_count: int = Field(..., description="Number of real (non-sentinel) matches")

    @classmethod
    def from_update(cls, update: SelectionUpdate) -> "SelectionOut":
        return cls(
            selection=update.selection,
            all_unchecked=update.all_unchecked,
            results=records_out(update.results),
            result_count=sum(1 for r in update.results if not is_sentinel(r)),
        )


# ── Meta models ───────────────────────────────────────────────────────────────

class HealthOut(BaseModel):
    """Loading flag and load accounting."""
    status: str = Field(..., description="empty | loading | ok | failed", examples=["ok"])
    records: int = Field(0, description="Records in the loaded collection")
    trait_types: int = Field(0, description="Distinct trait types indexed")
    error: str | None = Field(None, description="Load error when status is failed")
    load: dict | None = Field(None, description="Load step report")


class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str
    detail: str | None = None
    status_code: int
