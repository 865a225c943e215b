"""
Record data model — Attribute, Record and the sentinel "no match" record.

Records arrive as JSON objects shaped like::

    {
        "name": "Item #12",
        "description": "...",
        "attributes": [
            {"trait_type": "Color", "value": "Red"},
            {"trait_type": "Size", "value": "10"}
        ]
    }

Both classes are frozen so a loaded collection cannot be mutated after the
trait index has been derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from engine.errors import LoadFailure


@dataclass(frozen=True)
class Attribute:
    """One named facet of a record.  An empty value means "no attribute"."""

    trait_type: str
    value: str

    @property
    def is_empty(self) -> bool:
        return self.value == ""

    def to_dict(self) -> dict[str, str]:
        return {"trait_type": self.trait_type, "value": self.value}


@dataclass(frozen=True)
class Record:
    """A named, described item with an ordered tuple of attributes.

    The same trait_type may appear more than once in ``attributes``; the
    model keeps every entry as loaded.
    """

    name: str
    description: str = ""
    attributes: tuple[Attribute, ...] = field(default_factory=tuple)

    def has_attribute(self, trait_type: str, value: str) -> bool:
        """Return True if any attribute equals the (trait_type, value) pair."""
        return any(
            a.trait_type == trait_type and a.value == value
            for a in self.attributes
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "attributes": [a.to_dict() for a in self.attributes],
        }

    @classmethod
    def from_dict(cls, data: Any, resource: str = "") -> "Record":
        """Build a Record from its decoded JSON object.

        Args:
            data: Decoded JSON value for one record.
            resource: Where the payload came from, used in error messages.

        Raises:
            LoadFailure: If the payload is not an object, has no ``name``,
                or contains an attribute entry that is not an object.
        """
        if not isinstance(data, dict):
            raise LoadFailure(
                f"Record payload must be a JSON object, got {type(data).__name__}",
                resource=resource,
            )
        if "name" not in data:
            raise LoadFailure("Record payload has no 'name' field", resource=resource)

        raw_attrs = data.get("attributes") or []
        if not isinstance(raw_attrs, list):
            raise LoadFailure("'attributes' must be a JSON array", resource=resource)

        attributes = []
        for entry in raw_attrs:
            if not isinstance(entry, dict):
                raise LoadFailure(
                    "Attribute entries must be JSON objects", resource=resource
                )
            # NFT-style metadata often carries numeric values
            attributes.append(Attribute(
                trait_type=_as_text(entry.get("trait_type")),
                value=_as_text(entry.get("value")),
            ))

        return cls(
            name=_as_text(data["name"]),
            description=_as_text(data.get("description")),
            attributes=tuple(attributes),
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


SENTINEL_NAME = "NONE_SENTINEL"

# Placeholder returned under NoResultsPolicy.SENTINEL when nothing matches.
SENTINEL_RECORD = Record(name=SENTINEL_NAME, description="", attributes=())


def is_sentinel(record: Record) -> bool:
    return record == SENTINEL_RECORD
