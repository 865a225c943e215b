"""
Trait index and record collection endpoints.

GET /api/v1/traits   → trait types (sorted) with display-sorted values
GET /api/v1/records  → the full record collection in load order
"""

from fastapi import APIRouter, Depends

from api.models import RecordOut, TraitOut, records_out
from api.session import get_session
from engine.session import FilterSession

router = APIRouter(tags=["traits"])


@router.get(
    "/traits",
    response_model=list[TraitOut],
    summary="List trait types and values",
)
def list_traits(session: FilterSession = Depends(get_session)) -> list[TraitOut]:
    """Return every trait type with its values in display order.

    Values are ordered by non-digit prefix, then by number, so ``Type2``
    lists before ``Type10``.  ``checked`` mirrors the selection state.
    """
    selection = session.selection
    return [
        TraitOut(trait_type=trait, values=values, checked=selection[trait])
        for trait, values in session.display_index()
    ]


@router.get(
    "/records",
    response_model=list[RecordOut],
    summary="List all records",
)
def list_records(session: FilterSession = Depends(get_session)) -> list[RecordOut]:
    """Return the full, unfiltered record collection."""
    return records_out(session.records)
