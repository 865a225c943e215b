"""
Selection state endpoints.

GET  /api/v1/selection         → current checkbox state and filtered result
POST /api/v1/selection/toggle  → flip one (trait_type, value) checkbox
POST /api/v1/selection/reset   → uncheck everything, clear the result
GET  /api/v1/results           → current filtered result only

Filtering is a flat AND over every checked pair; see engine.filters.
"""

from fastapi import APIRouter, Depends

from api.models import RecordOut, SelectionOut, ToggleRequest, records_out
from api.session import get_session
from engine.session import FilterSession

router = APIRouter(tags=["selection"])


@router.get(
    "/selection",
    response_model=SelectionOut,
    summary="Current selection and result",
)
def get_selection(session: FilterSession = Depends(get_session)) -> SelectionOut:
    return SelectionOut.from_update(session.snapshot())


@router.post(
    "/selection/toggle",
    response_model=SelectionOut,
    summary="Toggle one trait value",
    responses={400: {"description": "Unknown trait type or value"}},
)
def toggle_selection(
    body: ToggleRequest,
    session: FilterSession = Depends(get_session),
) -> SelectionOut:
    """Flip the checkbox for ``(trait_type, value)`` and return the new result.

    Both keys must come from ``GET /traits``; anything else is a 400.
    """
    update = session.toggle(body.trait_type, body.value)
    return SelectionOut.from_update(update)


@router.post(
    "/selection/reset",
    response_model=SelectionOut,
    summary="Clear all selections",
)
def reset_selection(session: FilterSession = Depends(get_session)) -> SelectionOut:
    """Uncheck every value.  The result is always empty after a reset."""
    return SelectionOut.from_update(session.reset())


@router.get(
    "/results",
    response_model=list[RecordOut],
    summary="Current filtered result",
)
def get_results(session: FilterSession = Depends(get_session)) -> list[RecordOut]:
    return records_out(session.results)
