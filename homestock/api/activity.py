"""Activity feed endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from homestock.api.dependencies import CurrentActor, get_activity_ledger
from homestock.schemas.activity import ActivityResponse
from homestock.services.activity import ActivityLedger

router = APIRouter(prefix="/api/v1/households/{household_id}/activity", tags=["activity"])


@router.get("", response_model=list[ActivityResponse])
async def recent_activity(
    household_id: int,
    actor: CurrentActor,
    ledger: Annotated[ActivityLedger, Depends(get_activity_ledger)],
    limit: Annotated[int | None, Query(ge=1)] = None,
):
    """Most recent household activity, newest first."""
    return ledger.list_recent(actor.household_id, limit)
