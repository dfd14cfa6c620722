"""Household and membership endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from homestock.api.dependencies import CurrentActor, CurrentUser, get_household_service
from homestock.models.enums import Role
from homestock.models.household import HouseholdMember
from homestock.schemas.household import (
    HouseholdCreate,
    HouseholdResponse,
    MemberAdd,
    MemberResponse,
    MemberUpdate,
)
from homestock.schemas.inventory import HouseholdSummary
from homestock.services.households import HouseholdService

router = APIRouter(prefix="/api/v1/households", tags=["households"])

Households = Annotated[HouseholdService, Depends(get_household_service)]


def member_response(member: HouseholdMember) -> MemberResponse:
    return MemberResponse(
        user_id=member.user_id,
        email=member.user.email,
        name=member.user.name,
        role=member.role,
        joined_at=member.joined_at,
    )


@router.post("", response_model=HouseholdResponse, status_code=status.HTTP_201_CREATED)
async def create_household(data: HouseholdCreate, current_user: CurrentUser, households: Households):
    """Create a household; the caller becomes its admin."""
    household = households.create_household(current_user, data.name)
    response = HouseholdResponse.model_validate(household)
    response.role = Role.ADMIN
    return response


@router.get("", response_model=list[HouseholdResponse])
async def list_households(current_user: CurrentUser, households: Households):
    """Households the caller belongs to, with the caller's role."""
    result = []
    for household, role in households.households_for(current_user):
        response = HouseholdResponse.model_validate(household)
        response.role = role
        result.append(response)
    return result


@router.get("/{household_id}", response_model=HouseholdResponse)
async def get_household(household_id: int, actor: CurrentActor, households: Households):
    response = HouseholdResponse.model_validate(households.get_household(household_id))
    response.role = actor.role
    return response


@router.get("/{household_id}/summary", response_model=HouseholdSummary)
async def household_summary(household_id: int, actor: CurrentActor, households: Households):
    """Item, shopping and reorder counts for the dashboard."""
    return households.summary(actor.household_id)


@router.get("/{household_id}/members", response_model=list[MemberResponse])
async def list_members(household_id: int, actor: CurrentActor, households: Households):
    return [member_response(m) for m in households.list_members(actor.household_id)]


@router.post(
    "/{household_id}/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED
)
async def add_member(household_id: int, data: MemberAdd, actor: CurrentActor, households: Households):
    """Add an existing user to the household (admin only)."""
    return member_response(households.add_member(actor, data.user_email, data.role))


@router.put("/{household_id}/members/{user_id}", response_model=MemberResponse)
async def update_member(
    household_id: int, user_id: int, data: MemberUpdate, actor: CurrentActor, households: Households
):
    return member_response(households.update_member_role(actor, user_id, data.role))


@router.delete("/{household_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(household_id: int, user_id: int, actor: CurrentActor, households: Households):
    households.remove_member(actor, user_id)


@router.delete("/{household_id}/purge")
async def purge_household(household_id: int, actor: CurrentActor, households: Households):
    """Hard delete all of the household's data. Test environments only."""
    return {"purged": households.purge(actor)}
