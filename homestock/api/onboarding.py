"""Onboarding wizard endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from homestock.api.dependencies import CurrentUser, get_onboarding_service
from homestock.schemas.onboarding import OnboardingSave, OnboardingStateResponse, OnboardingStepInput
from homestock.services.onboarding import OnboardingService

router = APIRouter(prefix="/api/v1/onboarding", tags=["onboarding"])

Onboarding = Annotated[OnboardingService, Depends(get_onboarding_service)]


@router.get("", response_model=OnboardingStateResponse)
async def get_progress(current_user: CurrentUser, onboarding: Onboarding):
    """Where the caller left off."""
    return onboarding.get_state(current_user)


@router.put("", response_model=OnboardingStateResponse)
async def save_progress(data: OnboardingSave, current_user: CurrentUser, onboarding: Onboarding):
    return onboarding.save_progress(current_user, data)


@router.post("/advance", response_model=OnboardingStateResponse)
async def advance(data: OnboardingStepInput, current_user: CurrentUser, onboarding: Onboarding):
    """Finish the current step with the submitted data."""
    return onboarding.advance(current_user, data)


@router.post("/back", response_model=OnboardingStateResponse)
async def back(current_user: CurrentUser, onboarding: Onboarding):
    return onboarding.back(current_user)


@router.post("/skip", response_model=OnboardingStateResponse)
async def skip(current_user: CurrentUser, onboarding: Onboarding):
    return onboarding.skip(current_user)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def reset(current_user: CurrentUser, onboarding: Onboarding):
    onboarding.reset(current_user)
