"""Onboarding wizard schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from homestock.models.enums import ContainerType, OnboardingStep


class RoomData(BaseModel):
    """A room entered during room setup; ``id`` is set once the location exists."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_primary_storage: bool = False
    has_photo: bool = False
    id: int | None = None


class FirstContainerData(BaseModel):
    """The first container; placed in ``location_id`` or the first room."""

    name: str = Field(..., min_length=1, max_length=255)
    location_id: int | None = None
    container_type: ContainerType = ContainerType.OTHER
    photo_url: str | None = None
    id: int | None = None


class FirstItemData(BaseModel):
    """The first consumable; placed in the first container when none is given."""

    name: str = Field(..., min_length=1, max_length=255)
    location_id: int | None = None
    container_id: int | None = None
    current_quantity: int = Field(1, ge=0)
    reorder_threshold: int = Field(0, ge=0)
    id: int | None = None


class OnboardingData(BaseModel):
    """Accumulated wizard data."""

    household_name: str | None = Field(None, max_length=255)
    household_id: int | None = None
    rooms: list[RoomData] = Field(default_factory=list)
    first_container: FirstContainerData | None = None
    first_item: FirstItemData | None = None


class OnboardingStepInput(BaseModel):
    """Data submitted when finishing the current step; unset fields keep their value."""

    household_name: str | None = Field(None, min_length=1, max_length=255)
    rooms: list[RoomData] | None = None
    first_container: FirstContainerData | None = None
    first_item: FirstItemData | None = None


class OnboardingSave(BaseModel):
    """Raw progress upsert."""

    current_step: OnboardingStep
    data: OnboardingData = Field(default_factory=OnboardingData)


class OnboardingStateResponse(BaseModel):
    """Current wizard state for the user."""

    current_step: OnboardingStep
    step_name: str
    completed_steps: list[int]
    can_skip: bool
    data: OnboardingData
    updated_at: datetime | None = None
