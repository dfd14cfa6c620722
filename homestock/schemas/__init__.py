"""Pydantic schemas for API requests and responses."""

from homestock.schemas.activity import ActivityResponse
from homestock.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from homestock.schemas.household import (
    HouseholdCreate,
    HouseholdResponse,
    MemberAdd,
    MemberResponse,
    MemberUpdate,
)
from homestock.schemas.inventory import (
    ConditionLogCreate,
    ConditionLogResponse,
    ConsumableCreate,
    ConsumableResponse,
    ConsumableUpdate,
    NonConsumableCreate,
    NonConsumableResponse,
    NonConsumableUpdate,
    PlacementUpdate,
    QuantityAdjust,
    QuantityAdjustResponse,
)
from homestock.schemas.location import (
    ContainerCreate,
    ContainerResponse,
    ContainerUpdate,
    LocationCreate,
    LocationPhotoResponse,
    LocationResponse,
    LocationUpdate,
)
from homestock.schemas.onboarding import (
    OnboardingData,
    OnboardingSave,
    OnboardingStateResponse,
    OnboardingStepInput,
)
from homestock.schemas.shopping import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
    ShoppingListResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "HouseholdCreate",
    "HouseholdResponse",
    "MemberAdd",
    "MemberUpdate",
    "MemberResponse",
    "LocationCreate",
    "LocationUpdate",
    "LocationResponse",
    "LocationPhotoResponse",
    "ContainerCreate",
    "ContainerUpdate",
    "ContainerResponse",
    "PlacementUpdate",
    "ConsumableCreate",
    "ConsumableUpdate",
    "ConsumableResponse",
    "QuantityAdjust",
    "QuantityAdjustResponse",
    "NonConsumableCreate",
    "NonConsumableUpdate",
    "NonConsumableResponse",
    "ConditionLogCreate",
    "ConditionLogResponse",
    "ShoppingListCreate",
    "ShoppingListItemCreate",
    "ShoppingListItemUpdate",
    "ShoppingListItemResponse",
    "ShoppingListResponse",
    "ActivityResponse",
    "OnboardingData",
    "OnboardingSave",
    "OnboardingStepInput",
    "OnboardingStateResponse",
]
