"""Household and membership schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from homestock.models.enums import Role


class HouseholdCreate(BaseModel):
    """Create a household; the creator becomes its admin."""

    name: str = Field(..., min_length=1, max_length=255)


class HouseholdResponse(BaseModel):
    """Household response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    onboarding_completed: bool
    created_at: datetime
    role: Role | None = None


class MemberAdd(BaseModel):
    """Add an existing user to the household."""

    user_email: EmailStr = Field(..., max_length=255)
    role: Role = Role.EMPLOYEE


class MemberUpdate(BaseModel):
    """Change a member's role."""

    role: Role


class MemberResponse(BaseModel):
    """Household member."""

    user_id: int
    email: str
    name: str | None
    role: Role
    joined_at: datetime
