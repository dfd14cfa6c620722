"""Identity schemas: family member accounts and bearer tokens."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from homestock.models.enums import Role


class Credentials(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRegister(Credentials):
    """New family member account."""

    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = Field(None, max_length=255)


class UserLogin(Credentials):
    pass


class MembershipSummary(BaseModel):
    """A household the user belongs to and the role held there."""

    model_config = ConfigDict(from_attributes=True)

    household_id: int
    role: Role


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    memberships: list[MembershipSummary] = []


class AuthResponse(BaseModel):
    """Token plus the account it was issued for."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse
