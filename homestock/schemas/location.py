"""Location and storage container schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from homestock.models.enums import ContainerType


class LocationCreate(BaseModel):
    """Create a location (room or storage zone)."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_primary_storage: bool = False


class LocationUpdate(BaseModel):
    """Update a location."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_primary_storage: bool | None = None


class LocationPhotoResponse(BaseModel):
    """Location photo reference."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    photo_url: str
    caption: str | None
    created_at: datetime


class LocationResponse(BaseModel):
    """Location response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    name: str
    description: str | None
    is_primary_storage: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime
    photos: list[LocationPhotoResponse] = []


class ContainerCreate(BaseModel):
    """Create a storage container inside a location."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    container_type: ContainerType = ContainerType.OTHER
    capacity_info: str | None = Field(None, max_length=255)


class ContainerUpdate(BaseModel):
    """Update a storage container."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    container_type: ContainerType | None = None
    capacity_info: str | None = Field(None, max_length=255)


class ContainerResponse(BaseModel):
    """Storage container response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    location_id: int
    name: str
    description: str | None
    container_type: ContainerType
    capacity_info: str | None
    photo_url: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
