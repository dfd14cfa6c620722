"""Consumable and non-consumable item schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from homestock.models.enums import ConditionRating, StockStatus


class PlacementUpdate(BaseModel):
    """Move an item to a location and optional container."""

    location_id: int
    container_id: int | None = None


class ConsumableCreate(BaseModel):
    """Create a consumable."""

    name: str = Field(..., min_length=1, max_length=255)
    location_id: int
    container_id: int | None = None
    description: str | None = Field(None, max_length=2000)
    brand: str | None = Field(None, max_length=255)
    current_quantity: int = Field(0, ge=0)
    reorder_threshold: int = Field(0, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    expiration_date: date | None = None
    notes: str | None = None


class ConsumableUpdate(BaseModel):
    """Update consumable details. Quantity only changes through adjustments."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    brand: str | None = Field(None, max_length=255)
    reorder_threshold: int | None = Field(None, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    expiration_date: date | None = None
    notes: str | None = None

    @field_validator("reorder_threshold")
    @classmethod
    def threshold_not_null(cls, v: int | None) -> int:
        if v is None:
            raise ValueError("reorder_threshold may be omitted but not set to null")
        return v


class QuantityAdjust(BaseModel):
    """Signed change to a consumable's quantity."""

    delta: int


class ConsumableResponse(BaseModel):
    """Consumable response with derived stock status."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    location_id: int
    container_id: int | None
    name: str
    description: str | None
    brand: str | None
    current_quantity: int
    reorder_threshold: int
    unit_cost: Decimal | None
    expiration_date: date | None
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    stock_status: StockStatus = StockStatus.OK


class HouseholdSummary(BaseModel):
    """Dashboard counts for a household."""

    total_consumables: int
    total_non_consumables: int
    shopping_list_count: int
    low_stock_count: int
    expired_count: int


class QuantityAdjustResponse(BaseModel):
    """Result of a quantity adjustment."""

    item: ConsumableResponse
    old_quantity: int
    new_quantity: int
    old_status: StockStatus
    new_status: StockStatus
    shopping_list_triggered: bool


class NonConsumableCreate(BaseModel):
    """Create a non-consumable."""

    name: str = Field(..., min_length=1, max_length=255)
    location_id: int
    container_id: int | None = None
    description: str | None = Field(None, max_length=2000)
    brand: str | None = Field(None, max_length=255)
    model: str | None = Field(None, max_length=255)
    serial_number: str | None = Field(None, max_length=255)
    condition: ConditionRating = ConditionRating.GOOD
    purchase_date: date | None = None
    purchase_price: Decimal | None = Field(None, ge=0)
    warranty_expiration: date | None = None
    notes: str | None = None


class NonConsumableUpdate(BaseModel):
    """Update a non-consumable.

    ``condition`` is accepted only while the item has no condition history.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    brand: str | None = Field(None, max_length=255)
    model: str | None = Field(None, max_length=255)
    serial_number: str | None = Field(None, max_length=255)
    condition: ConditionRating | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = Field(None, ge=0)
    warranty_expiration: date | None = None
    notes: str | None = None


class NonConsumableResponse(BaseModel):
    """Non-consumable response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    location_id: int
    container_id: int | None
    name: str
    description: str | None
    brand: str | None
    model: str | None
    serial_number: str | None
    condition: ConditionRating
    purchase_date: date | None
    purchase_price: Decimal | None
    warranty_expiration: date | None
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ConditionLogCreate(BaseModel):
    """Append a condition observation."""

    rating: ConditionRating
    notes: str | None = None
    maintenance_performed: str | None = None
    estimated_repair_cost: Decimal | None = Field(None, ge=0)
    photos: list[str] = Field(default_factory=list)


class ConditionLogResponse(BaseModel):
    """Condition log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    non_consumable_id: int
    rating: ConditionRating
    notes: str | None
    maintenance_performed: str | None
    estimated_repair_cost: Decimal | None
    photos: list[str]
    logged_by: int
    created_at: datetime
