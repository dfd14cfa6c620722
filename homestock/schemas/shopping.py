"""Shopping list schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ShoppingListCreate(BaseModel):
    """Create a shopping list."""

    name: str = Field("Shopping List", min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class ShoppingListItemCreate(BaseModel):
    """Add an entry to a shopping list."""

    item_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    notes: str | None = Field(None, max_length=2000)
    estimated_cost: Decimal | None = Field(None, ge=0)
    consumable_id: int | None = None


class ShoppingListItemUpdate(BaseModel):
    """Update a shopping list entry."""

    item_name: str | None = Field(None, min_length=1, max_length=255)
    quantity: int | None = Field(None, ge=1)
    notes: str | None = Field(None, max_length=2000)
    estimated_cost: Decimal | None = Field(None, ge=0)


class ShoppingListItemResponse(BaseModel):
    """Shopping list entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    shopping_list_id: int
    item_name: str
    quantity: int
    notes: str | None
    estimated_cost: Decimal | None
    is_purchased: bool
    purchased_by: int | None
    purchased_at: datetime | None
    consumable_id: int | None
    created_at: datetime


class ShoppingListResponse(BaseModel):
    """Shopping list with its entries."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime
    items: list[ShoppingListItemResponse] = []
