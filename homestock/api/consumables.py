"""Consumable item endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from homestock.api.dependencies import (
    CurrentActor,
    get_inventory_service,
    get_stock_service,
    get_storage_service,
)
from homestock.models.enums import StockStatus
from homestock.models.inventory_item import Consumable
from homestock.schemas.inventory import (
    ConsumableCreate,
    ConsumableResponse,
    ConsumableUpdate,
    PlacementUpdate,
    QuantityAdjust,
    QuantityAdjustResponse,
)
from homestock.services.inventory import InventoryService
from homestock.services.stock import StockService, serialize_consumable
from homestock.services.storage import StorageService

router = APIRouter(prefix="/api/v1/households/{household_id}/consumables", tags=["consumables"])

Inventory = Annotated[InventoryService, Depends(get_inventory_service)]
Stock = Annotated[StockService, Depends(get_stock_service)]
Storage = Annotated[StorageService, Depends(get_storage_service)]


@router.get("", response_model=list[ConsumableResponse])
async def list_consumables(
    household_id: int,
    actor: CurrentActor,
    inventory: Inventory,
    location_id: int | None = None,
    container_id: int | None = None,
    stock_status: Annotated[StockStatus | None, Query(alias="status")] = None,
    expired: bool | None = None,
):
    """Active consumables, optionally filtered by placement, stock status or expiry."""
    items = inventory.list_consumables(
        actor.household_id, location_id, container_id, stock_status, expired
    )
    return [serialize_consumable(item) for item in items]


@router.get("/low-stock", response_model=list[ConsumableResponse])
async def list_low_stock(household_id: int, actor: CurrentActor, stock: Stock):
    """Consumables that are low, critical or out."""
    return [serialize_consumable(item) for item in stock.low_stock(actor.household_id)]


@router.post("", response_model=ConsumableResponse, status_code=status.HTTP_201_CREATED)
async def create_consumable(
    household_id: int, data: ConsumableCreate, actor: CurrentActor, inventory: Inventory
):
    return serialize_consumable(inventory.create_consumable(actor, data))


@router.get("/{consumable_id}", response_model=ConsumableResponse)
async def get_consumable(
    household_id: int, consumable_id: int, actor: CurrentActor, inventory: Inventory
):
    return serialize_consumable(inventory.get_consumable(actor.household_id, consumable_id))


@router.put("/{consumable_id}", response_model=ConsumableResponse)
async def update_consumable(
    household_id: int,
    consumable_id: int,
    data: ConsumableUpdate,
    actor: CurrentActor,
    inventory: Inventory,
):
    """Update details. Use the adjust endpoint to change the quantity."""
    return serialize_consumable(inventory.update_consumable(actor, consumable_id, data))


@router.delete("/{consumable_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_consumable(
    household_id: int, consumable_id: int, actor: CurrentActor, inventory: Inventory
):
    inventory.delete_consumable(actor, consumable_id)


@router.post("/{consumable_id}/adjust", response_model=QuantityAdjustResponse)
async def adjust_quantity(
    household_id: int,
    consumable_id: int,
    data: QuantityAdjust,
    actor: CurrentActor,
    stock: Stock,
):
    """Apply a signed quantity change."""
    result = stock.adjust_quantity(actor, consumable_id, data.delta)
    return QuantityAdjustResponse(
        item=serialize_consumable(result.item),
        old_quantity=result.old_quantity,
        new_quantity=result.new_quantity,
        old_status=result.old_status,
        new_status=result.new_status,
        shopping_list_triggered=result.trigger is not None,
    )


@router.put("/{consumable_id}/placement", response_model=ConsumableResponse)
async def place_consumable(
    household_id: int,
    consumable_id: int,
    data: PlacementUpdate,
    actor: CurrentActor,
    storage: Storage,
):
    item = storage.place_item(actor, Consumable, consumable_id, data.location_id, data.container_id)
    return serialize_consumable(item)
