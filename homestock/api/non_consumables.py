"""Non-consumable item and condition log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from homestock.api.dependencies import (
    CurrentActor,
    get_condition_service,
    get_inventory_service,
    get_storage_service,
)
from homestock.models.inventory_item import NonConsumable
from homestock.schemas.inventory import (
    ConditionLogCreate,
    ConditionLogResponse,
    NonConsumableCreate,
    NonConsumableResponse,
    NonConsumableUpdate,
    PlacementUpdate,
)
from homestock.services.condition import ConditionService
from homestock.services.inventory import InventoryService
from homestock.services.storage import StorageService

router = APIRouter(
    prefix="/api/v1/households/{household_id}/non-consumables", tags=["non-consumables"]
)

Inventory = Annotated[InventoryService, Depends(get_inventory_service)]
Conditions = Annotated[ConditionService, Depends(get_condition_service)]
Storage = Annotated[StorageService, Depends(get_storage_service)]


@router.get("", response_model=list[NonConsumableResponse])
async def list_non_consumables(
    household_id: int,
    actor: CurrentActor,
    inventory: Inventory,
    location_id: int | None = None,
    container_id: int | None = None,
):
    return inventory.list_non_consumables(actor.household_id, location_id, container_id)


@router.post("", response_model=NonConsumableResponse, status_code=status.HTTP_201_CREATED)
async def create_non_consumable(
    household_id: int, data: NonConsumableCreate, actor: CurrentActor, inventory: Inventory
):
    return inventory.create_non_consumable(actor, data)


@router.get("/{item_id}", response_model=NonConsumableResponse)
async def get_non_consumable(
    household_id: int, item_id: int, actor: CurrentActor, inventory: Inventory
):
    return inventory.get_non_consumable(actor.household_id, item_id)


@router.put("/{item_id}", response_model=NonConsumableResponse)
async def update_non_consumable(
    household_id: int,
    item_id: int,
    data: NonConsumableUpdate,
    actor: CurrentActor,
    inventory: Inventory,
):
    return inventory.update_non_consumable(actor, item_id, data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_non_consumable(
    household_id: int, item_id: int, actor: CurrentActor, inventory: Inventory
):
    inventory.delete_non_consumable(actor, item_id)


@router.put("/{item_id}/placement", response_model=NonConsumableResponse)
async def place_non_consumable(
    household_id: int,
    item_id: int,
    data: PlacementUpdate,
    actor: CurrentActor,
    storage: Storage,
):
    return storage.place_item(actor, NonConsumable, item_id, data.location_id, data.container_id)


@router.post(
    "/{item_id}/conditions",
    response_model=ConditionLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def log_condition(
    household_id: int,
    item_id: int,
    data: ConditionLogCreate,
    actor: CurrentActor,
    conditions: Conditions,
):
    """Append a condition observation; the item's condition follows the newest one."""
    return conditions.log_condition(actor, item_id, data)


@router.get("/{item_id}/conditions", response_model=list[ConditionLogResponse])
async def condition_history(
    household_id: int, item_id: int, actor: CurrentActor, conditions: Conditions
):
    """Condition history, newest first."""
    return conditions.history(actor.household_id, item_id)
