"""Shopping list endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from homestock.api.dependencies import CurrentActor, get_shopping_service
from homestock.schemas.shopping import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
    ShoppingListResponse,
)
from homestock.services.shopping import ShoppingService

router = APIRouter(prefix="/api/v1/households/{household_id}", tags=["shopping"])

Shopping = Annotated[ShoppingService, Depends(get_shopping_service)]


@router.get("/shopping-lists", response_model=list[ShoppingListResponse])
async def list_shopping_lists(household_id: int, actor: CurrentActor, shopping: Shopping):
    return shopping.list_lists(actor.household_id)


@router.post(
    "/shopping-lists", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED
)
async def create_shopping_list(
    household_id: int, data: ShoppingListCreate, actor: CurrentActor, shopping: Shopping
):
    return shopping.create_list(actor, data)


@router.get("/shopping-lists/{list_id}", response_model=ShoppingListResponse)
async def get_shopping_list(
    household_id: int, list_id: int, actor: CurrentActor, shopping: Shopping
):
    return shopping.get_list(actor.household_id, list_id)


@router.delete("/shopping-lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shopping_list(
    household_id: int, list_id: int, actor: CurrentActor, shopping: Shopping
):
    shopping.delete_list(actor, list_id)


@router.post(
    "/shopping-lists/{list_id}/items",
    response_model=ShoppingListItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_shopping_item(
    household_id: int,
    list_id: int,
    data: ShoppingListItemCreate,
    actor: CurrentActor,
    shopping: Shopping,
):
    return shopping.add_entry(actor, list_id, data)


@router.put("/shopping-items/{entry_id}", response_model=ShoppingListItemResponse)
async def update_shopping_item(
    household_id: int,
    entry_id: int,
    data: ShoppingListItemUpdate,
    actor: CurrentActor,
    shopping: Shopping,
):
    return shopping.update_entry(actor, entry_id, data)


@router.post("/shopping-items/{entry_id}/purchase", response_model=ShoppingListItemResponse)
async def purchase_shopping_item(
    household_id: int, entry_id: int, actor: CurrentActor, shopping: Shopping
):
    """Mark an entry as bought by the caller."""
    return shopping.set_purchased(actor, entry_id, True)


@router.post("/shopping-items/{entry_id}/unpurchase", response_model=ShoppingListItemResponse)
async def unpurchase_shopping_item(
    household_id: int, entry_id: int, actor: CurrentActor, shopping: Shopping
):
    return shopping.set_purchased(actor, entry_id, False)


@router.delete("/shopping-items/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shopping_item(
    household_id: int, entry_id: int, actor: CurrentActor, shopping: Shopping
):
    shopping.delete_entry(actor, entry_id)
