"""Shopping lists and the low-stock restock collaborator."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from homestock.exceptions import CrossTenantAccess, NotFound
from homestock.models.enums import ActivityType, ItemKind
from homestock.models.inventory_item import Consumable
from homestock.models.shopping_list import ShoppingList, ShoppingListItem
from homestock.schemas.shopping import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
)
from homestock.services.activity import ActivityLedger
from homestock.services.permissions import Actor, load_scoped
from homestock.services.realtime import ChangeEvent, ChangeTable, publish_household_event
from homestock.services.stock import ShoppingListTrigger

logger = logging.getLogger(__name__)

DEFAULT_LIST_NAME = "Shopping List"


def publish_entry_change(household_id: int, entry: ShoppingListItem, event: ChangeEvent) -> None:
    publish_household_event(
        household_id,
        ChangeTable.SHOPPING_LIST_ITEMS,
        event,
        ShoppingListItemResponse.model_validate(entry).model_dump(mode="json"),
    )


class ShoppingService:
    """Household shopping lists and their entries."""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = ActivityLedger(db)

    # Lists

    def list_lists(self, household_id: int) -> list[ShoppingList]:
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.household_id == household_id, ShoppingList.is_active.is_(True))
            .order_by(ShoppingList.created_at, ShoppingList.id)
            .all()
        )

    def get_list(self, household_id: int, list_id: int) -> ShoppingList:
        return load_scoped(self.db, ShoppingList, list_id, household_id, "Shopping list")

    def create_list(self, actor: Actor, data: ShoppingListCreate) -> ShoppingList:
        actor.require_edit()
        shopping_list = self._new_list(
            actor.household_id, actor.user_id, data.name.strip(), data.description
        )
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.CREATED_LIST,
            f"Created shopping list {shopping_list.name}",
            metadata={"list_id": shopping_list.id},
        )
        return shopping_list

    def delete_list(self, actor: Actor, list_id: int) -> None:
        actor.require_edit()
        shopping_list = self.get_list(actor.household_id, list_id)
        shopping_list.deactivate()
        self.db.commit()

    def _new_list(
        self, household_id: int, user_id: int | None, name: str, description: str | None = None
    ) -> ShoppingList:
        shopping_list = ShoppingList(
            household_id=household_id, name=name, description=description, created_by=user_id
        )
        self.db.add(shopping_list)
        self.db.commit()
        self.db.refresh(shopping_list)
        return shopping_list

    # Entries

    def get_entry(self, household_id: int, entry_id: int) -> ShoppingListItem:
        entry = self.db.query(ShoppingListItem).filter(ShoppingListItem.id == entry_id).first()
        if entry is None or not entry.shopping_list.is_active:
            raise NotFound("Shopping list item")
        if entry.shopping_list.household_id != household_id:
            raise CrossTenantAccess("Shopping list item")
        return entry

    def add_entry(
        self, actor: Actor, list_id: int, data: ShoppingListItemCreate
    ) -> ShoppingListItem:
        actor.require_edit()
        shopping_list = self.get_list(actor.household_id, list_id)
        if data.consumable_id is not None:
            load_scoped(self.db, Consumable, data.consumable_id, actor.household_id, "Consumable")

        entry = ShoppingListItem(
            shopping_list_id=shopping_list.id,
            item_name=data.item_name.strip(),
            quantity=data.quantity,
            notes=data.notes,
            estimated_cost=data.estimated_cost,
            consumable_id=data.consumable_id,
            created_by=actor.user_id,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.ADDED_TO_SHOPPING_LIST,
            f"Added {entry.quantity} x {entry.item_name} to {shopping_list.name}",
            item_id=entry.consumable_id,
            item_type=ItemKind.CONSUMABLE if entry.consumable_id else None,
            metadata={"list_id": shopping_list.id, "entry_id": entry.id},
        )
        publish_entry_change(actor.household_id, entry, ChangeEvent.INSERT)
        return entry

    def update_entry(
        self, actor: Actor, entry_id: int, data: ShoppingListItemUpdate
    ) -> ShoppingListItem:
        actor.require_edit()
        entry = self.get_entry(actor.household_id, entry_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("item_name", "quantity") and value is None:
                continue
            setattr(entry, field, value.strip() if field == "item_name" else value)

        self.db.commit()
        self.db.refresh(entry)
        publish_entry_change(actor.household_id, entry, ChangeEvent.UPDATE)
        return entry

    def set_purchased(self, actor: Actor, entry_id: int, purchased: bool) -> ShoppingListItem:
        """Mark an entry bought (recording who and when) or clear the mark."""
        actor.require_edit()
        entry = self.get_entry(actor.household_id, entry_id)
        if entry.is_purchased == purchased:
            return entry

        entry.is_purchased = purchased
        entry.purchased_by = actor.user_id if purchased else None
        entry.purchased_at = datetime.now(UTC) if purchased else None
        self.db.commit()
        self.db.refresh(entry)

        if purchased:
            self.ledger.record(
                actor.household_id,
                actor.user_id,
                ActivityType.PURCHASED_ITEM,
                f"Bought {entry.quantity} x {entry.item_name}",
                item_id=entry.consumable_id,
                item_type=ItemKind.CONSUMABLE if entry.consumable_id else None,
                metadata={"list_id": entry.shopping_list_id, "entry_id": entry.id},
            )
        publish_entry_change(actor.household_id, entry, ChangeEvent.UPDATE)
        return entry

    def delete_entry(self, actor: Actor, entry_id: int) -> None:
        actor.require_edit()
        entry = self.get_entry(actor.household_id, entry_id)
        snapshot = ShoppingListItemResponse.model_validate(entry).model_dump(mode="json")
        self.db.delete(entry)
        self.db.commit()
        publish_household_event(
            actor.household_id, ChangeTable.SHOPPING_LIST_ITEMS, ChangeEvent.DELETE, snapshot
        )

    # Low-stock collaborator

    def default_list(self, household_id: int, user_id: int | None = None) -> ShoppingList:
        """Oldest active list, created on first use."""
        existing = self.list_lists(household_id)
        if existing:
            return existing[0]
        logger.info(f"Creating default shopping list for household {household_id}")
        return self._new_list(household_id, user_id, DEFAULT_LIST_NAME)

    def handle_low_stock_trigger(self, trigger: ShoppingListTrigger) -> ShoppingListItem | None:
        """Decide whether a restock trigger becomes a list entry.

        Skips consumables that are gone or already waiting on a list, so a
        redelivered trigger does not add a duplicate.
        """
        consumable = (
            self.db.query(Consumable)
            .filter(
                Consumable.id == trigger.consumable_id,
                Consumable.household_id == trigger.household_id,
                Consumable.is_active.is_(True),
            )
            .first()
        )
        if consumable is None:
            logger.warning(f"Consumable {trigger.consumable_id} gone, ignoring restock trigger")
            return None

        pending = (
            self.db.query(ShoppingListItem)
            .join(ShoppingList)
            .filter(
                ShoppingList.household_id == trigger.household_id,
                ShoppingList.is_active.is_(True),
                ShoppingListItem.consumable_id == consumable.id,
                ShoppingListItem.is_purchased.is_(False),
            )
            .first()
        )
        if pending is not None:
            logger.info(f"{consumable.name} already on shopping list {pending.shopping_list_id}")
            return None

        shopping_list = self.default_list(trigger.household_id, trigger.actor_id)
        entry = ShoppingListItem(
            shopping_list_id=shopping_list.id,
            item_name=consumable.name,
            quantity=trigger.suggested_quantity,
            notes=f"Stock {trigger.status}",
            estimated_cost=consumable.unit_cost,
            consumable_id=consumable.id,
            created_by=trigger.actor_id,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        self.ledger.record(
            trigger.household_id,
            trigger.actor_id,
            ActivityType.ADDED_TO_SHOPPING_LIST,
            f"Added {entry.quantity} x {entry.item_name} to {shopping_list.name} (stock {trigger.status})",
            item_id=consumable.id,
            item_type=ItemKind.CONSUMABLE,
            metadata={"list_id": shopping_list.id, "entry_id": entry.id, "automatic": True},
        )
        publish_entry_change(trigger.household_id, entry, ChangeEvent.INSERT)
        return entry
