"""Consumable and non-consumable CRUD."""

import logging
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session

from homestock.exceptions import ConditionNotWritable
from homestock.models.condition_log import ConditionLog
from homestock.models.enums import ActivityType, ItemKind, StockStatus
from homestock.models.inventory_item import Consumable, NonConsumable
from homestock.schemas.inventory import (
    ConsumableCreate,
    ConsumableUpdate,
    NonConsumableCreate,
    NonConsumableUpdate,
)
from homestock.services.activity import ActivityLedger
from homestock.services.permissions import Actor, load_scoped
from homestock.services.realtime import ChangeEvent
from homestock.services.stock import get_stock_status
from homestock.services.storage import StorageService, publish_item_change

logger = logging.getLogger(__name__)


class InventoryService:
    """Create, read, update and soft delete household items.

    Placement is validated through ``StorageService`` so an item's container
    always sits in the item's location.
    """

    def __init__(self, db: Session, storage: StorageService | None = None):
        self.db = db
        self.storage = storage or StorageService(db)
        self.ledger = ActivityLedger(db)

    # Consumables

    def list_consumables(
        self,
        household_id: int,
        location_id: int | None = None,
        container_id: int | None = None,
        status: StockStatus | None = None,
        expired: bool | None = None,
    ) -> list[Consumable]:
        """Active consumables, filtered by placement, stock status or expiry.

        An item is expired once its expiration date is before today; items
        without a date are never expired.
        """
        query = self.db.query(Consumable).filter(
            Consumable.household_id == household_id, Consumable.is_active.is_(True)
        )
        if location_id is not None:
            query = query.filter(Consumable.location_id == location_id)
        if container_id is not None:
            query = query.filter(Consumable.container_id == container_id)
        if expired is True:
            query = query.filter(Consumable.expiration_date < date.today())
        elif expired is False:
            query = query.filter(
                or_(Consumable.expiration_date.is_(None), Consumable.expiration_date >= date.today())
            )
        items = query.order_by(Consumable.name).all()
        if status is not None:
            items = [item for item in items if get_stock_status(item) is status]
        return items

    def get_consumable(self, household_id: int, consumable_id: int) -> Consumable:
        return load_scoped(self.db, Consumable, consumable_id, household_id, "Consumable")

    def create_consumable(self, actor: Actor, data: ConsumableCreate) -> Consumable:
        actor.require_edit()
        location, container = self.storage.resolve_placement(
            actor.household_id, data.location_id, data.container_id
        )

        item = Consumable(
            **data.model_dump(exclude={"location_id", "container_id", "name"}),
            name=data.name.strip(),
            household_id=actor.household_id,
            location_id=location.id,
            container_id=container.id if container else None,
            created_by=actor.user_id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.ADDED_ITEM,
            f"Added {item.name} ({item.current_quantity}) to {location.name}",
            item_id=item.id,
            item_type=ItemKind.CONSUMABLE,
            metadata={"location_id": location.id, "quantity": item.current_quantity},
        )
        publish_item_change(item, ChangeEvent.INSERT)
        return item

    def update_consumable(
        self, actor: Actor, consumable_id: int, data: ConsumableUpdate
    ) -> Consumable:
        actor.require_edit()
        item = self.get_consumable(actor.household_id, consumable_id)

        changed = _apply_updates(item, data.model_dump(exclude_unset=True))
        self.db.commit()
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_ITEM,
            f"Updated {item.name}",
            item_id=item.id,
            item_type=ItemKind.CONSUMABLE,
            metadata={"fields": changed},
        )
        publish_item_change(item, ChangeEvent.UPDATE)
        return item

    def delete_consumable(self, actor: Actor, consumable_id: int) -> None:
        actor.require_edit()
        item = self.get_consumable(actor.household_id, consumable_id)
        item.deactivate()
        self.db.commit()

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.DELETED_ITEM,
            f"Removed {item.name}",
            item_id=item.id,
            item_type=ItemKind.CONSUMABLE,
        )
        publish_item_change(item, ChangeEvent.DELETE)

    # Non-consumables

    def list_non_consumables(
        self,
        household_id: int,
        location_id: int | None = None,
        container_id: int | None = None,
    ) -> list[NonConsumable]:
        query = self.db.query(NonConsumable).filter(
            NonConsumable.household_id == household_id, NonConsumable.is_active.is_(True)
        )
        if location_id is not None:
            query = query.filter(NonConsumable.location_id == location_id)
        if container_id is not None:
            query = query.filter(NonConsumable.container_id == container_id)
        return query.order_by(NonConsumable.name).all()

    def get_non_consumable(self, household_id: int, item_id: int) -> NonConsumable:
        return load_scoped(self.db, NonConsumable, item_id, household_id, "Non-consumable")

    def create_non_consumable(self, actor: Actor, data: NonConsumableCreate) -> NonConsumable:
        actor.require_edit()
        location, container = self.storage.resolve_placement(
            actor.household_id, data.location_id, data.container_id
        )

        values = data.model_dump(exclude={"location_id", "container_id", "name"})
        values["condition"] = str(data.condition)
        item = NonConsumable(
            **values,
            name=data.name.strip(),
            household_id=actor.household_id,
            location_id=location.id,
            container_id=container.id if container else None,
            created_by=actor.user_id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.ADDED_ITEM,
            f"Added {item.name} to {location.name}",
            item_id=item.id,
            item_type=ItemKind.NON_CONSUMABLE,
            metadata={"location_id": location.id, "condition": item.condition},
        )
        publish_item_change(item, ChangeEvent.INSERT)
        return item

    def update_non_consumable(
        self, actor: Actor, item_id: int, data: NonConsumableUpdate
    ) -> NonConsumable:
        """Update item details.

        Once an item has condition history its condition is derived from the
        newest log, so a direct ``condition`` write is refused.
        """
        actor.require_edit()
        item = self.get_non_consumable(actor.household_id, item_id)

        updates = data.model_dump(exclude_unset=True)
        if updates.get("condition") is not None:
            has_history = (
                self.db.query(ConditionLog.id)
                .filter(ConditionLog.non_consumable_id == item.id)
                .first()
                is not None
            )
            if has_history:
                raise ConditionNotWritable(
                    f"{item.name} has condition history; add a condition log instead"
                )
            updates["condition"] = str(updates["condition"])
        else:
            updates.pop("condition", None)

        changed = _apply_updates(item, updates)
        self.db.commit()
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_ITEM,
            f"Updated {item.name}",
            item_id=item.id,
            item_type=ItemKind.NON_CONSUMABLE,
            metadata={"fields": changed},
        )
        publish_item_change(item, ChangeEvent.UPDATE)
        return item

    def delete_non_consumable(self, actor: Actor, item_id: int) -> None:
        actor.require_edit()
        item = self.get_non_consumable(actor.household_id, item_id)
        item.deactivate()
        self.db.commit()

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.DELETED_ITEM,
            f"Removed {item.name}",
            item_id=item.id,
            item_type=ItemKind.NON_CONSUMABLE,
        )
        publish_item_change(item, ChangeEvent.DELETE)


def _apply_updates(item: Consumable | NonConsumable, updates: dict) -> list[str]:
    """Copy provided fields onto the item.

    ``name`` is stripped, and an explicit null never clears a NOT NULL column.
    """
    changed = []
    for field, value in updates.items():
        column = item.__table__.columns.get(field)
        if value is None and column is not None and not column.nullable:
            continue
        if field == "name":
            if not value:
                continue
            value = value.strip()
        setattr(item, field, value)
        changed.append(field)
    return changed
