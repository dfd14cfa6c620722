"""Stock status derivation and quantity adjustments for consumables."""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy.orm import Session

from homestock.exceptions import NegativeQuantity, ValidationError
from homestock.models.enums import ActivityType, ItemKind, StockStatus
from homestock.models.inventory_item import Consumable
from homestock.schemas.inventory import ConsumableResponse
from homestock.services.activity import ActivityLedger
from homestock.services.permissions import Actor, load_scoped
from homestock.services.realtime import ChangeEvent, ChangeTable, publish_household_event

logger = logging.getLogger(__name__)

_SEVERITY = {
    StockStatus.OK: 0,
    StockStatus.LOW: 1,
    StockStatus.CRITICAL: 2,
    StockStatus.OUT: 3,
}


def classify_stock(current: int, threshold: int) -> StockStatus:
    """Classify a consumable's stock level.

    A zero threshold means reorder tracking is off, so the item is always ok.
    """
    if threshold <= 0:
        return StockStatus.OK
    if current <= 0:
        return StockStatus.OUT
    # current <= threshold * 0.5, kept in integers
    if current * 2 <= threshold:
        return StockStatus.CRITICAL
    if current <= threshold:
        return StockStatus.LOW
    return StockStatus.OK


def get_stock_status(item: Consumable) -> StockStatus:
    return classify_stock(item.current_quantity, item.reorder_threshold)


def crosses_into_reorder(old: StockStatus, new: StockStatus) -> bool:
    """True when an adjustment moves stock into a worse reorder status.

    ok -> low/critical/out always qualifies; so do further drops such as
    low -> out. Restocking or staying in the same status never does.
    """
    return new is not StockStatus.OK and _SEVERITY[new] > _SEVERITY[old]


def suggested_reorder_quantity(current: int, threshold: int) -> int:
    """Units needed to bring stock back just above the threshold."""
    return max(threshold - current + 1, 1)


@dataclass(frozen=True)
class ShoppingListTrigger:
    """Notification that a consumable needs restocking.

    Consumed by the shopping list feature, which decides whether to add an
    entry; delivery is not transactional with the adjustment.
    """

    household_id: int
    consumable_id: int
    item_name: str
    suggested_quantity: int
    status: StockStatus
    actor_id: int

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["status"] = str(self.status)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ShoppingListTrigger":
        return cls(**{**payload, "status": StockStatus(payload["status"])})


@dataclass(frozen=True)
class QuantityAdjustment:
    """Outcome of ``StockService.adjust_quantity``."""

    item: Consumable
    old_quantity: int
    new_quantity: int
    old_status: StockStatus
    new_status: StockStatus
    trigger: ShoppingListTrigger | None


TriggerHandler = Callable[[ShoppingListTrigger], None]


def describe_adjustment(name: str, old: int, new: int) -> str:
    change = new - old
    change_text = f"increased by {change}" if change > 0 else f"decreased by {abs(change)}"
    return f"{name} quantity {change_text} ({old} -> {new})"


class StockService:
    """Sole mutator of consumable quantities."""

    def __init__(self, db: Session, on_trigger: TriggerHandler | None = None):
        self.db = db
        self.on_trigger = on_trigger
        self.ledger = ActivityLedger(db)

    def adjust_quantity(self, actor: Actor, consumable_id: int, delta: int) -> QuantityAdjustment:
        """Apply a signed delta to a consumable's quantity.

        Rejects any change that would leave the quantity negative; the stored
        value is untouched in that case. Concurrent adjustments from different
        members are last-write-wins.
        """
        actor.require_edit()
        if delta == 0:
            raise ValidationError("Quantity change must be non-zero")

        item = load_scoped(self.db, Consumable, consumable_id, actor.household_id, "Consumable")
        old_quantity = item.current_quantity
        new_quantity = old_quantity + delta
        if new_quantity < 0:
            raise NegativeQuantity(
                f"Cannot remove {abs(delta)} of {item.name}: only {old_quantity} left"
            )

        old_status = classify_stock(old_quantity, item.reorder_threshold)
        new_status = classify_stock(new_quantity, item.reorder_threshold)

        item.current_quantity = new_quantity
        self.db.commit()
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_QUANTITY,
            describe_adjustment(item.name, old_quantity, new_quantity),
            item_id=item.id,
            item_type=ItemKind.CONSUMABLE,
            metadata={
                "old_quantity": old_quantity,
                "new_quantity": new_quantity,
                "delta": delta,
                "old_status": str(old_status),
                "new_status": str(new_status),
            },
        )
        publish_household_event(
            actor.household_id,
            ChangeTable.CONSUMABLES,
            ChangeEvent.UPDATE,
            serialize_consumable(item).model_dump(mode="json"),
        )

        trigger = None
        if crosses_into_reorder(old_status, new_status):
            trigger = ShoppingListTrigger(
                household_id=actor.household_id,
                consumable_id=item.id,
                item_name=item.name,
                suggested_quantity=suggested_reorder_quantity(
                    new_quantity, item.reorder_threshold
                ),
                status=new_status,
                actor_id=actor.user_id,
            )
            logger.info(f"{item.name} crossed into {new_status}, emitting shopping list trigger")
            if self.on_trigger is not None:
                self.on_trigger(trigger)

        return QuantityAdjustment(
            item=item,
            old_quantity=old_quantity,
            new_quantity=new_quantity,
            old_status=old_status,
            new_status=new_status,
            trigger=trigger,
        )

    def low_stock(self, household_id: int) -> list[Consumable]:
        """Active consumables whose status is anything but ok."""
        items = (
            self.db.query(Consumable)
            .filter(
                Consumable.household_id == household_id,
                Consumable.is_active.is_(True),
                Consumable.reorder_threshold > 0,
                Consumable.current_quantity <= Consumable.reorder_threshold,
            )
            .order_by(Consumable.current_quantity, Consumable.name)
            .all()
        )
        return [item for item in items if get_stock_status(item) is not StockStatus.OK]


def serialize_consumable(item: Consumable) -> ConsumableResponse:
    """Response model with the derived stock status filled in."""
    response = ConsumableResponse.model_validate(item)
    response.stock_status = get_stock_status(item)
    return response
