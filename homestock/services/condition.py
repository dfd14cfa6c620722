"""Condition history for non-consumables."""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from homestock.models.condition_log import ConditionLog
from homestock.models.enums import ActivityType, ConditionRating, ItemKind
from homestock.models.inventory_item import NonConsumable
from homestock.schemas.inventory import ConditionLogCreate
from homestock.services.activity import ActivityLedger
from homestock.services.permissions import Actor, load_scoped
from homestock.services.realtime import ChangeEvent
from homestock.services.storage import publish_item_change

logger = logging.getLogger(__name__)


def latest_condition_entry(entries: Iterable[ConditionLog]) -> ConditionLog | None:
    """Newest entry by timestamp; the highest id wins a tie."""
    return max(entries, key=lambda entry: (entry.created_at, entry.id), default=None)


def current_condition(item: NonConsumable, entries: Iterable[ConditionLog]) -> ConditionRating:
    """The item's condition: the newest log's rating, else its initial rating."""
    latest = latest_condition_entry(entries)
    if latest is None:
        return ConditionRating(item.condition)
    return ConditionRating(latest.rating)


class ConditionService:
    """Appends condition observations and derives the current condition."""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = ActivityLedger(db)

    def _get_item(self, household_id: int, item_id: int) -> NonConsumable:
        return load_scoped(self.db, NonConsumable, item_id, household_id, "Non-consumable")

    def _entries(self, item_id: int) -> list[ConditionLog]:
        return (
            self.db.query(ConditionLog)
            .filter(ConditionLog.non_consumable_id == item_id)
            .order_by(ConditionLog.created_at.desc(), ConditionLog.id.desc())
            .all()
        )

    def log_condition(self, actor: Actor, item_id: int, data: ConditionLogCreate) -> ConditionLog:
        """Append a new entry. Existing entries are never touched."""
        actor.require_edit()
        item = self._get_item(actor.household_id, item_id)

        entry = ConditionLog(
            household_id=actor.household_id,
            non_consumable_id=item.id,
            rating=str(data.rating),
            notes=data.notes,
            maintenance_performed=data.maintenance_performed,
            estimated_repair_cost=data.estimated_repair_cost,
            photos=list(data.photos),
            logged_by=actor.user_id,
        )
        self.db.add(entry)
        self.db.flush()

        previous = item.condition
        item.condition = str(current_condition(item, self._entries(item.id)))
        self.db.commit()
        self.db.refresh(entry)
        self.db.refresh(item)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.ADDED_CONDITION_LOG,
            f"Logged {item.name} as {entry.rating}",
            item_id=item.id,
            item_type=ItemKind.NON_CONSUMABLE,
            metadata={
                "condition_log_id": entry.id,
                "previous_condition": previous,
                "rating": entry.rating,
                "maintenance_performed": bool(entry.maintenance_performed),
            },
        )
        publish_item_change(item, ChangeEvent.UPDATE)
        return entry

    def history(self, household_id: int, item_id: int) -> list[ConditionLog]:
        """All entries for an item, newest first."""
        item = self._get_item(household_id, item_id)
        return self._entries(item.id)

    def get_current_condition(self, household_id: int, item_id: int) -> ConditionRating:
        item = self._get_item(household_id, item_id)
        return current_condition(item, self._entries(item.id))
