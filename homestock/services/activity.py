"""Append-only household activity ledger."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homestock.config import get_settings
from homestock.models.activity_log import ActivityLog
from homestock.models.enums import ActivityType, ItemKind
from homestock.schemas.activity import ActivityResponse
from homestock.services.realtime import ChangeEvent, ChangeTable, publish_household_event

logger = logging.getLogger(__name__)
settings = get_settings()


class ActivityLedger:
    """Records and reads the household audit trail."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        household_id: int,
        actor_id: int,
        activity_type: ActivityType,
        description: str,
        item_id: int | None = None,
        item_type: ItemKind | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ActivityLog | None:
        """Append one entry in its own transaction.

        The triggering business write must already be committed: a failure
        here is logged and swallowed so the audit trail never blocks or rolls
        back the mutation it describes.
        """
        entry = ActivityLog(
            household_id=household_id,
            user_id=actor_id,
            activity_type=str(activity_type),
            description=description,
            item_id=item_id,
            item_type=str(item_type) if item_type else None,
            activity_metadata=metadata or {},
        )
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record {activity_type} for household {household_id}: {e}")
            return None

        publish_household_event(
            household_id,
            ChangeTable.ACTIVITY_LOG,
            ChangeEvent.INSERT,
            ActivityResponse.model_validate(entry).model_dump(mode="json"),
        )
        return entry

    def list_recent(self, household_id: int, limit: int | None = None) -> list[ActivityLog]:
        """Newest-first entries for a household, at most ``limit`` of them."""
        if limit is None:
            limit = settings.activity_feed_default_limit
        limit = max(1, min(limit, settings.activity_feed_max_limit))
        return (
            self.db.query(ActivityLog)
            .filter(ActivityLog.household_id == household_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all()
        )
