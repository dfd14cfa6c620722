"""Tests for the activity ledger."""

import json
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from homestock.models.activity_log import ActivityLog
from homestock.models.enums import ActivityType, ItemKind
from homestock.services.activity import ActivityLedger


def test_record_appends_entry(db, actor):
    ledger = ActivityLedger(db)

    entry = ledger.record(
        actor.household_id,
        actor.user_id,
        ActivityType.ADDED_ITEM,
        "Added Paper Towels",
        item_id=42,
        item_type=ItemKind.CONSUMABLE,
        metadata={"quantity": 2},
    )

    assert entry is not None
    assert entry.activity_type == "added_item"
    assert entry.item_type == "consumable"
    assert entry.activity_metadata == {"quantity": 2}


def test_record_publishes_insert(db, actor, redis_publisher):
    redis_publisher.publish.reset_mock()

    ActivityLedger(db).record(
        actor.household_id, actor.user_id, ActivityType.CREATED_LIST, "Created list"
    )

    channel, raw = redis_publisher.publish.call_args.args
    message = json.loads(raw)
    assert channel == f"household:{actor.household_id}"
    assert message["table"] == "activity_log"
    assert message["event"] == "INSERT"
    assert message["record"]["description"] == "Created list"
    assert message["record"]["metadata"] == {}


def test_list_recent_is_newest_first(db, actor):
    ledger = ActivityLedger(db)
    for n in range(5):
        ledger.record(actor.household_id, actor.user_id, ActivityType.UPDATED_ITEM, f"Edit {n}")

    recent = ledger.list_recent(actor.household_id, limit=3)

    assert [e.description for e in recent] == ["Edit 4", "Edit 3", "Edit 2"]


def test_list_recent_is_household_scoped(db, actor, other_actor):
    ledger = ActivityLedger(db)
    ledger.record(other_actor.household_id, other_actor.user_id, ActivityType.ADDED_ITEM, "Theirs")

    descriptions = [e.description for e in ledger.list_recent(actor.household_id)]

    assert "Theirs" not in descriptions


def test_list_recent_clamps_limit(db, actor):
    ledger = ActivityLedger(db)
    for n in range(3):
        ledger.record(actor.household_id, actor.user_id, ActivityType.UPDATED_ITEM, f"Edit {n}")

    assert len(ledger.list_recent(actor.household_id, limit=0)) == 1
    assert len(ledger.list_recent(actor.household_id, limit=10_000)) == 4


def test_record_failure_is_swallowed(redis_publisher):
    """A failed audit write is logged, rolled back and never raised."""
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))
    redis_publisher.publish.reset_mock()

    result = ActivityLedger(session).record(1, 1, ActivityType.ADDED_ITEM, "Added soap")

    assert result is None
    session.rollback.assert_called_once()
    redis_publisher.publish.assert_not_called()


def test_entries_are_not_mutated_by_later_records(db, actor):
    ledger = ActivityLedger(db)
    first = ledger.record(actor.household_id, actor.user_id, ActivityType.ADDED_ITEM, "First")
    ledger.record(actor.household_id, actor.user_id, ActivityType.DELETED_ITEM, "Second")

    db.refresh(first)
    assert first.description == "First"
    assert db.query(ActivityLog).filter_by(household_id=actor.household_id).count() == 3
