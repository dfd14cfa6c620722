"""Tests for non-consumable condition history."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from homestock.exceptions import ConditionNotWritable, CrossTenantAccess, PermissionDenied
from homestock.models.activity_log import ActivityLog
from homestock.models.condition_log import ConditionLog
from homestock.models.enums import ActivityType, ConditionRating, Role
from homestock.schemas.inventory import ConditionLogCreate, NonConsumableCreate, NonConsumableUpdate
from homestock.schemas.location import LocationCreate
from homestock.services.condition import ConditionService, current_condition, latest_condition_entry
from homestock.services.inventory import InventoryService
from homestock.services.permissions import Actor
from homestock.services.storage import StorageService


@pytest.fixture
def inventory(db):
    return InventoryService(db)


@pytest.fixture
def conditions(db):
    return ConditionService(db)


@pytest.fixture
def drill(db, actor, inventory):
    garage = StorageService(db).create_location(actor, LocationCreate(name="Garage"))
    return inventory.create_non_consumable(
        actor,
        NonConsumableCreate(name="Cordless Drill", location_id=garage.id, brand="DeWalt"),
    )


def log(conditions, actor, item, rating, **kwargs):
    return conditions.log_condition(actor, item.id, ConditionLogCreate(rating=rating, **kwargs))


class TestLatestEntry:
    def test_newest_timestamp_wins(self):
        older = SimpleNamespace(id=9, created_at=datetime(2026, 1, 1), rating="excellent")
        newer = SimpleNamespace(id=2, created_at=datetime(2026, 2, 1), rating="poor")
        assert latest_condition_entry([older, newer]) is newer

    def test_highest_id_breaks_ties(self):
        stamp = datetime(2026, 3, 1, 12, 0)
        first = SimpleNamespace(id=4, created_at=stamp, rating="good")
        second = SimpleNamespace(id=5, created_at=stamp, rating="fair")
        assert latest_condition_entry([second, first]) is second

    def test_no_entries(self):
        assert latest_condition_entry([]) is None

    def test_falls_back_to_initial_rating(self):
        item = SimpleNamespace(condition="fair")
        assert current_condition(item, []) is ConditionRating.FAIR


class TestConditionService:
    def test_latest_log_is_current_condition(self, db, conditions, actor, drill):
        log(conditions, actor, drill, ConditionRating.EXCELLENT)
        log(conditions, actor, drill, ConditionRating.POOR)
        assert conditions.get_current_condition(actor.household_id, drill.id) is ConditionRating.POOR

        log(conditions, actor, drill, ConditionRating.GOOD)
        assert conditions.get_current_condition(actor.household_id, drill.id) is ConditionRating.GOOD

        history = conditions.history(actor.household_id, drill.id)
        assert [entry.rating for entry in history] == ["good", "poor", "excellent"]

        db.refresh(drill)
        assert drill.condition == "good"

    def test_history_entries_are_never_rewritten(self, db, conditions, actor, drill):
        first = log(conditions, actor, drill, ConditionRating.EXCELLENT, notes="Brand new")
        log(conditions, actor, drill, ConditionRating.BROKEN, notes="Dropped")

        db.refresh(first)
        assert first.rating == "excellent"
        assert first.notes == "Brand new"
        assert db.query(ConditionLog).count() == 2

    def test_records_maintenance_details(self, conditions, actor, drill):
        entry = log(
            conditions,
            actor,
            drill,
            ConditionRating.FAIR,
            maintenance_performed="Replaced brushes",
            estimated_repair_cost="45.50",
            photos=["https://example.com/drill.jpg"],
        )
        assert entry.maintenance_performed == "Replaced brushes"
        assert entry.photos == ["https://example.com/drill.jpg"]
        assert entry.logged_by == actor.user_id

    def test_logging_records_activity(self, db, conditions, actor, drill):
        log(conditions, actor, drill, ConditionRating.POOR)

        entry = (
            db.query(ActivityLog)
            .filter(ActivityLog.activity_type == ActivityType.ADDED_CONDITION_LOG.value)
            .one()
        )
        assert entry.item_id == drill.id
        assert "poor" in entry.description
        assert entry.activity_metadata["previous_condition"] == "good"

    def test_condition_writable_until_first_log(self, conditions, inventory, actor, drill):
        updated = inventory.update_non_consumable(
            actor, drill.id, NonConsumableUpdate(condition=ConditionRating.FAIR)
        )
        assert updated.condition == "fair"

        log(conditions, actor, drill, ConditionRating.EXCELLENT)

        with pytest.raises(ConditionNotWritable):
            inventory.update_non_consumable(
                actor, drill.id, NonConsumableUpdate(condition=ConditionRating.BROKEN)
            )
        assert conditions.get_current_condition(actor.household_id, drill.id) is (
            ConditionRating.EXCELLENT
        )

    def test_other_fields_still_editable_with_history(self, conditions, inventory, actor, drill):
        log(conditions, actor, drill, ConditionRating.GOOD)
        updated = inventory.update_non_consumable(
            actor, drill.id, NonConsumableUpdate(serial_number="SN-123")
        )
        assert updated.serial_number == "SN-123"

    def test_viewer_cannot_log(self, conditions, actor, drill):
        viewer = Actor(user_id=actor.user_id, household_id=actor.household_id, role=Role.VIEWER)
        with pytest.raises(PermissionDenied):
            log(conditions, viewer, drill, ConditionRating.POOR)

    def test_other_household_cannot_log(self, conditions, other_actor, drill):
        with pytest.raises(CrossTenantAccess):
            log(conditions, other_actor, drill, ConditionRating.POOR)
