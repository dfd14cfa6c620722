"""Tests for the onboarding wizard."""

import pytest

from homestock.exceptions import OnboardingTransitionError, ValidationError
from homestock.models.activity_log import ActivityLog
from homestock.models.enums import ActivityType, OnboardingStep
from homestock.models.household import Household
from homestock.models.inventory_item import Consumable
from homestock.models.location import Location, StorageContainer
from homestock.models.onboarding_progress import OnboardingProgress
from homestock.schemas.onboarding import (
    FirstContainerData,
    FirstItemData,
    OnboardingData,
    OnboardingSave,
    OnboardingStepInput,
    RoomData,
)
from homestock.services.onboarding import (
    OnboardingService,
    can_skip,
    completed_before,
    merge_step_input,
    next_step,
    previous_step,
)


class TestTransitions:
    def test_next_step_walks_forward(self):
        assert next_step(OnboardingStep.WELCOME) is OnboardingStep.ROOM_SETUP
        assert next_step(OnboardingStep.FIRST_ITEM) is OnboardingStep.COMPLETE

    def test_next_from_complete_fails(self):
        with pytest.raises(OnboardingTransitionError):
            next_step(OnboardingStep.COMPLETE)

    def test_back_goes_to_previous_step(self):
        assert previous_step(OnboardingStep.FIRST_CONTAINER) is OnboardingStep.PHOTO_TOUR

    def test_back_from_welcome_fails(self):
        with pytest.raises(OnboardingTransitionError):
            previous_step(OnboardingStep.WELCOME)

    def test_only_middle_steps_can_skip(self):
        assert not can_skip(OnboardingStep.WELCOME)
        assert not can_skip(OnboardingStep.COMPLETE)
        for step in (
            OnboardingStep.ROOM_SETUP,
            OnboardingStep.PHOTO_TOUR,
            OnboardingStep.FIRST_CONTAINER,
            OnboardingStep.FIRST_ITEM,
        ):
            assert can_skip(step)

    def test_completed_steps_precede_current(self):
        assert completed_before(OnboardingStep.WELCOME) == []
        assert completed_before(OnboardingStep.FIRST_CONTAINER) == [0, 1, 2]

    def test_merge_keeps_unsent_fields(self):
        data = OnboardingData(household_name="Smiths", rooms=[RoomData(name="Kitchen")])
        merged = merge_step_input(
            data, OnboardingStepInput(first_container=FirstContainerData(name="Shelf"))
        )
        assert merged.household_name == "Smiths"
        assert merged.rooms[0].name == "Kitchen"
        assert merged.first_container.name == "Shelf"


@pytest.fixture
def onboarding(db):
    return OnboardingService(db)


def walk_to_first_container(onboarding, user):
    onboarding.advance(user, OnboardingStepInput(household_name="The Smiths"))
    onboarding.advance(
        user,
        OnboardingStepInput(
            rooms=[RoomData(name="Kitchen", is_primary_storage=True), RoomData(name="Garage")]
        ),
    )
    return onboarding.advance(user, OnboardingStepInput())


class TestOnboardingService:
    def test_fresh_user_starts_at_welcome(self, onboarding, owner):
        state = onboarding.get_state(owner)
        assert state.current_step is OnboardingStep.WELCOME
        assert state.completed_steps == []
        assert state.can_skip is False

    def test_full_flow_creates_records(self, db, onboarding, owner):
        state = walk_to_first_container(onboarding, owner)
        assert state.current_step is OnboardingStep.FIRST_CONTAINER
        assert state.completed_steps == [0, 1, 2]

        state = onboarding.advance(
            owner, OnboardingStepInput(first_container=FirstContainerData(name="Pantry Shelf"))
        )
        assert state.current_step is OnboardingStep.FIRST_ITEM

        state = onboarding.advance(
            owner,
            OnboardingStepInput(
                first_item=FirstItemData(name="Paper Towels", current_quantity=6, reorder_threshold=2)
            ),
        )

        assert state.current_step is OnboardingStep.COMPLETE
        household = db.query(Household).filter_by(name="The Smiths").one()
        assert household.onboarding_completed is True
        assert [loc.name for loc in db.query(Location).order_by(Location.id)] == [
            "Kitchen",
            "Garage",
        ]
        shelf = db.query(StorageContainer).one()
        kitchen = db.query(Location).filter_by(name="Kitchen").one()
        assert shelf.location_id == kitchen.id
        towels = db.query(Consumable).one()
        assert towels.container_id == shelf.id
        assert towels.location_id == kitchen.id
        assert db.query(OnboardingProgress).count() == 0

    def test_progress_is_resumable(self, onboarding, owner):
        onboarding.advance(owner, OnboardingStepInput(household_name="The Smiths"))

        resumed = OnboardingService(onboarding.db).get_state(owner)

        assert resumed.current_step is OnboardingStep.ROOM_SETUP
        assert resumed.data.household_name == "The Smiths"
        assert resumed.data.household_id is not None

    def test_saving_twice_keeps_one_row(self, db, onboarding, owner):
        progress = OnboardingSave(
            current_step=OnboardingStep.ROOM_SETUP,
            data=OnboardingData(household_name="Smiths", rooms=[RoomData(name="Kitchen")]),
        )
        onboarding.save_progress(owner, progress)
        state = onboarding.save_progress(owner, progress)

        assert db.query(OnboardingProgress).count() == 1
        assert state.current_step is OnboardingStep.ROOM_SETUP
        assert state.data.rooms[0].name == "Kitchen"

    def test_save_cannot_jump_to_complete(self, onboarding, owner):
        with pytest.raises(OnboardingTransitionError):
            onboarding.save_progress(owner, OnboardingSave(current_step=OnboardingStep.COMPLETE))

    def test_repeating_a_step_does_not_duplicate_records(self, db, onboarding, owner):
        walk_to_first_container(onboarding, owner)
        onboarding.back(owner)
        onboarding.back(owner)

        state = onboarding.advance(owner, OnboardingStepInput())

        assert state.current_step is OnboardingStep.PHOTO_TOUR
        assert db.query(Location).count() == 2
        assert db.query(Household).count() == 1

    def test_back_from_welcome_rejected(self, onboarding, owner):
        with pytest.raises(OnboardingTransitionError):
            onboarding.back(owner)

    def test_skip_from_middle_step_completes(self, db, onboarding, owner):
        onboarding.advance(owner, OnboardingStepInput(household_name="The Smiths"))

        state = onboarding.skip(owner)

        assert state.current_step is OnboardingStep.COMPLETE
        assert db.query(Household).one().onboarding_completed is True
        assert db.query(OnboardingProgress).count() == 0
        assert (
            db.query(ActivityLog)
            .filter(ActivityLog.activity_type == ActivityType.COMPLETED_ONBOARDING.value)
            .count()
            == 1
        )

    def test_skip_from_welcome_rejected(self, onboarding, owner):
        with pytest.raises(OnboardingTransitionError):
            onboarding.skip(owner)

    def test_completed_user_stays_complete(self, onboarding, owner):
        onboarding.advance(owner, OnboardingStepInput(household_name="The Smiths"))
        onboarding.skip(owner)

        state = onboarding.get_state(owner)

        assert state.current_step is OnboardingStep.COMPLETE
        with pytest.raises(OnboardingTransitionError):
            onboarding.advance(owner, OnboardingStepInput())

    def test_welcome_requires_household_name(self, onboarding, owner):
        with pytest.raises(ValidationError):
            onboarding.advance(owner, OnboardingStepInput())

    def test_room_setup_requires_a_room(self, onboarding, owner):
        onboarding.advance(owner, OnboardingStepInput(household_name="The Smiths"))
        with pytest.raises(ValidationError):
            onboarding.advance(owner, OnboardingStepInput())

    def test_reset_discards_progress(self, db, onboarding, owner):
        onboarding.advance(owner, OnboardingStepInput(household_name="The Smiths"))

        onboarding.reset(owner)

        assert db.query(OnboardingProgress).count() == 0
        assert onboarding.get_state(owner).current_step is OnboardingStep.WELCOME


class TestOnboardingAPI:
    def test_get_initial_state(self, client, auth_headers):
        response = client.get("/api/v1/onboarding", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["step_name"] == "welcome"

    def test_advance_and_skip(self, client, auth_headers):
        response = client.post(
            "/api/v1/onboarding/advance",
            headers=auth_headers,
            json={"household_name": "Smiths"},
        )
        assert response.status_code == 200
        assert response.json()["current_step"] == 1
        assert response.json()["can_skip"] is True

        response = client.post("/api/v1/onboarding/skip", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["step_name"] == "complete"

        households = client.get("/api/v1/households", headers=auth_headers).json()
        assert [h["name"] for h in households] == ["Smiths"]

    def test_skip_from_welcome_conflicts(self, client, auth_headers):
        response = client.post("/api/v1/onboarding/skip", headers=auth_headers)
        assert response.status_code == 409

    def test_save_and_reset(self, client, auth_headers):
        response = client.put(
            "/api/v1/onboarding",
            headers=auth_headers,
            json={"current_step": 2, "data": {"household_name": "Smiths"}},
        )
        assert response.status_code == 200
        assert response.json()["completed_steps"] == [0, 1]

        response = client.delete("/api/v1/onboarding", headers=auth_headers)
        assert response.status_code == 204
        assert client.get("/api/v1/onboarding", headers=auth_headers).json()["current_step"] == 0
