"""Resumable onboarding wizard.

Steps run WELCOME -> ROOM_SETUP -> PHOTO_TOUR -> FIRST_CONTAINER ->
FIRST_ITEM -> COMPLETE. Any middle step may skip straight to COMPLETE and
``back`` always returns to the immediately preceding step. Progress is
upserted per user after every transition and removed once COMPLETE is
reached, at which point the household is flagged as onboarded.
"""

import logging

from sqlalchemy.orm import Session

from homestock.exceptions import OnboardingTransitionError, ValidationError
from homestock.models.enums import ActivityType, OnboardingStep
from homestock.models.household import Household, HouseholdMember
from homestock.models.onboarding_progress import OnboardingProgress
from homestock.models.user import User
from homestock.schemas.inventory import ConsumableCreate
from homestock.schemas.location import ContainerCreate, LocationCreate
from homestock.schemas.onboarding import (
    FirstContainerData,
    FirstItemData,
    OnboardingData,
    OnboardingSave,
    OnboardingStateResponse,
    OnboardingStepInput,
    RoomData,
)
from homestock.services.activity import ActivityLedger
from homestock.services.households import HouseholdService
from homestock.services.inventory import InventoryService
from homestock.services.permissions import Actor
from homestock.services.storage import StorageService

logger = logging.getLogger(__name__)

SKIPPABLE = frozenset(
    {
        OnboardingStep.ROOM_SETUP,
        OnboardingStep.PHOTO_TOUR,
        OnboardingStep.FIRST_CONTAINER,
        OnboardingStep.FIRST_ITEM,
    }
)


def next_step(step: OnboardingStep) -> OnboardingStep:
    if step is OnboardingStep.COMPLETE:
        raise OnboardingTransitionError("Onboarding is already complete")
    return OnboardingStep(step + 1)


def previous_step(step: OnboardingStep) -> OnboardingStep:
    if step is OnboardingStep.WELCOME:
        raise OnboardingTransitionError("Already at the first step")
    if step is OnboardingStep.COMPLETE:
        raise OnboardingTransitionError("Onboarding is already complete")
    return OnboardingStep(step - 1)


def can_skip(step: OnboardingStep) -> bool:
    return step in SKIPPABLE


def completed_before(step: OnboardingStep) -> list[int]:
    return list(range(step))


def step_name(step: OnboardingStep) -> str:
    return step.name.lower()


def merge_step_input(data: OnboardingData, step_input: OnboardingStepInput) -> OnboardingData:
    """Overlay the fields the client sent on the accumulated wizard data."""
    updates = {
        name: getattr(step_input, name)
        for name in step_input.model_fields_set
        if getattr(step_input, name) is not None
    }
    return data.model_copy(update=updates)


class OnboardingService:
    """Loads, saves and advances one user's wizard progress."""

    def __init__(self, db: Session):
        self.db = db
        self.households = HouseholdService(db)
        self.storage = StorageService(db)
        self.inventory = InventoryService(db, self.storage)
        self.ledger = ActivityLedger(db)

    # Persistence

    def _load_row(self, user: User) -> OnboardingProgress | None:
        return self.db.query(OnboardingProgress).filter(OnboardingProgress.user_id == user.id).first()

    def _data_from_row(self, row: OnboardingProgress) -> OnboardingData:
        return OnboardingData(
            household_name=row.household_name,
            household_id=row.household_id,
            rooms=[RoomData.model_validate(room) for room in row.rooms_data or []],
            first_container=(
                FirstContainerData.model_validate(row.first_container_data)
                if row.first_container_data
                else None
            ),
            first_item=(
                FirstItemData.model_validate(row.first_item_data) if row.first_item_data else None
            ),
        )

    def _store(self, user: User, step: OnboardingStep, data: OnboardingData) -> OnboardingProgress:
        """Upsert progress; completed steps are always every step before ``step``."""
        row = self._load_row(user)
        if row is None:
            row = OnboardingProgress(user_id=user.id)
            self.db.add(row)
        row.current_step = int(step)
        row.completed_steps = completed_before(step)
        row.household_id = data.household_id
        row.household_name = data.household_name
        row.rooms_data = [room.model_dump(mode="json") for room in data.rooms]
        row.first_container_data = (
            data.first_container.model_dump(mode="json") if data.first_container else None
        )
        row.first_item_data = data.first_item.model_dump(mode="json") if data.first_item else None
        self.db.commit()
        self.db.refresh(row)
        return row

    def _state(self, row: OnboardingProgress) -> OnboardingStateResponse:
        step = OnboardingStep(row.current_step)
        return OnboardingStateResponse(
            current_step=step,
            step_name=step_name(step),
            completed_steps=sorted(row.completed_steps or []),
            can_skip=can_skip(step),
            data=self._data_from_row(row),
            updated_at=row.updated_at,
        )

    def _terminal_state(self, data: OnboardingData) -> OnboardingStateResponse:
        return OnboardingStateResponse(
            current_step=OnboardingStep.COMPLETE,
            step_name=step_name(OnboardingStep.COMPLETE),
            completed_steps=completed_before(OnboardingStep.COMPLETE),
            can_skip=False,
            data=data,
        )

    # Public operations

    def get_state(self, user: User) -> OnboardingStateResponse:
        """Resume point for ``user``; a fresh wizard when nothing is saved."""
        row = self._load_row(user)
        if row is not None:
            return self._state(row)

        onboarded = (
            self.db.query(Household)
            .join(HouseholdMember, HouseholdMember.household_id == Household.id)
            .filter(HouseholdMember.user_id == user.id, Household.onboarding_completed.is_(True))
            .first()
        )
        if onboarded is not None:
            return self._terminal_state(
                OnboardingData(household_id=onboarded.id, household_name=onboarded.name)
            )

        return OnboardingStateResponse(
            current_step=OnboardingStep.WELCOME,
            step_name=step_name(OnboardingStep.WELCOME),
            completed_steps=[],
            can_skip=False,
            data=OnboardingData(),
        )

    def save_progress(self, user: User, progress: OnboardingSave) -> OnboardingStateResponse:
        """Upsert progress without running the step's side effects."""
        if progress.current_step is OnboardingStep.COMPLETE:
            raise OnboardingTransitionError("Use advance or skip to finish onboarding")
        return self._state(self._store(user, progress.current_step, progress.data))

    def advance(self, user: User, step_input: OnboardingStepInput) -> OnboardingStateResponse:
        """Finish the current step and move to the next one.

        Records created along the way have their ids kept in the wizard data,
        so repeating a step after a failure never creates duplicates.
        """
        state = self.get_state(user)
        step = state.current_step
        target = next_step(step)
        data = merge_step_input(state.data, step_input)

        if step is OnboardingStep.WELCOME:
            data = self._ensure_household(user, data)
        elif step is OnboardingStep.ROOM_SETUP:
            data = self._ensure_rooms(user, data)
        elif step is OnboardingStep.FIRST_CONTAINER:
            data = self._ensure_first_container(user, data)
        elif step is OnboardingStep.FIRST_ITEM:
            data = self._ensure_first_item(user, data)

        if target is OnboardingStep.COMPLETE:
            return self.complete(user, data)
        return self._state(self._store(user, target, data))

    def back(self, user: User) -> OnboardingStateResponse:
        state = self.get_state(user)
        return self._state(self._store(user, previous_step(state.current_step), state.data))

    def skip(self, user: User) -> OnboardingStateResponse:
        """Jump from a middle step straight to COMPLETE."""
        state = self.get_state(user)
        if not can_skip(state.current_step):
            raise OnboardingTransitionError(
                f"Cannot skip from {step_name(state.current_step)}"
            )
        return self.complete(user, state.data)

    def complete(self, user: User, data: OnboardingData) -> OnboardingStateResponse:
        if data.household_id is None:
            raise ValidationError("A household is required to finish onboarding")
        actor = self._actor(user, data)
        household = self.households.get_household(actor.household_id)
        household.onboarding_completed = True

        row = self._load_row(user)
        if row is not None:
            self.db.delete(row)
        self.db.commit()

        self.ledger.record(
            household.id,
            user.id,
            ActivityType.COMPLETED_ONBOARDING,
            f"{user.name or user.email} finished setting up {household.name}",
            metadata={"rooms": len(data.rooms)},
        )
        logger.info(f"User {user.id} completed onboarding for household {household.id}")
        return self._terminal_state(data)

    def reset(self, user: User) -> None:
        row = self._load_row(user)
        if row is not None:
            self.db.delete(row)
            self.db.commit()

    # Step side effects

    def _actor(self, user: User, data: OnboardingData) -> Actor:
        return self.households.resolve_actor(user.id, data.household_id)

    def _ensure_household(self, user: User, data: OnboardingData) -> OnboardingData:
        if data.household_id is not None:
            return data
        if not data.household_name or not data.household_name.strip():
            raise ValidationError("Household name is required")
        household = self.households.create_household(user, data.household_name)
        return data.model_copy(update={"household_id": household.id})

    def _ensure_rooms(self, user: User, data: OnboardingData) -> OnboardingData:
        if not data.rooms:
            raise ValidationError("Add at least one room")
        actor = self._actor(user, data)
        rooms = []
        for room in data.rooms:
            if room.id is None:
                location = self.storage.create_location(
                    actor,
                    LocationCreate(
                        name=room.name,
                        description=room.description,
                        is_primary_storage=room.is_primary_storage,
                    ),
                )
                room = room.model_copy(update={"id": location.id})
            rooms.append(room)
        return data.model_copy(update={"rooms": rooms})

    def _first_room_id(self, data: OnboardingData) -> int:
        for room in data.rooms:
            if room.id is not None:
                return room.id
        raise ValidationError("Set up a room first")

    def _ensure_first_container(self, user: User, data: OnboardingData) -> OnboardingData:
        first = data.first_container
        if first is None:
            raise ValidationError("Container details are required")
        if first.id is not None:
            return data
        actor = self._actor(user, data)
        location_id = first.location_id or self._first_room_id(data)
        container = self.storage.create_container(
            actor,
            location_id,
            ContainerCreate(name=first.name, container_type=first.container_type),
        )
        first = first.model_copy(update={"id": container.id, "location_id": location_id})
        return data.model_copy(update={"first_container": first})

    def _ensure_first_item(self, user: User, data: OnboardingData) -> OnboardingData:
        first = data.first_item
        if first is None:
            raise ValidationError("Item details are required")
        if first.id is not None:
            return data
        actor = self._actor(user, data)

        container_id = first.container_id
        location_id = first.location_id
        if container_id is None and location_id is None and data.first_container:
            container_id = data.first_container.id
            location_id = data.first_container.location_id
        if location_id is None:
            location_id = self._first_room_id(data)

        item = self.inventory.create_consumable(
            actor,
            ConsumableCreate(
                name=first.name,
                location_id=location_id,
                container_id=container_id,
                current_quantity=first.current_quantity,
                reorder_threshold=first.reorder_threshold,
            ),
        )
        first = first.model_copy(
            update={"id": item.id, "location_id": location_id, "container_id": container_id}
        )
        return data.model_copy(update={"first_item": first})
