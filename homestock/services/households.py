"""Households, memberships and the administrative data purge."""

import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from homestock.config import get_settings
from homestock.exceptions import CrossTenantAccess, InvariantViolation, NotFound, PermissionDenied
from homestock.models.activity_log import ActivityLog
from homestock.models.condition_log import ConditionLog
from homestock.models.enums import ActivityType, Role
from homestock.models.household import Household, HouseholdMember
from homestock.models.inventory_item import Consumable, NonConsumable
from homestock.models.location import Location, LocationPhoto, StorageContainer
from homestock.models.onboarding_progress import OnboardingProgress
from homestock.models.shopping_list import ShoppingList, ShoppingListItem
from homestock.models.user import User
from homestock.schemas.inventory import HouseholdSummary
from homestock.services.activity import ActivityLedger
from homestock.services.auth import find_user_by_email
from homestock.services.permissions import Actor
from homestock.services.photo_storage import PhotoStorage, get_photo_storage
from homestock.services.stock import StockService

logger = logging.getLogger(__name__)
settings = get_settings()


class HouseholdService:
    """Tenant lifecycle and the membership records that carry roles."""

    def __init__(self, db: Session, photo_storage: PhotoStorage | None = None):
        self.db = db
        self.photo_storage = photo_storage or get_photo_storage()
        self.ledger = ActivityLedger(db)

    def create_household(self, user: User, name: str) -> Household:
        """Create a household with ``user`` as its admin."""
        household = Household(name=name.strip(), created_by=user.id)
        self.db.add(household)
        self.db.flush()
        self.db.add(
            HouseholdMember(household_id=household.id, user_id=user.id, role=Role.ADMIN.value)
        )
        self.db.commit()
        self.db.refresh(household)

        self.ledger.record(
            household.id,
            user.id,
            ActivityType.MEMBER_JOINED,
            f"{user.name or user.email} created {household.name}",
            metadata={"role": Role.ADMIN.value},
        )
        return household

    def households_for(self, user: User) -> list[tuple[Household, Role]]:
        rows = (
            self.db.query(Household, HouseholdMember.role)
            .join(HouseholdMember, HouseholdMember.household_id == Household.id)
            .filter(HouseholdMember.user_id == user.id)
            .order_by(Household.id)
            .all()
        )
        return [(household, Role(role)) for household, role in rows]

    def get_household(self, household_id: int) -> Household:
        household = self.db.query(Household).filter(Household.id == household_id).first()
        if household is None:
            raise NotFound("Household")
        return household

    def summary(self, household_id: int) -> HouseholdSummary:
        """Counts shown on the household dashboard.

        ``shopping_list_count`` counts unpurchased entries on active lists.
        """
        consumables = (
            self.db.query(func.count(Consumable.id))
            .filter(Consumable.household_id == household_id, Consumable.is_active.is_(True))
            .scalar()
        )
        non_consumables = (
            self.db.query(func.count(NonConsumable.id))
            .filter(NonConsumable.household_id == household_id, NonConsumable.is_active.is_(True))
            .scalar()
        )
        pending_entries = (
            self.db.query(func.count(ShoppingListItem.id))
            .join(ShoppingList, ShoppingList.id == ShoppingListItem.shopping_list_id)
            .filter(
                ShoppingList.household_id == household_id,
                ShoppingList.is_active.is_(True),
                ShoppingListItem.is_purchased.is_(False),
            )
            .scalar()
        )
        expired = (
            self.db.query(func.count(Consumable.id))
            .filter(
                Consumable.household_id == household_id,
                Consumable.is_active.is_(True),
                Consumable.expiration_date < date.today(),
            )
            .scalar()
        )
        return HouseholdSummary(
            total_consumables=consumables,
            total_non_consumables=non_consumables,
            shopping_list_count=pending_entries,
            low_stock_count=len(StockService(self.db).low_stock(household_id)),
            expired_count=expired,
        )

    def resolve_actor(self, user_id: int, household_id: int) -> Actor:
        """Role of ``user_id`` in the household.

        Non-members get the same answer as a missing household.
        """
        membership = (
            self.db.query(HouseholdMember)
            .filter(
                HouseholdMember.household_id == household_id,
                HouseholdMember.user_id == user_id,
            )
            .first()
        )
        if membership is None:
            raise CrossTenantAccess("Household")
        return Actor(user_id=user_id, household_id=household_id, role=Role(membership.role))

    # Members

    def list_members(self, household_id: int) -> list[HouseholdMember]:
        return (
            self.db.query(HouseholdMember)
            .filter(HouseholdMember.household_id == household_id)
            .order_by(HouseholdMember.joined_at, HouseholdMember.id)
            .all()
        )

    def _get_member(self, household_id: int, user_id: int) -> HouseholdMember:
        member = (
            self.db.query(HouseholdMember)
            .filter(
                HouseholdMember.household_id == household_id,
                HouseholdMember.user_id == user_id,
            )
            .first()
        )
        if member is None:
            raise NotFound("Member")
        return member

    def add_member(self, actor: Actor, email: str, role: Role) -> HouseholdMember:
        actor.require_member_management()
        user = find_user_by_email(self.db, email)
        if user is None:
            raise NotFound("User")

        existing = (
            self.db.query(HouseholdMember)
            .filter(
                HouseholdMember.household_id == actor.household_id,
                HouseholdMember.user_id == user.id,
            )
            .first()
        )
        if existing is not None:
            raise InvariantViolation(f"{user.email} is already a member")

        member = HouseholdMember(
            household_id=actor.household_id,
            user_id=user.id,
            role=role.value,
            invited_by=actor.user_id,
        )
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.MEMBER_JOINED,
            f"{user.name or user.email} joined as {role.value}",
            metadata={"member_user_id": user.id, "role": role.value},
        )
        return member

    def update_member_role(self, actor: Actor, user_id: int, role: Role) -> HouseholdMember:
        actor.require_member_management()
        member = self._get_member(actor.household_id, user_id)
        if user_id == actor.user_id and role is not Role.ADMIN:
            raise InvariantViolation("You cannot remove your own admin role")

        previous = member.role
        member.role = role.value
        self.db.commit()
        self.db.refresh(member)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_MEMBER_ROLE,
            f"Changed {member.user.name or member.user.email} from {previous} to {role.value}",
            metadata={"member_user_id": user_id, "old_role": previous, "new_role": role.value},
        )
        return member

    def remove_member(self, actor: Actor, user_id: int) -> None:
        actor.require_member_management()
        if user_id == actor.user_id:
            raise InvariantViolation("You cannot remove yourself from the household")
        member = self._get_member(actor.household_id, user_id)
        label = member.user.name or member.user.email

        self.db.delete(member)
        self.db.commit()
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.REMOVED_MEMBER,
            f"Removed {label} from the household",
            metadata={"member_user_id": user_id},
        )

    # Purge

    def purge(self, actor: Actor) -> dict[str, int]:
        """Hard delete every row belonging to the household.

        Only for clearing test data; disabled unless ``enable_data_purge``.
        """
        if not settings.enable_data_purge:
            raise PermissionDenied("Data purge is disabled")
        actor.require_member_management()
        household_id = actor.household_id
        self.get_household(household_id)

        photo_paths = [
            path
            for (path,) in self.db.query(LocationPhoto.storage_path)
            .join(Location)
            .filter(Location.household_id == household_id, LocationPhoto.storage_path.isnot(None))
        ]
        photo_paths += [
            path
            for (path,) in self.db.query(StorageContainer.storage_path).filter(
                StorageContainer.household_id == household_id,
                StorageContainer.storage_path.isnot(None),
            )
        ]

        list_ids = [
            list_id
            for (list_id,) in self.db.query(ShoppingList.id).filter(
                ShoppingList.household_id == household_id
            )
        ]
        location_ids = [
            location_id
            for (location_id,) in self.db.query(Location.id).filter(
                Location.household_id == household_id
            )
        ]

        counts: dict[str, int] = {}
        counts["shopping_list_items"] = (
            self.db.query(ShoppingListItem)
            .filter(ShoppingListItem.shopping_list_id.in_(list_ids))
            .delete(synchronize_session=False)
        )
        for name, model in (
            ("shopping_lists", ShoppingList),
            ("condition_logs", ConditionLog),
            ("consumables", Consumable),
            ("non_consumables", NonConsumable),
        ):
            counts[name] = (
                self.db.query(model)
                .filter(model.household_id == household_id)
                .delete(synchronize_session=False)
            )
        counts["location_photos"] = (
            self.db.query(LocationPhoto)
            .filter(LocationPhoto.location_id.in_(location_ids))
            .delete(synchronize_session=False)
        )
        for name, model in (
            ("storage_containers", StorageContainer),
            ("locations", Location),
            ("activity_log", ActivityLog),
            ("onboarding_progress", OnboardingProgress),
            ("members", HouseholdMember),
        ):
            counts[name] = (
                self.db.query(model)
                .filter(model.household_id == household_id)
                .delete(synchronize_session=False)
            )
        self.db.query(Household).filter(Household.id == household_id).delete(
            synchronize_session=False
        )
        self.db.commit()

        if photo_paths:
            try:
                self.photo_storage.remove(photo_paths)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to remove photos for purged household {household_id}: {e}")

        logger.warning(f"Purged household {household_id} by user {actor.user_id}: {counts}")
        return counts
