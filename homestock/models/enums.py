"""Enums for model fields."""

from enum import Enum, IntEnum, StrEnum


class Role(str, Enum):
    """Household member roles supplied by the identity provider."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    VIEWER = "viewer"

    def can_edit(self) -> bool:
        """Check if this role may mutate inventory."""
        return self in (Role.ADMIN, Role.MANAGER, Role.EMPLOYEE)

    def can_manage_members(self) -> bool:
        """Check if this role may add, remove or re-role members."""
        return self == Role.ADMIN


class ContainerType(StrEnum):
    """Kinds of storage subdivision inside a location."""

    SHELF = "shelf"
    CABINET = "cabinet"
    DRAWER = "drawer"
    BOX = "box"
    CLOSET = "closet"
    BIN = "bin"
    RACK = "rack"
    OTHER = "other"


class ConditionRating(StrEnum):
    """Condition of a durable (non-consumable) item."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    BROKEN = "broken"


class ItemKind(StrEnum):
    """The two item lifecycles."""

    CONSUMABLE = "consumable"
    NON_CONSUMABLE = "non_consumable"


class StockStatus(StrEnum):
    """Derived stock classification of a consumable."""

    OK = "ok"
    LOW = "low"
    CRITICAL = "critical"
    OUT = "out"


class ActivityType(StrEnum):
    """Closed set of activity ledger tags."""

    ADDED_ITEM = "added_item"
    UPDATED_ITEM = "updated_item"
    DELETED_ITEM = "deleted_item"
    MOVED_ITEM = "moved_item"
    UPDATED_QUANTITY = "updated_quantity"
    ADDED_CONDITION_LOG = "added_condition_log"
    CREATED_LOCATION = "created_location"
    UPDATED_LOCATION = "updated_location"
    DELETED_LOCATION = "deleted_location"
    CREATED_CONTAINER = "created_container"
    UPDATED_CONTAINER = "updated_container"
    DELETED_CONTAINER = "deleted_container"
    MEMBER_JOINED = "member_joined"
    UPDATED_MEMBER_ROLE = "updated_member_role"
    REMOVED_MEMBER = "removed_member"
    CREATED_LIST = "created_list"
    ADDED_TO_SHOPPING_LIST = "added_to_shopping_list"
    PURCHASED_ITEM = "purchased_item"
    COMPLETED_ONBOARDING = "completed_onboarding"


class OnboardingStep(IntEnum):
    """Wizard steps, in order."""

    WELCOME = 0
    ROOM_SETUP = 1
    PHOTO_TOUR = 2
    FIRST_CONTAINER = 3
    FIRST_ITEM = 4
    COMPLETE = 5
