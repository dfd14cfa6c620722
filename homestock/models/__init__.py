"""SQLAlchemy models."""

from homestock.models.activity_log import ActivityLog
from homestock.models.condition_log import ConditionLog
from homestock.models.household import Household, HouseholdMember
from homestock.models.inventory_item import Consumable, NonConsumable
from homestock.models.location import Location, LocationPhoto, StorageContainer
from homestock.models.onboarding_progress import OnboardingProgress
from homestock.models.shopping_list import ShoppingList, ShoppingListItem
from homestock.models.user import User

__all__ = [
    "User",
    "Household",
    "HouseholdMember",
    "Location",
    "LocationPhoto",
    "StorageContainer",
    "Consumable",
    "NonConsumable",
    "ConditionLog",
    "ShoppingList",
    "ShoppingListItem",
    "ActivityLog",
    "OnboardingProgress",
]
