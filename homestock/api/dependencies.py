"""FastAPI dependencies for authentication, household scope and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from homestock.database import get_db
from homestock.models.user import User
from homestock.services.activity import ActivityLedger
from homestock.services.auth import read_token
from homestock.services.condition import ConditionService
from homestock.services.households import HouseholdService
from homestock.services.inventory import InventoryService
from homestock.services.onboarding import OnboardingService
from homestock.services.permissions import Actor
from homestock.services.shopping import ShoppingService
from homestock.services.stock import StockService
from homestock.services.storage import StorageService
from homestock.tasks.shopping import enqueue_low_stock_trigger

security = HTTPBearer()


def user_from_token(db: Session, token: str) -> User | None:
    user_id = read_token(token)
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    user = user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_household_service(db: Annotated[Session, Depends(get_db)]) -> HouseholdService:
    return HouseholdService(db)


def get_actor(
    household_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    households: Annotated[HouseholdService, Depends(get_household_service)],
) -> Actor:
    """The current user acting inside the household named by the path."""
    return households.resolve_actor(current_user.id, household_id)


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentActor = Annotated[Actor, Depends(get_actor)]


def get_storage_service(db: Annotated[Session, Depends(get_db)]) -> StorageService:
    return StorageService(db)


def get_inventory_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
) -> InventoryService:
    return InventoryService(db, storage)


def get_stock_service(db: Annotated[Session, Depends(get_db)]) -> StockService:
    """Stock service whose restock triggers go to the Celery worker."""
    return StockService(db, on_trigger=enqueue_low_stock_trigger)


def get_condition_service(db: Annotated[Session, Depends(get_db)]) -> ConditionService:
    return ConditionService(db)


def get_shopping_service(db: Annotated[Session, Depends(get_db)]) -> ShoppingService:
    return ShoppingService(db)


def get_activity_ledger(db: Annotated[Session, Depends(get_db)]) -> ActivityLedger:
    return ActivityLedger(db)


def get_onboarding_service(db: Annotated[Session, Depends(get_db)]) -> OnboardingService:
    return OnboardingService(db)
