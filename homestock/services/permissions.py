"""Acting-member context and household-scoped lookups."""

from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from homestock.exceptions import CrossTenantAccess, NotFound, PermissionDenied
from homestock.models.enums import Role

ModelT = TypeVar("ModelT")


@dataclass(frozen=True)
class Actor:
    """The member performing an operation, as resolved from the identity provider."""

    user_id: int
    household_id: int
    role: Role

    @property
    def can_edit(self) -> bool:
        return self.role.can_edit()

    @property
    def can_manage_members(self) -> bool:
        return self.role.can_manage_members()

    def require_edit(self) -> None:
        if not self.can_edit:
            raise PermissionDenied()

    def require_member_management(self) -> None:
        if not self.can_manage_members:
            raise PermissionDenied()


def load_scoped(
    db: Session,
    model: type[ModelT],
    entity_id: int,
    household_id: int,
    entity: str,
    *,
    active_only: bool = True,
) -> ModelT:
    """Load a household-owned row by id.

    Raises CrossTenantAccess when the row belongs to another household and
    NotFound when it is missing or soft-deleted.
    """
    obj: Any = db.query(model).filter(model.id == entity_id).first()  # type: ignore[attr-defined]
    if obj is None:
        raise NotFound(entity)
    if obj.household_id != household_id:
        raise CrossTenantAccess(entity)
    if active_only and not obj.is_active:
        raise NotFound(entity)
    return obj
