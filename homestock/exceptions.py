"""Domain errors raised by the inventory services.

Every error carries the HTTP status it maps to; the handlers registered in
``homestock.main`` turn them into ``{"detail": ...}`` responses.
"""

from fastapi import status


class InventoryError(Exception):
    """Base class for all domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(InventoryError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input"


class InvariantViolation(InventoryError):
    """The mutation would break an inventory invariant."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation violates an inventory rule"


class NegativeQuantity(InvariantViolation):
    default_detail = "Quantity cannot drop below zero"


class InvalidPlacement(InvariantViolation):
    default_detail = "Container does not belong to the given location"


class ContainerNotEmpty(InvariantViolation):
    default_detail = "Container still holds active items"


class LocationNotEmpty(InvariantViolation):
    default_detail = "Location still holds active items"


class ConditionNotWritable(InvariantViolation):
    default_detail = "Condition can only be changed by logging a condition entry"


class OnboardingTransitionError(InvariantViolation):
    default_detail = "Onboarding step transition not allowed"


class NotFound(InventoryError):
    """Referenced entity does not exist or is soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str = "Resource") -> None:
        self.entity = entity
        super().__init__(f"{entity} not found")


class CrossTenantAccess(NotFound):
    """Referenced entity belongs to another household.

    Renders exactly like ``NotFound`` so callers cannot discover other
    households for ids.
    """


class PermissionDenied(InventoryError):
    """The acting member's role lacks the required capability."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You don't have permission to perform this action"


class TransientInfrastructureError(InventoryError):
    """Store or bus unavailable; safe for the caller to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable, please retry"
