"""Mixins for SQLAlchemy models."""

from sqlalchemy import Boolean, Column, DateTime, func, true


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ActiveMixin:
    """Soft delete through an ``is_active`` flag.

    Locations, containers and items are never physically removed outside the
    administrative purge; inactive rows are treated as not found.
    """

    is_active = Column(Boolean, nullable=False, default=True, server_default=true(), index=True)

    def deactivate(self) -> None:
        """Soft delete the record."""
        self.is_active = False

    def restore(self) -> None:
        """Restore a soft-deleted record."""
        self.is_active = True
