"""Append-only household activity ledger."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, func

from homestock.database import Base


class ActivityLog(Base):
    """Audit record of a mutating action. Never updated or deleted."""

    __tablename__ = "family_activity_log"
    __table_args__ = (
        Index("ix_activity_household_recent", "household_id", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    activity_type = Column(String(50), nullable=False)
    description = Column(String, nullable=False)
    item_id = Column(Integer, nullable=True)
    item_type = Column(String(20), nullable=True)  # consumable | non_consumable
    # "metadata" is reserved on declarative classes
    activity_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
