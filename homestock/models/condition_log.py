"""Append-only condition history for non-consumables."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from homestock.database import Base


class ConditionLog(Base):
    """One condition observation. Rows are never updated or deleted."""

    __tablename__ = "condition_logs"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False, index=True)
    non_consumable_id = Column(
        Integer, ForeignKey("non_consumables.id"), nullable=False, index=True
    )
    rating = Column(String(20), nullable=False)
    notes = Column(String, nullable=True)
    maintenance_performed = Column(String, nullable=True)
    estimated_repair_cost = Column(Numeric(10, 2), nullable=True)
    photos = Column(JSON, nullable=False, default=list)  # photo URLs
    logged_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    item = relationship("NonConsumable", back_populates="condition_logs")
