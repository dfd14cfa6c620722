"""Persisted onboarding wizard progress."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String

from homestock.database import Base
from homestock.models.mixins import TimestampMixin


class OnboardingProgress(Base, TimestampMixin):
    """One row per user; upserted after every wizard step, deleted on completion."""

    __tablename__ = "onboarding_progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=True)
    current_step = Column(Integer, nullable=False, default=0)
    completed_steps = Column(JSON, nullable=False, default=list)
    household_name = Column(String(255), nullable=True)
    rooms_data = Column(JSON, nullable=False, default=list)
    first_container_data = Column(JSON, nullable=True)
    first_item_data = Column(JSON, nullable=True)
