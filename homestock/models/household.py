"""Household tenant and membership models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import relationship

from homestock.database import Base
from homestock.models.mixins import TimestampMixin


class Household(Base, TimestampMixin):
    """Root tenant scope: one family's inventory."""

    __tablename__ = "households"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    onboarding_completed = Column(Boolean, nullable=False, default=False, server_default=false())
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    members = relationship("HouseholdMember", back_populates="household", cascade="all, delete-orphan")
    locations = relationship("Location", back_populates="household")


class HouseholdMember(Base, TimestampMixin):
    """A user's membership in a household, with the role used for capability checks."""

    __tablename__ = "household_members"
    __table_args__ = (
        UniqueConstraint("household_id", "user_id", name="uq_household_member"),
    )

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="employee")  # admin|manager|employee|viewer
    invited_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    household = relationship("Household", back_populates="members")
    user = relationship("User", back_populates="memberships", foreign_keys=[user_id])
