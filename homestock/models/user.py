"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from homestock.database import Base
from homestock.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Family member account; identity only, roles live on memberships."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    memberships = relationship(
        "HouseholdMember",
        back_populates="user",
        foreign_keys="HouseholdMember.user_id",
        cascade="all, delete-orphan",
    )
