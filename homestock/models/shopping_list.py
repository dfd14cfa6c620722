"""Shopping list models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    false,
)
from sqlalchemy.orm import relationship

from homestock.database import Base
from homestock.models.mixins import ActiveMixin, TimestampMixin


class ShoppingList(Base, TimestampMixin, ActiveMixin):
    """Named shopping list owned by a household."""

    __tablename__ = "shopping_lists"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItem.id",
    )


class ShoppingListItem(Base, TimestampMixin):
    """Entry on a shopping list."""

    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    shopping_list_id = Column(Integer, ForeignKey("shopping_lists.id"), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(String, nullable=True)
    estimated_cost = Column(Numeric(10, 2), nullable=True)
    is_purchased = Column(Boolean, nullable=False, default=False, server_default=false())
    purchased_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    purchased_at = Column(DateTime(timezone=True), nullable=True)
    consumable_id = Column(Integer, ForeignKey("consumables.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    shopping_list = relationship("ShoppingList", back_populates="items")
