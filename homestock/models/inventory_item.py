"""Consumable and non-consumable item models."""

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import declared_attr, relationship

from homestock.database import Base
from homestock.models.mixins import ActiveMixin, TimestampMixin


class PlacementMixin:
    """Household scope plus ``(location, container?)`` placement shared by both item kinds."""

    @declared_attr
    def household_id(cls):
        return Column(Integer, ForeignKey("households.id"), nullable=False, index=True)

    @declared_attr
    def location_id(cls):
        return Column(Integer, ForeignKey("household_locations.id"), nullable=False, index=True)

    @declared_attr
    def container_id(cls):
        return Column(Integer, ForeignKey("storage_containers.id"), nullable=True, index=True)

    @declared_attr
    def created_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True)

    @declared_attr
    def location(cls):
        return relationship("Location")

    @declared_attr
    def container(cls):
        return relationship("StorageContainer")


class Consumable(Base, TimestampMixin, ActiveMixin, PlacementMixin):
    """Quantity-tracked item that depletes over time."""

    __tablename__ = "consumables"
    __table_args__ = (
        CheckConstraint("current_quantity >= 0", name="ck_consumables_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    brand = Column(String(255), nullable=True)
    # Only StockService.adjust_quantity changes this after creation
    current_quantity = Column(Integer, nullable=False, default=0)
    reorder_threshold = Column(Integer, nullable=False, default=0)
    unit_cost = Column(Numeric(10, 2), nullable=True)
    expiration_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)


class NonConsumable(Base, TimestampMixin, ActiveMixin, PlacementMixin):
    """Durable item tracked by condition rather than quantity."""

    __tablename__ = "non_consumables"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    brand = Column(String(255), nullable=True)
    model = Column(String(255), nullable=True)
    serial_number = Column(String(255), nullable=True)
    # Mirrors the newest condition log once one exists
    condition = Column(String(20), nullable=False, default="good")
    purchase_date = Column(Date, nullable=True)
    purchase_price = Column(Numeric(10, 2), nullable=True)
    warranty_expiration = Column(Date, nullable=True)
    notes = Column(String, nullable=True)

    condition_logs = relationship(
        "ConditionLog", back_populates="item", order_by="ConditionLog.id"
    )
