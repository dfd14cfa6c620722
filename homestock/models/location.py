"""Location (room / storage zone) and container models."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, false
from sqlalchemy.orm import relationship

from homestock.database import Base
from homestock.models.mixins import ActiveMixin, TimestampMixin


class Location(Base, TimestampMixin, ActiveMixin):
    """A room or storage zone within a household."""

    __tablename__ = "household_locations"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    is_primary_storage = Column(Boolean, nullable=False, default=False, server_default=false())

    household = relationship("Household", back_populates="locations")
    containers = relationship("StorageContainer", back_populates="location")
    photos = relationship("LocationPhoto", back_populates="location", cascade="all, delete-orphan")


class LocationPhoto(Base, TimestampMixin):
    """Photo attached to a location; only the URL and storage path are kept."""

    __tablename__ = "location_photos"

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("household_locations.id"), nullable=False, index=True)
    photo_url = Column(String(1024), nullable=False)
    storage_path = Column(String(1024), nullable=True)
    caption = Column(String(255), nullable=True)

    location = relationship("Location", back_populates="photos")


class StorageContainer(Base, TimestampMixin, ActiveMixin):
    """Optional subdivision of a location: shelf, bin, cabinet..."""

    __tablename__ = "storage_containers"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(Integer, ForeignKey("households.id"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("household_locations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    container_type = Column(String(20), nullable=False, default="other")
    capacity_info = Column(String(255), nullable=True)
    photo_url = Column(String(1024), nullable=True)
    storage_path = Column(String(1024), nullable=True)

    location = relationship("Location", back_populates="containers")
