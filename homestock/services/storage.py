"""Storage hierarchy: household -> location -> container -> item."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from homestock.exceptions import ContainerNotEmpty, InvalidPlacement, LocationNotEmpty
from homestock.models.enums import ActivityType, ItemKind
from homestock.models.inventory_item import Consumable, NonConsumable
from homestock.models.location import Location, LocationPhoto, StorageContainer
from homestock.schemas.inventory import NonConsumableResponse
from homestock.schemas.location import (
    ContainerCreate,
    ContainerUpdate,
    LocationCreate,
    LocationUpdate,
)
from homestock.services.activity import ActivityLedger
from homestock.services.permissions import Actor, load_scoped
from homestock.services.photo_storage import PhotoStorage, get_photo_storage, photo_path
from homestock.services.realtime import ChangeEvent, ChangeTable, publish_household_event
from homestock.services.stock import serialize_consumable

logger = logging.getLogger(__name__)

ItemModel = type[Consumable] | type[NonConsumable]
Item = Consumable | NonConsumable

ITEM_MODELS: tuple[ItemModel, ...] = (Consumable, NonConsumable)


def item_kind(item: Item) -> ItemKind:
    return ItemKind.CONSUMABLE if isinstance(item, Consumable) else ItemKind.NON_CONSUMABLE


def publish_item_change(item: Item, event: ChangeEvent) -> None:
    """Push an item row to the household's subscribers."""
    if isinstance(item, Consumable):
        table = ChangeTable.CONSUMABLES
        record = serialize_consumable(item).model_dump(mode="json")
    else:
        table = ChangeTable.NON_CONSUMABLES
        record = NonConsumableResponse.model_validate(item).model_dump(mode="json")
    publish_household_event(item.household_id, table, event, record)


class StorageService:
    """Locations, containers and item placement for one household."""

    def __init__(self, db: Session, photo_storage: PhotoStorage | None = None):
        self.db = db
        self.photo_storage = photo_storage or get_photo_storage()
        self.ledger = ActivityLedger(db)

    # Locations

    def list_locations(self, household_id: int) -> list[Location]:
        return (
            self.db.query(Location)
            .filter(Location.household_id == household_id, Location.is_active.is_(True))
            .order_by(Location.name)
            .all()
        )

    def get_location(self, household_id: int, location_id: int) -> Location:
        return load_scoped(self.db, Location, location_id, household_id, "Location")

    def create_location(self, actor: Actor, data: LocationCreate) -> Location:
        actor.require_edit()
        location = Location(
            household_id=actor.household_id,
            name=data.name.strip(),
            description=data.description,
            is_primary_storage=data.is_primary_storage,
        )
        self.db.add(location)
        self.db.commit()
        self.db.refresh(location)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.CREATED_LOCATION,
            f"Added location {location.name}",
            metadata={"location_id": location.id},
        )
        return location

    def update_location(self, actor: Actor, location_id: int, data: LocationUpdate) -> Location:
        actor.require_edit()
        location = self.get_location(actor.household_id, location_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "name" and value is not None:
                value = value.strip()
            if value is not None or field == "description":
                setattr(location, field, value)

        self.db.commit()
        self.db.refresh(location)
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_LOCATION,
            f"Updated location {location.name}",
            metadata={"location_id": location.id},
        )
        return location

    def delete_location(self, actor: Actor, location_id: int) -> None:
        """Soft delete a location with its containers and photos.

        Refused while any active item is placed in the location.
        """
        actor.require_edit()
        location = self.get_location(actor.household_id, location_id)

        remaining = self.active_item_count(location_id=location.id)
        if remaining:
            raise LocationNotEmpty(
                f"Cannot delete {location.name}: {remaining} items still stored here. "
                "Move or remove them first."
            )

        photo_paths = [p.storage_path for p in location.photos if p.storage_path]
        containers = (
            self.db.query(StorageContainer)
            .filter(
                StorageContainer.location_id == location.id,
                StorageContainer.is_active.is_(True),
            )
            .all()
        )
        for container in containers:
            if container.storage_path:
                photo_paths.append(container.storage_path)
            container.photo_url = None
            container.storage_path = None
            container.deactivate()

        for photo in list(location.photos):
            self.db.delete(photo)
        location.deactivate()
        self.db.commit()

        self._remove_photos(photo_paths)
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.DELETED_LOCATION,
            f"Removed location {location.name}",
            metadata={"location_id": location.id, "containers_removed": len(containers)},
        )

    def add_location_photo(
        self,
        actor: Actor,
        location_id: int,
        filename: str | None,
        data: bytes,
        content_type: str | None = None,
        caption: str | None = None,
    ) -> LocationPhoto:
        actor.require_edit()
        location = self.get_location(actor.household_id, location_id)
        path = photo_path(
            actor.household_id, "location-photos", location.id, filename, _stamp()
        )
        url = self.photo_storage.upload(path, data, content_type)

        photo = LocationPhoto(
            location_id=location.id, photo_url=url, storage_path=path, caption=caption
        )
        self.db.add(photo)
        self.db.commit()
        self.db.refresh(photo)
        return photo

    # Containers

    def list_containers(self, household_id: int, location_id: int) -> list[StorageContainer]:
        location = self.get_location(household_id, location_id)
        return (
            self.db.query(StorageContainer)
            .filter(
                StorageContainer.location_id == location.id,
                StorageContainer.is_active.is_(True),
            )
            .order_by(StorageContainer.name)
            .all()
        )

    def get_container(self, household_id: int, container_id: int) -> StorageContainer:
        return load_scoped(self.db, StorageContainer, container_id, household_id, "Container")

    def create_container(
        self, actor: Actor, location_id: int, data: ContainerCreate
    ) -> StorageContainer:
        actor.require_edit()
        location = self.get_location(actor.household_id, location_id)

        container = StorageContainer(
            household_id=actor.household_id,
            location_id=location.id,
            name=data.name.strip(),
            description=data.description,
            container_type=str(data.container_type),
            capacity_info=data.capacity_info,
        )
        self.db.add(container)
        self.db.commit()
        self.db.refresh(container)

        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.CREATED_CONTAINER,
            f"Added {container.container_type} {container.name} to {location.name}",
            metadata={"container_id": container.id, "location_id": location.id},
        )
        return container

    def update_container(
        self, actor: Actor, container_id: int, data: ContainerUpdate
    ) -> StorageContainer:
        actor.require_edit()
        container = self.get_container(actor.household_id, container_id)

        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            container.name = updates["name"].strip()
        if updates.get("container_type"):
            container.container_type = str(updates["container_type"])
        if "description" in updates:
            container.description = updates["description"]
        if "capacity_info" in updates:
            container.capacity_info = updates["capacity_info"]

        self.db.commit()
        self.db.refresh(container)
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.UPDATED_CONTAINER,
            f"Updated container {container.name}",
            metadata={"container_id": container.id},
        )
        return container

    def delete_container(self, actor: Actor, container_id: int) -> None:
        """Soft delete an empty container. Live items are never cascaded."""
        actor.require_edit()
        container = self.get_container(actor.household_id, container_id)

        remaining = self.active_item_count(container_id=container.id)
        if remaining:
            raise ContainerNotEmpty(
                f"Cannot delete container with {remaining} items. "
                "Please move or remove items first."
            )

        photo_paths = [container.storage_path] if container.storage_path else []
        container.deactivate()
        self.db.commit()

        self._remove_photos(photo_paths)
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.DELETED_CONTAINER,
            f"Removed container {container.name}",
            metadata={"container_id": container.id, "location_id": container.location_id},
        )

    def set_container_photo(
        self,
        actor: Actor,
        container_id: int,
        filename: str | None,
        data: bytes,
        content_type: str | None = None,
    ) -> StorageContainer:
        actor.require_edit()
        container = self.get_container(actor.household_id, container_id)
        path = photo_path(
            actor.household_id, "container-photos", container.id, filename, _stamp()
        )
        url = self.photo_storage.upload(path, data, content_type)

        previous = container.storage_path
        container.photo_url = url
        container.storage_path = path
        self.db.commit()
        self.db.refresh(container)

        if previous:
            self._remove_photos([previous])
        return container

    # Placement

    def resolve_placement(
        self, household_id: int, location_id: int, container_id: int | None
    ) -> tuple[Location, StorageContainer | None]:
        """Check that a ``(location, container?)`` pair is valid for the household."""
        location = self.get_location(household_id, location_id)
        if container_id is None:
            return location, None

        container = self.get_container(household_id, container_id)
        if container.location_id != location.id:
            raise InvalidPlacement(
                f"Container {container.name} is not in {location.name}"
            )
        return location, container

    def place_item(
        self,
        actor: Actor,
        model: ItemModel,
        item_id: int,
        location_id: int,
        container_id: int | None = None,
    ) -> Item:
        """Move an item to a new location and optional container."""
        actor.require_edit()
        entity = "Consumable" if model is Consumable else "Non-consumable"
        item = load_scoped(self.db, model, item_id, actor.household_id, entity)
        location, container = self.resolve_placement(
            actor.household_id, location_id, container_id
        )

        previous = {"location_id": item.location_id, "container_id": item.container_id}
        item.location_id = location.id
        item.container_id = container.id if container else None
        self.db.commit()
        self.db.refresh(item)

        where = f"{container.name} in {location.name}" if container else location.name
        self.ledger.record(
            actor.household_id,
            actor.user_id,
            ActivityType.MOVED_ITEM,
            f"Moved {item.name} to {where}",
            item_id=item.id,
            item_type=item_kind(item),
            metadata={
                "from": previous,
                "to": {"location_id": item.location_id, "container_id": item.container_id},
            },
        )
        publish_item_change(item, ChangeEvent.UPDATE)
        return item

    def active_item_count(
        self, *, location_id: int | None = None, container_id: int | None = None
    ) -> int:
        """Active items of either kind in a location or container."""
        total = 0
        for model in ITEM_MODELS:
            query = self.db.query(model).filter(model.is_active.is_(True))
            if location_id is not None:
                query = query.filter(model.location_id == location_id)
            if container_id is not None:
                query = query.filter(model.container_id == container_id)
            total += query.count()
        return total

    def _remove_photos(self, paths: list[str]) -> None:
        if not paths:
            return
        try:
            self.photo_storage.remove(paths)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to remove photos {paths}: {e}")


def _stamp() -> str:
    return datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
