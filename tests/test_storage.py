"""Tests for the storage hierarchy: locations, containers and placement."""

import pytest

from homestock.exceptions import (
    ContainerNotEmpty,
    CrossTenantAccess,
    InvalidPlacement,
    InvariantViolation,
    LocationNotEmpty,
    NotFound,
    PermissionDenied,
)
from homestock.models.enums import ContainerType, Role
from homestock.models.inventory_item import Consumable, NonConsumable
from homestock.models.location import LocationPhoto, StorageContainer
from homestock.schemas.inventory import ConsumableCreate, NonConsumableCreate
from homestock.schemas.location import ContainerCreate, LocationCreate, LocationUpdate
from homestock.services.inventory import InventoryService
from homestock.services.permissions import Actor
from homestock.services.photo_storage import photo_path
from homestock.services.storage import StorageService


@pytest.fixture
def storage(db, photo_storage):
    return StorageService(db, photo_storage)


@pytest.fixture
def inventory(db, storage):
    return InventoryService(db, storage)


@pytest.fixture
def kitchen(storage, actor):
    return storage.create_location(actor, LocationCreate(name="Kitchen"))


@pytest.fixture
def garage(storage, actor):
    return storage.create_location(actor, LocationCreate(name="Garage"))


@pytest.fixture
def pantry_shelf(storage, actor, kitchen):
    return storage.create_container(
        actor, kitchen.id, ContainerCreate(name="Pantry Shelf", container_type=ContainerType.SHELF)
    )


def add_towels(inventory, actor, location_id, container_id=None):
    return inventory.create_consumable(
        actor,
        ConsumableCreate(
            name="Paper Towels",
            location_id=location_id,
            container_id=container_id,
            current_quantity=4,
            reorder_threshold=2,
        ),
    )


class TestLocations:
    def test_create_and_list(self, storage, actor, kitchen, garage):
        names = [loc.name for loc in storage.list_locations(actor.household_id)]
        assert names == ["Garage", "Kitchen"]

    def test_update_strips_name(self, storage, actor, kitchen):
        updated = storage.update_location(actor, kitchen.id, LocationUpdate(name="  Main Kitchen "))
        assert updated.name == "Main Kitchen"

    def test_viewer_cannot_create(self, storage, actor):
        viewer = Actor(user_id=actor.user_id, household_id=actor.household_id, role=Role.VIEWER)
        with pytest.raises(PermissionDenied):
            storage.create_location(viewer, LocationCreate(name="Attic"))

    def test_other_household_cannot_read(self, storage, kitchen, other_actor):
        with pytest.raises(CrossTenantAccess):
            storage.get_location(other_actor.household_id, kitchen.id)

    def test_delete_empty_location(self, storage, actor, kitchen):
        storage.delete_location(actor, kitchen.id)

        assert storage.list_locations(actor.household_id) == []
        with pytest.raises(NotFound):
            storage.get_location(actor.household_id, kitchen.id)

    def test_delete_blocked_by_items_placed_directly(self, storage, inventory, actor, kitchen):
        add_towels(inventory, actor, kitchen.id)

        with pytest.raises(LocationNotEmpty):
            storage.delete_location(actor, kitchen.id)
        assert storage.get_location(actor.household_id, kitchen.id).is_active

    def test_delete_blocked_is_an_invariant_violation(self, storage, inventory, actor, kitchen):
        add_towels(inventory, actor, kitchen.id)
        with pytest.raises(InvariantViolation):
            storage.delete_location(actor, kitchen.id)

    def test_delete_allowed_after_items_removed(self, storage, inventory, actor, kitchen):
        item = add_towels(inventory, actor, kitchen.id)
        inventory.delete_consumable(actor, item.id)

        storage.delete_location(actor, kitchen.id)

    def test_delete_cascades_to_containers_and_photos(
        self, db, storage, actor, kitchen, pantry_shelf, photo_dir
    ):
        photo = storage.add_location_photo(actor, kitchen.id, "kitchen.png", b"png-bytes")
        storage.set_container_photo(actor, pantry_shelf.id, "shelf.jpg", b"jpg-bytes")
        assert (photo_dir / photo.storage_path).exists()
        shelf_path = photo_dir / pantry_shelf.storage_path

        storage.delete_location(actor, kitchen.id)

        db.refresh(pantry_shelf)
        assert pantry_shelf.is_active is False
        assert pantry_shelf.photo_url is None
        assert db.query(LocationPhoto).count() == 0
        assert not (photo_dir / photo.storage_path).exists()
        assert not shelf_path.exists()


class TestContainers:
    def test_list_by_location(self, storage, actor, kitchen, garage, pantry_shelf):
        storage.create_container(actor, garage.id, ContainerCreate(name="Tool Rack"))

        kitchen_containers = storage.list_containers(actor.household_id, kitchen.id)

        assert [c.name for c in kitchen_containers] == ["Pantry Shelf"]
        assert kitchen_containers[0].container_type == "shelf"

    def test_delete_empty_container(self, db, storage, actor, pantry_shelf):
        storage.delete_container(actor, pantry_shelf.id)
        db.refresh(pantry_shelf)
        assert pantry_shelf.is_active is False

    def test_delete_blocked_by_consumable(self, storage, inventory, actor, kitchen, pantry_shelf):
        add_towels(inventory, actor, kitchen.id, pantry_shelf.id)
        with pytest.raises(ContainerNotEmpty):
            storage.delete_container(actor, pantry_shelf.id)

    def test_delete_blocked_by_non_consumable(
        self, storage, inventory, actor, kitchen, pantry_shelf
    ):
        inventory.create_non_consumable(
            actor,
            NonConsumableCreate(name="Stand Mixer", location_id=kitchen.id, container_id=pantry_shelf.id),
        )
        with pytest.raises(ContainerNotEmpty):
            storage.delete_container(actor, pantry_shelf.id)

    def test_container_in_other_household_is_hidden(self, storage, pantry_shelf, other_actor):
        with pytest.raises(NotFound):
            storage.get_container(other_actor.household_id, pantry_shelf.id)

    def test_replacing_photo_removes_previous_file(self, storage, actor, pantry_shelf, photo_dir):
        first = storage.set_container_photo(actor, pantry_shelf.id, "a.jpg", b"one").storage_path
        second = storage.set_container_photo(actor, pantry_shelf.id, "b.jpg", b"two").storage_path

        assert first != second
        assert not (photo_dir / first).exists()
        assert (photo_dir / second).read_bytes() == b"two"


class TestPlacement:
    def test_create_with_container_from_other_location_fails(
        self, inventory, actor, garage, pantry_shelf
    ):
        with pytest.raises(InvalidPlacement):
            add_towels(inventory, actor, garage.id, pantry_shelf.id)

    def test_place_item_rejects_cross_location_container(
        self, storage, inventory, actor, kitchen, garage, pantry_shelf
    ):
        item = add_towels(inventory, actor, kitchen.id)

        with pytest.raises(InvalidPlacement):
            storage.place_item(actor, Consumable, item.id, garage.id, pantry_shelf.id)

    def test_place_item_moves_item(self, storage, inventory, actor, kitchen, garage, pantry_shelf):
        item = add_towels(inventory, actor, kitchen.id, pantry_shelf.id)

        moved = storage.place_item(actor, Consumable, item.id, garage.id)

        assert moved.location_id == garage.id
        assert moved.container_id is None

    def test_place_non_consumable_into_container(
        self, storage, inventory, actor, kitchen, garage, pantry_shelf
    ):
        drill = inventory.create_non_consumable(
            actor, NonConsumableCreate(name="Drill", location_id=garage.id)
        )

        moved = storage.place_item(actor, NonConsumable, drill.id, kitchen.id, pantry_shelf.id)

        assert moved.container_id == pantry_shelf.id

    def test_place_into_other_households_location_fails(
        self, storage, inventory, actor, kitchen, other_actor
    ):
        item = add_towels(inventory, actor, kitchen.id)
        theirs = storage.create_location(other_actor, LocationCreate(name="Their Kitchen"))

        with pytest.raises(CrossTenantAccess):
            storage.place_item(actor, Consumable, item.id, theirs.id)

    def test_inactive_container_is_not_a_valid_target(
        self, db, storage, inventory, actor, kitchen, pantry_shelf
    ):
        storage.delete_container(actor, pantry_shelf.id)
        with pytest.raises(NotFound):
            add_towels(inventory, actor, kitchen.id, pantry_shelf.id)
        assert db.query(StorageContainer).filter_by(is_active=True).count() == 0


class TestPhotoStorage:
    def test_photo_path_layout(self):
        assert photo_path(7, "location-photos", 3, "Kitchen.PNG", "20260101") == (
            "7/location-photos/3-20260101.png"
        )
        assert photo_path(7, "container-photos", 3, None, "x").endswith(".jpg")

    def test_rejects_paths_outside_root(self, photo_storage):
        with pytest.raises(ValueError):
            photo_storage.upload("../escape.jpg", b"nope")

    def test_upload_returns_public_url(self, photo_storage, photo_dir):
        url = photo_storage.upload("1/location-photos/1-a.jpg", b"data")
        assert url == "/media/household-photos/1/location-photos/1-a.jpg"
        assert (photo_dir / "1/location-photos/1-a.jpg").read_bytes() == b"data"

    def test_remove_ignores_missing(self, photo_storage):
        photo_storage.remove(["1/location-photos/missing.jpg"])
