"""Location and storage container endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from homestock.api.dependencies import CurrentActor, get_storage_service
from homestock.schemas.location import (
    ContainerCreate,
    ContainerResponse,
    ContainerUpdate,
    LocationCreate,
    LocationPhotoResponse,
    LocationResponse,
    LocationUpdate,
)
from homestock.services.storage import StorageService

router = APIRouter(prefix="/api/v1/households/{household_id}", tags=["locations"])

Storage = Annotated[StorageService, Depends(get_storage_service)]


@router.get("/locations", response_model=list[LocationResponse])
async def list_locations(household_id: int, actor: CurrentActor, storage: Storage):
    return storage.list_locations(actor.household_id)


@router.post("/locations", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    household_id: int, data: LocationCreate, actor: CurrentActor, storage: Storage
):
    return storage.create_location(actor, data)


@router.get("/locations/{location_id}", response_model=LocationResponse)
async def get_location(household_id: int, location_id: int, actor: CurrentActor, storage: Storage):
    return storage.get_location(actor.household_id, location_id)


@router.put("/locations/{location_id}", response_model=LocationResponse)
async def update_location(
    household_id: int,
    location_id: int,
    data: LocationUpdate,
    actor: CurrentActor,
    storage: Storage,
):
    return storage.update_location(actor, location_id, data)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    household_id: int, location_id: int, actor: CurrentActor, storage: Storage
):
    """Delete a location, its containers and photos. Refused while items remain."""
    storage.delete_location(actor, location_id)


@router.post(
    "/locations/{location_id}/photos",
    response_model=LocationPhotoResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_location_photo(
    household_id: int,
    location_id: int,
    actor: CurrentActor,
    storage: Storage,
    file: Annotated[UploadFile, File()],
    caption: Annotated[str | None, Form()] = None,
):
    data = await file.read()
    return storage.add_location_photo(
        actor, location_id, file.filename, data, file.content_type, caption
    )


@router.get("/locations/{location_id}/containers", response_model=list[ContainerResponse])
async def list_containers(
    household_id: int, location_id: int, actor: CurrentActor, storage: Storage
):
    return storage.list_containers(actor.household_id, location_id)


@router.post(
    "/locations/{location_id}/containers",
    response_model=ContainerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_container(
    household_id: int,
    location_id: int,
    data: ContainerCreate,
    actor: CurrentActor,
    storage: Storage,
):
    return storage.create_container(actor, location_id, data)


@router.get("/containers/{container_id}", response_model=ContainerResponse)
async def get_container(
    household_id: int, container_id: int, actor: CurrentActor, storage: Storage
):
    return storage.get_container(actor.household_id, container_id)


@router.put("/containers/{container_id}", response_model=ContainerResponse)
async def update_container(
    household_id: int,
    container_id: int,
    data: ContainerUpdate,
    actor: CurrentActor,
    storage: Storage,
):
    return storage.update_container(actor, container_id, data)


@router.delete("/containers/{container_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_container(
    household_id: int, container_id: int, actor: CurrentActor, storage: Storage
):
    """Delete an empty container."""
    storage.delete_container(actor, container_id)


@router.post("/containers/{container_id}/photo", response_model=ContainerResponse)
async def upload_container_photo(
    household_id: int,
    container_id: int,
    actor: CurrentActor,
    storage: Storage,
    file: Annotated[UploadFile, File()],
):
    data = await file.read()
    return storage.set_container_photo(actor, container_id, file.filename, data, file.content_type)
