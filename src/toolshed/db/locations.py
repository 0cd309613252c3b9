"""Location and container persistence helpers."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from toolshed.models.inventory import Container, Location

from .models import ContainerORM, LocationORM
from .repository import session_scope

_UNSET = object()


def _location_to_model(row: LocationORM) -> Location:
    return Location.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "image_url": row.image_url,
            "created_at": row.created_at,
        }
    )


def _container_to_model(row: ContainerORM, location_name: Optional[str] = None) -> Container:
    return Container.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "image_url": row.image_url,
            "location_id": row.location_id,
            "location_name": location_name,
            "created_at": row.created_at,
        }
    )


def list_locations() -> List[Location]:
    with session_scope() as session:
        rows = session.execute(select(LocationORM).order_by(LocationORM.name)).scalars().all()
        return [_location_to_model(row) for row in rows]


def create_location(
    *,
    name: str,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Location:
    with session_scope() as session:
        row = LocationORM(name=name.strip(), description=description, image_url=image_url)
        session.add(row)
        session.flush()
        return _location_to_model(row)


def update_location(
    location_id: str,
    *,
    name: str | object = _UNSET,
    description: str | None | object = _UNSET,
    image_url: str | None | object = _UNSET,
) -> Location:
    with session_scope() as session:
        row = session.get(LocationORM, location_id)
        if row is None:
            raise ValueError(f"Location {location_id} not found")

        if name is not _UNSET:
            row.name = str(name).strip()
        if description is not _UNSET:
            row.description = description  # type: ignore[assignment]
        if image_url is not _UNSET:
            row.image_url = image_url  # type: ignore[assignment]

        session.flush()
        return _location_to_model(row)


def delete_location(location_id: str) -> None:
    """Delete a location; its containers go with it and its items become unorganized."""

    with session_scope() as session:
        row = session.get(LocationORM, location_id)
        if row is None:
            raise ValueError(f"Location {location_id} not found")
        session.delete(row)


def get_location(location_id: str) -> Optional[Location]:
    with session_scope() as session:
        row = session.get(LocationORM, location_id)
        if row is None:
            return None
        return _location_to_model(row)


def list_containers(location_id: Optional[str] = None) -> List[Container]:
    with session_scope() as session:
        stmt = (
            select(ContainerORM, LocationORM.name)
            .outerjoin(LocationORM, ContainerORM.location_id == LocationORM.id)
            .order_by(ContainerORM.name)
        )
        if location_id is not None:
            stmt = stmt.where(ContainerORM.location_id == location_id)
        return [_container_to_model(row, location_name) for row, location_name in session.execute(stmt)]


def create_container(
    *,
    name: str,
    location_id: Optional[str] = None,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Container:
    with session_scope() as session:
        location = None
        if location_id is not None:
            location = session.get(LocationORM, location_id)
            if location is None:
                raise ValueError(f"Location {location_id} not found")
        row = ContainerORM(
            name=name.strip(),
            location_id=location_id,
            description=description,
            image_url=image_url,
        )
        session.add(row)
        session.flush()
        return _container_to_model(row, location.name if location else None)


def update_container(
    container_id: str,
    *,
    name: str | object = _UNSET,
    location_id: str | None | object = _UNSET,
    description: str | None | object = _UNSET,
    image_url: str | None | object = _UNSET,
) -> Container:
    with session_scope() as session:
        row = session.get(ContainerORM, container_id)
        if row is None:
            raise ValueError(f"Container {container_id} not found")

        if name is not _UNSET:
            row.name = str(name).strip()
        if location_id is not _UNSET:
            if location_id is not None and session.get(LocationORM, location_id) is None:
                raise ValueError(f"Location {location_id} not found")
            row.location_id = location_id  # type: ignore[assignment]
        if description is not _UNSET:
            row.description = description  # type: ignore[assignment]
        if image_url is not _UNSET:
            row.image_url = image_url  # type: ignore[assignment]

        session.flush()
        location = session.get(LocationORM, row.location_id) if row.location_id else None
        return _container_to_model(row, location.name if location else None)


def delete_container(container_id: str) -> None:
    with session_scope() as session:
        row = session.get(ContainerORM, container_id)
        if row is None:
            raise ValueError(f"Container {container_id} not found")
        session.delete(row)


def get_container(container_id: str) -> Optional[Container]:
    with session_scope() as session:
        row = session.get(ContainerORM, container_id)
        if row is None:
            return None
        location = session.get(LocationORM, row.location_id) if row.location_id else None
        return _container_to_model(row, location.name if location else None)


__all__ = [
    "create_container",
    "create_location",
    "delete_container",
    "delete_location",
    "get_container",
    "get_location",
    "list_containers",
    "list_locations",
    "update_container",
    "update_location",
]
