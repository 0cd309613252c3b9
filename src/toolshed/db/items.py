"""Inventory item data access helpers."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process
from sqlalchemy import Select, select

from toolshed.barcode.variants import same_product_identity
from toolshed.models.inventory import InventoryItem, Item

from .models import ContainerORM, ItemORM, LocationORM
from .repository import session_scope

logger = logging.getLogger(__name__)

_UNSET = object()

UNORGANIZED_LABEL = "Unorganized"
FUZZY_SEARCH_THRESHOLD = 75.0

_UPDATABLE_FIELDS = (
    "name",
    "description",
    "user_description",
    "category",
    "tags",
    "specs",
    "image_url",
    "images",
    "product_url",
    "manual_url",
    "video_url",
    "estimated_price",
    "quantity",
    "condition",
    "is_favorite",
    "is_consumable",
    "low_stock_threshold",
    "container_id",
    "location_id",
)

_Row = Tuple[ItemORM, Optional[str], Optional[str]]


def location_label(container_name: Optional[str], location_name: Optional[str]) -> str:
    """Human-readable place of an item: ``"Garage > Red Box"``, ``"Red Box"`` or unorganized."""

    if not container_name:
        return UNORGANIZED_LABEL
    if location_name:
        return f"{location_name} > {container_name}"
    return container_name


def _select_items() -> Select[Any]:
    return (
        select(ItemORM, ContainerORM.name, LocationORM.name)
        .outerjoin(ContainerORM, ItemORM.container_id == ContainerORM.id)
        .outerjoin(LocationORM, ContainerORM.location_id == LocationORM.id)
    )


def _to_model(row: ItemORM, container_name: Optional[str], location_name: Optional[str]) -> Item:
    return Item.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "description": row.description or "",
            "user_description": row.user_description,
            "category": row.category,
            "tags": list(row.tags or []),
            "specs": dict(row.specs or {}),
            "image_url": row.image_url,
            "images": list(row.images or []),
            "product_url": row.product_url,
            "manual_url": row.manual_url,
            "video_url": row.video_url,
            "estimated_price": row.estimated_price,
            "quantity": row.quantity,
            "condition": row.condition,
            "is_favorite": row.is_favorite,
            "is_consumable": row.is_consumable,
            "low_stock_threshold": row.low_stock_threshold,
            "container_id": row.container_id,
            "location_id": row.location_id,
            "location_path": location_label(container_name, location_name),
            "created_at": row.created_at,
        }
    )


def _to_snapshot(row: ItemORM, container_name: Optional[str], location_name: Optional[str]) -> InventoryItem:
    return InventoryItem(
        id=row.id,
        name=row.name,
        description=row.description or "",
        category=row.category,
        tags=list(row.tags or []),
        location=location_label(container_name, location_name),
    )


def _fetch_rows(stmt: Select[Any]) -> List[Item]:
    with session_scope() as session:
        return [_to_model(*row) for row in session.execute(stmt).all()]


def list_items(
    *,
    container_id: Optional[str] = None,
    location_id: Optional[str] = None,
    category: Optional[str] = None,
    favorites_only: bool = False,
) -> List[Item]:
    """Return items ordered by name, optionally filtered."""

    stmt = _select_items().order_by(ItemORM.name, ItemORM.id)
    if container_id is not None:
        stmt = stmt.where(ItemORM.container_id == container_id)
    if location_id is not None:
        stmt = stmt.where(ItemORM.location_id == location_id)
    if category:
        stmt = stmt.where(ItemORM.category == category)
    if favorites_only:
        stmt = stmt.where(ItemORM.is_favorite.is_(True))
    return _fetch_rows(stmt)


def get_item(item_id: str) -> Optional[Item]:
    with session_scope() as session:
        row = session.execute(_select_items().where(ItemORM.id == item_id)).first()
        if row is None:
            return None
        return _to_model(*row)


def _check_placement(session: Any, container_id: Optional[str], location_id: Optional[str]) -> Optional[str]:
    """Validate container/location ids, returning the location implied by the container."""

    if location_id is not None and session.get(LocationORM, location_id) is None:
        raise ValueError(f"Location {location_id} not found")
    if container_id is None:
        return location_id
    container = session.get(ContainerORM, container_id)
    if container is None:
        raise ValueError(f"Container {container_id} not found")
    return location_id if location_id is not None else container.location_id


def create_item(
    *,
    name: str,
    description: str = "",
    user_description: Optional[str] = None,
    category: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    specs: Optional[dict[str, Any]] = None,
    image_url: Optional[str] = None,
    images: Optional[Sequence[str]] = None,
    product_url: Optional[str] = None,
    manual_url: Optional[str] = None,
    video_url: Optional[str] = None,
    estimated_price: Optional[str] = None,
    quantity: int = 1,
    condition: str = "good",
    is_favorite: bool = False,
    is_consumable: bool = False,
    low_stock_threshold: int = 0,
    container_id: Optional[str] = None,
    location_id: Optional[str] = None,
) -> Item:
    with session_scope() as session:
        resolved_location = _check_placement(session, container_id, location_id)
        row = ItemORM(
            name=name.strip(),
            description=description or "",
            user_description=user_description,
            category=category,
            tags=[tag for tag in (tags or []) if tag],
            specs=dict(specs or {}),
            image_url=image_url,
            images=list(images or []),
            product_url=product_url,
            manual_url=manual_url,
            video_url=video_url,
            estimated_price=estimated_price,
            quantity=int(quantity),
            condition=condition,
            is_favorite=is_favorite,
            is_consumable=is_consumable,
            low_stock_threshold=int(low_stock_threshold),
            container_id=container_id,
            location_id=resolved_location,
        )
        session.add(row)
        session.flush()
        item_id = row.id
    logger.info("Created item %s (%s)", item_id, name)
    created = get_item(item_id)
    assert created is not None
    return created


def update_item(item_id: str, **changes: Any) -> Item:
    """Apply the given field changes; unknown field names raise ``TypeError``."""

    unknown = set(changes) - set(_UPDATABLE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown item field(s): {', '.join(sorted(unknown))}")

    with session_scope() as session:
        row = session.get(ItemORM, item_id)
        if row is None:
            raise ValueError(f"Item {item_id} not found")

        if "container_id" in changes or "location_id" in changes:
            container_id = changes.get("container_id", row.container_id)
            location_id = changes.get("location_id", row.location_id if "container_id" not in changes else None)
            changes["location_id"] = _check_placement(session, container_id, location_id)
            changes["container_id"] = container_id

        for field, value in changes.items():
            if field == "name" and isinstance(value, str):
                value = value.strip()
            elif field in {"tags", "images"}:
                value = list(value or [])
            elif field == "specs":
                value = dict(value or {})
            setattr(row, field, value)
        session.flush()

    updated = get_item(item_id)
    assert updated is not None
    return updated


def delete_item(item_id: str) -> None:
    with session_scope() as session:
        row = session.get(ItemORM, item_id)
        if row is None:
            raise ValueError(f"Item {item_id} not found")
        session.delete(row)
    logger.info("Deleted item %s", item_id)


def list_inventory_snapshot() -> List[InventoryItem]:
    """Return the read-only view of the inventory consumed by the tool matcher."""

    with session_scope() as session:
        rows = session.execute(_select_items().order_by(ItemORM.name, ItemORM.id)).all()
        return [_to_snapshot(*row) for row in rows]


def _search_corpus(item: Item) -> str:
    return " ".join([item.name, item.description, item.category or "", *item.tags]).lower()


def search_items(
    query: Optional[str] = None,
    *,
    category: Optional[str] = None,
    favorites_only: bool = False,
) -> List[Item]:
    """Find items by text, category and favourite flag.

    Substring hits over name, description, category and tags come first in name
    order; near-miss spellings of an item name follow, best fuzzy score first.
    """

    candidates = list_items(category=category, favorites_only=favorites_only)
    needle = (query or "").strip().lower()
    if not needle:
        return candidates

    exact = [item for item in candidates if needle in _search_corpus(item)]
    exact_ids = {item.id for item in exact}
    remaining = [item for item in candidates if item.id not in exact_ids]
    if not remaining:
        return exact

    choices = {item.id: item.name.lower() for item in remaining}
    fuzzy = process.extract(
        needle,
        choices,
        scorer=fuzz.WRatio,
        score_cutoff=FUZZY_SEARCH_THRESHOLD,
        limit=None,
    )
    by_id = {item.id: item for item in remaining}
    return exact + [by_id[key] for _, _, key in fuzzy]


def find_items_by_barcode(barcode: str, items: Optional[Iterable[Item]] = None) -> List[Item]:
    """Items whose recorded ``Barcode`` spec is the same product identity as ``barcode``."""

    matches: List[Item] = []
    for item in items if items is not None else list_items():
        recorded = item.specs.get("Barcode")
        if isinstance(recorded, (str, int)) and not isinstance(recorded, bool):
            if same_product_identity(str(recorded), barcode):
                matches.append(item)
    return matches


__all__ = [
    "UNORGANIZED_LABEL",
    "create_item",
    "delete_item",
    "find_items_by_barcode",
    "get_item",
    "list_inventory_snapshot",
    "list_items",
    "location_label",
    "search_items",
    "update_item",
]
