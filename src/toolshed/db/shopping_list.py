"""Shopping list persistence helpers."""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete, select

from toolshed.models.inventory import ShoppingListItem

from .models import ShoppingListItemORM
from .repository import session_scope

_UNSET = object()


def _to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "tool_name": row.tool_name,
            "estimated_price": row.estimated_price,
            "notes": row.notes,
            "purchased": row.purchased,
            "created_at": row.created_at,
        }
    )


def list_shopping_items() -> List[ShoppingListItem]:
    """Return all shopping list items (unpurchased items first)."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingListItemORM).order_by(
                    ShoppingListItemORM.purchased.asc(),
                    ShoppingListItemORM.created_at.asc(),
                    ShoppingListItemORM.tool_name.asc(),
                )
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def create_shopping_item(
    *,
    tool_name: str,
    estimated_price: Optional[str] = None,
    notes: Optional[str] = None,
) -> ShoppingListItem:
    with session_scope() as session:
        db_item = ShoppingListItemORM(
            tool_name=tool_name.strip(),
            estimated_price=estimated_price.strip() if estimated_price else None,
            notes=notes,
            purchased=False,
        )
        session.add(db_item)
        session.flush()
        return _to_model(db_item)


def add_missing_tools(tool_names: Iterable[str], *, notes: Optional[str] = None) -> List[ShoppingListItem]:
    """Add tools not already on the list, comparing names case-insensitively."""

    added: List[ShoppingListItem] = []
    with session_scope() as session:
        existing = {
            name.strip().lower()
            for name in session.execute(select(ShoppingListItemORM.tool_name)).scalars()
        }
        for name in tool_names:
            key = (name or "").strip().lower()
            if not key or key in existing:
                continue
            existing.add(key)
            db_item = ShoppingListItemORM(tool_name=name.strip(), notes=notes, purchased=False)
            session.add(db_item)
            session.flush()
            added.append(_to_model(db_item))
    return added


def update_shopping_item(
    item_id: str,
    *,
    tool_name: str | object = _UNSET,
    estimated_price: str | None | object = _UNSET,
    notes: str | None | object = _UNSET,
    purchased: bool | object = _UNSET,
) -> ShoppingListItem:
    with session_scope() as session:
        db_item = session.get(ShoppingListItemORM, item_id)
        if db_item is None:
            raise ValueError(f"Shopping list item {item_id} not found")

        if tool_name is not _UNSET:
            db_item.tool_name = str(tool_name).strip()
        if estimated_price is not _UNSET:
            db_item.estimated_price = estimated_price.strip() if estimated_price else None  # type: ignore[union-attr]
        if notes is not _UNSET:
            db_item.notes = notes  # type: ignore[assignment]
        if purchased is not _UNSET:
            db_item.purchased = bool(purchased)

        session.flush()
        return _to_model(db_item)


def delete_shopping_item(item_id: str) -> None:
    with session_scope() as session:
        db_item = session.get(ShoppingListItemORM, item_id)
        if db_item is None:
            raise ValueError(f"Shopping list item {item_id} not found")
        session.delete(db_item)


def clear_purchased() -> int:
    """Remove purchased entries, returning how many were deleted."""

    with session_scope() as session:
        result = session.execute(
            delete(ShoppingListItemORM).where(ShoppingListItemORM.purchased.is_(True))
        )
        return int(result.rowcount or 0)


def get_shopping_item(item_id: str) -> Optional[ShoppingListItem]:
    with session_scope() as session:
        row = session.get(ShoppingListItemORM, item_id)
        if row is None:
            return None
        return _to_model(row)


__all__ = [
    "add_missing_tools",
    "clear_purchased",
    "create_shopping_item",
    "delete_shopping_item",
    "get_shopping_item",
    "list_shopping_items",
    "update_shopping_item",
]
