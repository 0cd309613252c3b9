"""Inventory hierarchy data models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ItemCondition = Literal["new", "good", "fair", "worn", "needs-repair"]

CONDITION_LABELS: dict[str, str] = {
    "new": "New",
    "good": "Good",
    "fair": "Fair",
    "worn": "Worn",
    "needs-repair": "Needs Repair",
}


class Location(BaseModel):
    """Storage location (garage, shed, basement...)."""

    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class Container(BaseModel):
    """Box, drawer or shelf inside a location."""

    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    location_id: Optional[str] = None
    location_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class Item(BaseModel):
    """Full tool/item record as stored in the inventory."""

    id: str
    name: str
    description: str = ""
    user_description: Optional[str] = None
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    specs: dict[str, Any] = Field(default_factory=dict)
    image_url: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    product_url: Optional[str] = None
    manual_url: Optional[str] = None
    video_url: Optional[str] = None
    estimated_price: Optional[str] = None
    quantity: int = 1
    condition: ItemCondition = "good"
    is_favorite: bool = False
    is_consumable: bool = False
    low_stock_threshold: int = 0
    container_id: Optional[str] = None
    location_id: Optional[str] = None
    location_path: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class InventoryItem(BaseModel):
    """Read-only inventory snapshot row consumed by the tool matcher."""

    id: str
    name: str
    description: str = ""
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    location: str = "Unorganized"

    model_config = ConfigDict(frozen=True)


class ShoppingListItem(BaseModel):
    """Tool the household intends to buy."""

    id: str
    tool_name: str
    estimated_price: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    purchased: bool = False
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class ToolLoan(BaseModel):
    """Tool lent to someone outside the household."""

    id: str
    item_id: str
    item_name: Optional[str] = None
    borrower_name: str
    borrowed_date: date
    expected_return_date: Optional[date] = None
    returned_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class MaintenanceReminder(BaseModel):
    """Recurring or one-off maintenance task for an item."""

    id: str
    item_id: str
    item_name: Optional[str] = None
    task_description: str
    interval_days: Optional[int] = Field(default=None, ge=1)
    last_performed: Optional[date] = None
    next_due: Optional[date] = None
    is_recurring: bool = False
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class ReminderCounts(BaseModel):
    """Aggregate counts behind the household reminder badges."""

    maintenance_due: int = 0
    overdue_loans: int = 0
    low_stock_items: int = 0

    model_config = ConfigDict(frozen=True)


__all__ = [
    "CONDITION_LABELS",
    "Container",
    "InventoryItem",
    "Item",
    "ItemCondition",
    "Location",
    "MaintenanceReminder",
    "ReminderCounts",
    "ShoppingListItem",
    "ToolLoan",
]
