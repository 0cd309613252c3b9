"""Pydantic models defining shared data contracts."""

from toolshed.models.analysis import (
    AlternativeToolRef,
    OwnedToolRef,
    ProductLookupResult,
    ToolAnalysis,
    ToolMatch,
    ToolRequirement,
    WorkAnalysisResult,
)
from toolshed.models.inventory import (
    Container,
    InventoryItem,
    Item,
    Location,
    MaintenanceReminder,
    ReminderCounts,
    ShoppingListItem,
    ToolLoan,
)

__all__ = [
    "AlternativeToolRef",
    "OwnedToolRef",
    "ProductLookupResult",
    "ToolAnalysis",
    "ToolMatch",
    "ToolRequirement",
    "WorkAnalysisResult",
    "Container",
    "InventoryItem",
    "Item",
    "Location",
    "MaintenanceReminder",
    "ReminderCounts",
    "ShoppingListItem",
    "ToolLoan",
]
