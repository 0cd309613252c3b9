"""Dependency definitions for the Toolshed API server."""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, List, Optional

from fastapi import Depends, HTTPException, Request, status

from toolshed.assistant.barcode import WebSearch
from toolshed.barcode.resolver import BarcodeResolver, build_barcode_resolver
from toolshed.barcode.web_search import fetch_web_search_context
from toolshed.cache import TTLCache
from toolshed.config import Settings, get_settings
from toolshed.db.items import (
    create_item,
    delete_item,
    find_items_by_barcode,
    get_item,
    list_inventory_snapshot,
    search_items,
    update_item,
)
from toolshed.db.loans import create_loan, delete_loan, list_loans, return_loan, update_loan
from toolshed.db.locations import (
    create_container,
    create_location,
    delete_container,
    delete_location,
    list_containers,
    list_locations,
    update_container,
    update_location,
)
from toolshed.db.maintenance import (
    complete_maintenance,
    create_reminder,
    delete_reminder,
    get_reminder_counts,
    list_reminders,
    update_reminder,
)
from toolshed.db.shopping_list import (
    add_missing_tools,
    clear_purchased,
    create_shopping_item,
    delete_shopping_item,
    list_shopping_items,
    update_shopping_item,
)
from toolshed.llm.client import build_llm_client
from toolshed.llm.interface import TextGenerator
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

SNAPSHOT_CACHE_KEY = "inventory:snapshot"
INVENTORY_CACHE_PREFIX = "inventory:"

InventorySnapshotProvider = Callable[[], List[InventoryItem]]
ItemSearcher = Callable[[Optional[str], Optional[str], bool], List[Item]]
ItemFetcher = Callable[[str], Optional[Item]]
ItemCreator = Callable[[dict], Item]
ItemUpdater = Callable[[str, dict], Item]
ItemDeleter = Callable[[str], None]
OwnedBarcodeFinder = Callable[[str], List[Item]]
LocationProvider = Callable[[], List[Location]]
LocationCreator = Callable[[dict], Location]
LocationUpdater = Callable[[str, dict], Location]
LocationDeleter = Callable[[str], None]
ContainerProvider = Callable[[Optional[str]], List[Container]]
ContainerCreator = Callable[[dict], Container]
ContainerUpdater = Callable[[str, dict], Container]
ContainerDeleter = Callable[[str], None]
ShoppingListProvider = Callable[[], List[ShoppingListItem]]
ShoppingListCreator = Callable[[dict], ShoppingListItem]
ShoppingListUpdater = Callable[[str, dict], ShoppingListItem]
ShoppingListDeleter = Callable[[str], None]
ShoppingListClearer = Callable[[], int]
ShoppingListAdder = Callable[[Iterable[str], Optional[str]], List[ShoppingListItem]]
LoanProvider = Callable[[bool], List[ToolLoan]]
LoanCreator = Callable[[dict], ToolLoan]
LoanUpdater = Callable[[str, dict], ToolLoan]
LoanReturner = Callable[[str], ToolLoan]
LoanDeleter = Callable[[str], None]
ReminderProvider = Callable[[Optional[date]], List[MaintenanceReminder]]
ReminderCreator = Callable[[dict], MaintenanceReminder]
ReminderUpdater = Callable[[str, dict], MaintenanceReminder]
ReminderCompleter = Callable[[str], MaintenanceReminder]
ReminderDeleter = Callable[[str], None]
ReminderCountsProvider = Callable[[], ReminderCounts]


def get_snapshot_cache(request: Request) -> TTLCache:
    return request.app.state.snapshot_cache


def get_inventory_snapshot_provider(
    cache: TTLCache = Depends(get_snapshot_cache),
) -> InventorySnapshotProvider:
    """Return the matcher snapshot, served from the cache while it is fresh."""

    def _provider() -> List[InventoryItem]:
        cached = cache.get(SNAPSHOT_CACHE_KEY)
        if cached is not None:
            return cached
        snapshot = list_inventory_snapshot()
        cache.set(SNAPSHOT_CACHE_KEY, snapshot)
        return snapshot

    return _provider


def get_item_searcher() -> ItemSearcher:
    return lambda query, category, favorites_only: search_items(
        query, category=category, favorites_only=favorites_only
    )


def get_item_fetcher() -> ItemFetcher:
    return get_item


def get_item_creator() -> ItemCreator:
    return lambda payload: create_item(**payload)


def get_item_updater() -> ItemUpdater:
    return lambda item_id, payload: update_item(item_id, **payload)


def get_item_deleter() -> ItemDeleter:
    return delete_item


def get_owned_barcode_finder() -> OwnedBarcodeFinder:
    return lambda barcode: find_items_by_barcode(barcode)


def get_location_provider() -> LocationProvider:
    return list_locations


def get_location_creator() -> LocationCreator:
    return lambda payload: create_location(**payload)


def get_location_updater() -> LocationUpdater:
    return lambda location_id, payload: update_location(location_id, **payload)


def get_location_deleter() -> LocationDeleter:
    return delete_location


def get_container_provider() -> ContainerProvider:
    return lambda location_id: list_containers(location_id)


def get_container_creator() -> ContainerCreator:
    return lambda payload: create_container(**payload)


def get_container_updater() -> ContainerUpdater:
    return lambda container_id, payload: update_container(container_id, **payload)


def get_container_deleter() -> ContainerDeleter:
    return delete_container


def get_shopping_list_provider() -> ShoppingListProvider:
    return list_shopping_items


def get_shopping_list_creator() -> ShoppingListCreator:
    return lambda payload: create_shopping_item(**payload)


def get_shopping_list_updater() -> ShoppingListUpdater:
    return lambda item_id, payload: update_shopping_item(item_id, **payload)


def get_shopping_list_deleter() -> ShoppingListDeleter:
    return delete_shopping_item


def get_shopping_list_clearer() -> ShoppingListClearer:
    return clear_purchased


def get_shopping_list_adder() -> ShoppingListAdder:
    return lambda names, notes=None: add_missing_tools(names, notes=notes)


def get_loan_provider() -> LoanProvider:
    return lambda active_only: list_loans(active_only=active_only)


def get_loan_creator() -> LoanCreator:
    return lambda payload: create_loan(**payload)


def get_loan_updater() -> LoanUpdater:
    return lambda loan_id, payload: update_loan(loan_id, **payload)


def get_loan_returner() -> LoanReturner:
    return lambda loan_id: return_loan(loan_id)


def get_loan_deleter() -> LoanDeleter:
    return delete_loan


def get_reminder_provider() -> ReminderProvider:
    return lambda due_by: list_reminders(due_by=due_by)


def get_reminder_creator() -> ReminderCreator:
    return lambda payload: create_reminder(**payload)


def get_reminder_updater() -> ReminderUpdater:
    return lambda reminder_id, payload: update_reminder(reminder_id, **payload)


def get_reminder_completer() -> ReminderCompleter:
    return lambda reminder_id: complete_maintenance(reminder_id)


def get_reminder_deleter() -> ReminderDeleter:
    return delete_reminder


def get_reminder_counts_provider() -> ReminderCountsProvider:
    return lambda: get_reminder_counts()


def get_barcode_resolver() -> BarcodeResolver:
    return build_barcode_resolver()


def get_web_search(settings: Settings = Depends(get_settings)) -> WebSearch:
    return lambda barcode: fetch_web_search_context(
        barcode,
        search_url=settings.web_search_url,
        enabled=settings.web_search_enabled,
    )


def get_llm_client() -> Optional[TextGenerator]:
    """Return the configured AI client, or ``None`` when no provider is set up."""

    return build_llm_client()


def require_llm_client(llm: Optional[TextGenerator] = Depends(get_llm_client)) -> TextGenerator:
    if llm is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI provider is not configured.",
        )
    return llm


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
