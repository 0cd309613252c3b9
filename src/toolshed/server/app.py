"""ASGI application for Toolshed."""

from __future__ import annotations

import logging
from datetime import date
from time import perf_counter
from typing import Any, Callable, Optional, TypeVar, Union
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field, field_validator

from toolshed import __version__, metrics
from toolshed.assistant import analyze_barcode, analyze_bulk_image, analyze_image, analyze_work_task
from toolshed.barcode.resolver import BarcodeResolver
from toolshed.barcode.variants import normalize_barcode
from toolshed.cache import TTLCache
from toolshed.config import Settings, get_settings
from toolshed.llm.client import ImageData, LLMError
from toolshed.llm.interface import TextGenerator
from toolshed.llm.parsing import strip_data_url
from toolshed.logging_utils import configure_logging as configure_app_logging
from toolshed.matching import match_all
from toolshed.models.analysis import ProductLookupResult, ToolAnalysis, ToolMatch, WorkAnalysisResult
from toolshed.models.inventory import (
    Container,
    Item,
    ItemCondition,
    Location,
    MaintenanceReminder,
    ReminderCounts,
    ShoppingListItem,
    ToolLoan,
)
from toolshed.server import deps

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NON_NULLABLE_ITEM_FIELDS = {
    "name",
    "description",
    "tags",
    "specs",
    "images",
    "quantity",
    "condition",
    "is_favorite",
    "is_consumable",
    "low_stock_threshold",
}


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: Any) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.api_token or "", settings.llm_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _not_found(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _run_ai(action: Callable[[], T], label: str) -> T:
    """Run an AI workflow, mapping provider and parse failures to 502."""

    try:
        return action()
    except LLMError as exc:
        logger.warning("%s failed at the AI provider: %s", label, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ValueError as exc:
        logger.warning("%s returned an unusable response: %s", label, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


def _require_changes(payload: BaseModel) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update",
        )
    return changes


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Toolshed", version=__version__)
    application.state.snapshot_cache = TTLCache(default_stale_seconds=settings.cache_ttl_seconds)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("toolshed.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        raw_body = await request.body()
        if raw_body:
            decoded = raw_body.decode("utf-8", errors="replace")
            if len(decoded) > 2048:
                decoded = decoded[:2048] + "...(truncated)"
            body_preview = decoded

        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.get("/health", summary="Liveness probe")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    # Locations and containers

    @application.get("/locations", response_model=list[Location], summary="List locations")
    def locations_list(
        provider: deps.LocationProvider = Depends(deps.get_location_provider),
    ) -> list[Location]:
        return provider()

    @application.post(
        "/locations",
        response_model=Location,
        status_code=status.HTTP_201_CREATED,
        summary="Create location",
    )
    def locations_create(
        payload: LocationCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.LocationCreator = Depends(deps.get_location_creator),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Location:
        location = creator(payload.model_dump())
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return location

    @application.put("/locations/{location_id}", response_model=Location, summary="Update location")
    def locations_update(
        location_id: str,
        payload: LocationUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.LocationUpdater = Depends(deps.get_location_updater),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Location:
        changes = _require_changes(payload)
        try:
            location = updater(location_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return location

    @application.delete(
        "/locations/{location_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete location",
    )
    def locations_delete(
        location_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.LocationDeleter = Depends(deps.get_location_deleter),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> None:
        try:
            deleter(location_id)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)

    @application.get("/containers", response_model=list[Container], summary="List containers")
    def containers_list(
        location_id: Optional[str] = Query(default=None),
        provider: deps.ContainerProvider = Depends(deps.get_container_provider),
    ) -> list[Container]:
        return provider(location_id)

    @application.post(
        "/containers",
        response_model=Container,
        status_code=status.HTTP_201_CREATED,
        summary="Create container",
    )
    def containers_create(
        payload: ContainerCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.ContainerCreator = Depends(deps.get_container_creator),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Container:
        try:
            container = creator(payload.model_dump())
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return container

    @application.put("/containers/{container_id}", response_model=Container, summary="Update container")
    def containers_update(
        container_id: str,
        payload: ContainerUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.ContainerUpdater = Depends(deps.get_container_updater),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Container:
        changes = _require_changes(payload)
        try:
            container = updater(container_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return container

    @application.delete(
        "/containers/{container_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete container",
    )
    def containers_delete(
        container_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.ContainerDeleter = Depends(deps.get_container_deleter),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> None:
        try:
            deleter(container_id)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)

    # Items

    @application.get("/items", response_model=list[Item], summary="List or search items")
    def items_list(
        q: Optional[str] = Query(default=None, max_length=255),
        category: Optional[str] = Query(default=None, max_length=255),
        favorites: bool = Query(default=False),
        searcher: deps.ItemSearcher = Depends(deps.get_item_searcher),
    ) -> list[Item]:
        return searcher(q, category, favorites)

    @application.get("/items/{item_id}", response_model=Item, summary="Fetch one item")
    def items_get(
        item_id: str,
        fetcher: deps.ItemFetcher = Depends(deps.get_item_fetcher),
    ) -> Item:
        item = fetcher(item_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found")
        return item

    @application.post(
        "/items",
        response_model=Item,
        status_code=status.HTTP_201_CREATED,
        summary="Create item",
    )
    def items_create(
        payload: ItemCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.ItemCreator = Depends(deps.get_item_creator),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Item:
        create_payload = payload.model_dump()
        logger.debug("Creating item payload=%s", create_payload)
        try:
            item = creator(create_payload)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return item

    @application.put("/items/{item_id}", response_model=Item, summary="Update item")
    def items_update(
        item_id: str,
        payload: ItemUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.ItemUpdater = Depends(deps.get_item_updater),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> Item:
        changes = {
            key: value
            for key, value in _require_changes(payload).items()
            if value is not None or key not in _NON_NULLABLE_ITEM_FIELDS
        }
        logger.debug("Updating item %s with payload=%s", item_id, changes)
        try:
            item = updater(item_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)
        return item

    @application.delete(
        "/items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete item",
    )
    def items_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.ItemDeleter = Depends(deps.get_item_deleter),
        cache: TTLCache = Depends(deps.get_snapshot_cache),
    ) -> None:
        try:
            deleter(item_id)
        except ValueError as exc:
            raise _not_found(exc) from exc
        cache.invalidate(deps.INVENTORY_CACHE_PREFIX)

    # Shopping list

    @application.get(
        "/shopping-list",
        response_model=list[ShoppingListItem],
        summary="List shopping list items",
    )
    def shopping_list_list(
        provider: deps.ShoppingListProvider = Depends(deps.get_shopping_list_provider),
    ) -> list[ShoppingListItem]:
        return provider()

    @application.post(
        "/shopping-list",
        response_model=ShoppingListItem,
        status_code=status.HTTP_201_CREATED,
        summary="Create shopping list item",
    )
    def shopping_list_create(
        payload: ShoppingListCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        creator: deps.ShoppingListCreator = Depends(deps.get_shopping_list_creator),
    ) -> ShoppingListItem:
        return creator(payload.model_dump())

    @application.post("/shopping-list/clear-purchased", summary="Remove purchased items")
    def shopping_list_clear_purchased(
        auth: None = Depends(deps.require_api_token),
        clearer: deps.ShoppingListClearer = Depends(deps.get_shopping_list_clearer),
    ) -> dict[str, int]:
        return {"removed": clearer()}

    @application.put(
        "/shopping-list/{item_id}",
        response_model=ShoppingListItem,
        summary="Update shopping list item",
    )
    def shopping_list_update(
        item_id: str,
        payload: ShoppingListUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        updater: deps.ShoppingListUpdater = Depends(deps.get_shopping_list_updater),
    ) -> ShoppingListItem:
        changes = _require_changes(payload)
        try:
            return updater(item_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.delete(
        "/shopping-list/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete shopping list item",
    )
    def shopping_list_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.ShoppingListDeleter = Depends(deps.get_shopping_list_deleter),
    ) -> None:
        try:
            deleter(item_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    # Lending

    @application.get("/loans", response_model=list[ToolLoan], summary="List loans")
    def loans_list(
        active: bool = Query(default=False),
        provider: deps.LoanProvider = Depends(deps.get_loan_provider),
    ) -> list[ToolLoan]:
        return provider(active)

    @application.post(
        "/loans",
        response_model=ToolLoan,
        status_code=status.HTTP_201_CREATED,
        summary="Lend an item",
    )
    def loans_create(
        payload: LoanCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.LoanCreator = Depends(deps.get_loan_creator),
    ) -> ToolLoan:
        try:
            return creator(payload.model_dump())
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.put("/loans/{loan_id}", response_model=ToolLoan, summary="Update loan")
    def loans_update(
        loan_id: str,
        payload: LoanUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.LoanUpdater = Depends(deps.get_loan_updater),
    ) -> ToolLoan:
        changes = _require_changes(payload)
        try:
            return updater(loan_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.post("/loans/{loan_id}/return", response_model=ToolLoan, summary="Mark loan returned")
    def loans_return(
        loan_id: str,
        auth: None = Depends(deps.require_api_token),
        returner: deps.LoanReturner = Depends(deps.get_loan_returner),
    ) -> ToolLoan:
        try:
            return returner(loan_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.delete(
        "/loans/{loan_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete loan",
    )
    def loans_delete(
        loan_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.LoanDeleter = Depends(deps.get_loan_deleter),
    ) -> None:
        try:
            deleter(loan_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    # Maintenance

    @application.get(
        "/maintenance",
        response_model=list[MaintenanceReminder],
        summary="List maintenance reminders",
    )
    def maintenance_list(
        due_by: Optional[date] = Query(default=None),
        provider: deps.ReminderProvider = Depends(deps.get_reminder_provider),
    ) -> list[MaintenanceReminder]:
        return provider(due_by)

    @application.post(
        "/maintenance",
        response_model=MaintenanceReminder,
        status_code=status.HTTP_201_CREATED,
        summary="Create maintenance reminder",
    )
    def maintenance_create(
        payload: ReminderCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.ReminderCreator = Depends(deps.get_reminder_creator),
    ) -> MaintenanceReminder:
        try:
            return creator(payload.model_dump())
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.put(
        "/maintenance/{reminder_id}",
        response_model=MaintenanceReminder,
        summary="Update maintenance reminder",
    )
    def maintenance_update(
        reminder_id: str,
        payload: ReminderUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        updater: deps.ReminderUpdater = Depends(deps.get_reminder_updater),
    ) -> MaintenanceReminder:
        changes = _require_changes(payload)
        try:
            return updater(reminder_id, changes)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.post(
        "/maintenance/{reminder_id}/complete",
        response_model=MaintenanceReminder,
        summary="Record maintenance as done",
    )
    def maintenance_complete(
        reminder_id: str,
        auth: None = Depends(deps.require_api_token),
        completer: deps.ReminderCompleter = Depends(deps.get_reminder_completer),
    ) -> MaintenanceReminder:
        try:
            return completer(reminder_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.delete(
        "/maintenance/{reminder_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete maintenance reminder",
    )
    def maintenance_delete(
        reminder_id: str,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.ReminderDeleter = Depends(deps.get_reminder_deleter),
    ) -> None:
        try:
            deleter(reminder_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.get("/reminders/counts", response_model=ReminderCounts, summary="Reminder badge counts")
    def reminders_counts(
        provider: deps.ReminderCountsProvider = Depends(deps.get_reminder_counts_provider),
    ) -> ReminderCounts:
        return provider()

    # Barcode and AI analysis

    @application.get("/barcode/{code}", response_model=BarcodeLookupResponse, summary="Look up a barcode")
    def barcode_lookup(
        code: str,
        resolver: BarcodeResolver = Depends(deps.get_barcode_resolver),
        finder: deps.OwnedBarcodeFinder = Depends(deps.get_owned_barcode_finder),
    ) -> BarcodeLookupResponse:
        product = resolver.resolve(code)
        owned = finder(code) if normalize_barcode(code) else []
        if product is None and not owned:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Barcode {code} not found")
        return BarcodeLookupResponse(barcode=code, product=product, owned_items=owned)

    @application.post("/analyze/barcode", response_model=ToolAnalysis, summary="AI barcode enrichment")
    def analyze_barcode_endpoint(
        payload: BarcodeAnalysisRequest,
        auth: None = Depends(deps.require_api_token),
        resolver: BarcodeResolver = Depends(deps.get_barcode_resolver),
        llm: TextGenerator = Depends(deps.require_llm_client),
        web_search: deps.WebSearch = Depends(deps.get_web_search),
    ) -> ToolAnalysis:
        image = ImageData(base64=strip_data_url(payload.image)) if payload.image else None
        return _run_ai(
            lambda: analyze_barcode(
                payload.barcode,
                resolver,
                llm,
                payload.context,
                image,
                web_search=web_search,
            ),
            "Barcode analysis",
        )

    @application.post(
        "/analyze/image",
        response_model=Union[list[ToolAnalysis], ToolAnalysis],
        summary="AI photo analysis",
    )
    def analyze_image_endpoint(
        payload: ImageAnalysisRequest,
        auth: None = Depends(deps.require_api_token),
        llm: TextGenerator = Depends(deps.require_llm_client),
    ) -> Union[list[ToolAnalysis], ToolAnalysis]:
        if payload.bulk:
            return _run_ai(
                lambda: analyze_bulk_image(payload.image, llm, payload.context, mime_type=payload.mime_type),
                "Bulk image analysis",
            )
        return _run_ai(
            lambda: analyze_image(payload.image, llm, payload.context, mime_type=payload.mime_type),
            "Image analysis",
        )

    @application.post("/assistant/work", response_model=WorkAnalysisResult, summary="Plan tools for a task")
    def assistant_work(
        payload: WorkTaskRequest,
        auth: None = Depends(deps.require_api_token),
        llm: TextGenerator = Depends(deps.require_llm_client),
        snapshot_provider: deps.InventorySnapshotProvider = Depends(deps.get_inventory_snapshot_provider),
        shopping_list_adder: deps.ShoppingListAdder = Depends(deps.get_shopping_list_adder),
    ) -> WorkAnalysisResult:
        inventory = snapshot_provider()
        return _run_ai(
            lambda: analyze_work_task(
                payload.task,
                inventory,
                llm,
                add_missing_to_shopping_list=payload.add_missing_to_shopping_list,
                shopping_list_adder=shopping_list_adder,
            ),
            "Work task analysis",
        )

    @application.post("/assistant/match", response_model=list[ToolMatch], summary="Match requirements locally")
    def assistant_match(
        payload: MatchRequest,
        snapshot_provider: deps.InventorySnapshotProvider = Depends(deps.get_inventory_snapshot_provider),
    ) -> list[ToolMatch]:
        inventory = payload.inventory if payload.inventory is not None else snapshot_provider()
        return match_all(payload.requirements, inventory)

    return application


class LocationCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = None


class LocationUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = None


class ContainerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    location_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = None


class ContainerUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = None


class ItemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    user_description: Optional[str] = Field(default=None, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=255)
    tags: list[str] = Field(default_factory=list)
    specs: dict[str, Any] = Field(default_factory=dict)
    image_url: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    product_url: Optional[str] = None
    manual_url: Optional[str] = None
    video_url: Optional[str] = None
    estimated_price: Optional[str] = Field(default=None, max_length=255)
    quantity: int = Field(default=1, ge=0)
    condition: ItemCondition = "good"
    is_favorite: bool = False
    is_consumable: bool = False
    low_stock_threshold: int = Field(default=0, ge=0)
    container_id: Optional[str] = None
    location_id: Optional[str] = None


class ItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    user_description: Optional[str] = Field(default=None, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[list[str]] = None
    specs: Optional[dict[str, Any]] = None
    image_url: Optional[str] = None
    images: Optional[list[str]] = None
    product_url: Optional[str] = None
    manual_url: Optional[str] = None
    video_url: Optional[str] = None
    estimated_price: Optional[str] = Field(default=None, max_length=255)
    quantity: Optional[int] = Field(default=None, ge=0)
    condition: Optional[ItemCondition] = None
    is_favorite: Optional[bool] = None
    is_consumable: Optional[bool] = None
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    container_id: Optional[str] = None
    location_id: Optional[str] = None


class ShoppingListCreateRequest(BaseModel):
    tool_name: str = Field(min_length=1, max_length=255)
    estimated_price: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ShoppingListUpdateRequest(BaseModel):
    tool_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    estimated_price: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)
    purchased: Optional[bool] = None


class LoanCreateRequest(BaseModel):
    item_id: str = Field(min_length=1)
    borrower_name: str = Field(min_length=1, max_length=255)
    borrowed_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class LoanUpdateRequest(BaseModel):
    borrower_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    expected_return_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class ReminderCreateRequest(BaseModel):
    item_id: str = Field(min_length=1)
    task_description: str = Field(min_length=1, max_length=1000)
    interval_days: Optional[int] = Field(default=None, ge=1)
    next_due: Optional[date] = None
    is_recurring: bool = False


class ReminderUpdateRequest(BaseModel):
    task_description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    interval_days: Optional[int] = Field(default=None, ge=1)
    next_due: Optional[date] = None
    is_recurring: Optional[bool] = None


class BarcodeLookupResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    barcode: str
    product: Optional[ProductLookupResult] = None
    owned_items: list[Item] = Field(default_factory=list, alias="ownedItems")


class BarcodeAnalysisRequest(BaseModel):
    barcode: str = Field(min_length=1, max_length=100)
    context: Optional[str] = Field(default=None, max_length=2000)
    image: Optional[str] = None

    @field_validator("barcode")
    @classmethod
    def _barcode_has_symbols(cls, value: str) -> str:
        if not normalize_barcode(value):
            raise ValueError("barcode must contain letters or digits")
        return value.strip()


class ImageAnalysisRequest(BaseModel):
    image: str = Field(min_length=1)
    context: Optional[str] = Field(default=None, max_length=2000)
    bulk: bool = False
    mime_type: str = Field(default="image/jpeg", pattern=r"^image/[\w.+-]+$")


class WorkTaskRequest(BaseModel):
    task: str = Field(min_length=1, max_length=1000)
    add_missing_to_shopping_list: bool = False

    @field_validator("task")
    @classmethod
    def _task_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("task must not be blank")
        return value.strip()


class MatchRequest(BaseModel):
    requirements: list[Any] = Field(default_factory=list)
    inventory: Optional[list[Any]] = None


app = create_app()

__all__ = ["app", "create_app"]
