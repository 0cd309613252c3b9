"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

DEFAULT_OPENFACTS_MIRRORS = (
    "https://world.openbeautyfacts.org/api/v2/product",
    "https://world.openfoodfacts.org/api/v2/product",
)


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/toolshed.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for authenticated endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    llm_provider: str = Field(
        default="gemini",
        description="AI provider (gemini, openai, anthropic or ollama).",
    )
    llm_api_key: Optional[str] = Field(
        default=None,
        description="API key for the configured AI provider.",
    )
    llm_base_url: Optional[str] = Field(
        default=None,
        description="Override the provider endpoint (required for ollama).",
    )
    llm_models: tuple[str, ...] = Field(
        default=(),
        description="Model candidates tried in order; provider defaults when empty.",
    )
    llm_temperature: float = Field(
        default=0.2,
        description="Sampling temperature for AI requests.",
    )
    llm_max_tokens: int = Field(
        default=2048,
        description="Maximum tokens to request from the AI provider.",
    )
    llm_timeout: float = Field(
        default=30.0,
        description="Seconds before an AI request is abandoned.",
    )
    barcode_timeout: float = Field(
        default=4.5,
        description="Per-request timeout (seconds) for barcode lookup sources.",
    )
    upcitemdb_url: str = Field(
        default="https://api.upcitemdb.com/prod/trial/lookup",
        description="UPCitemdb lookup endpoint.",
    )
    openfacts_mirrors: tuple[str, ...] = Field(
        default=DEFAULT_OPENFACTS_MIRRORS,
        description="Open*Facts product API endpoints queried in order.",
    )
    web_search_enabled: bool = Field(
        default=True,
        description="Allow the best-effort web search fallback for barcodes.",
    )
    web_search_url: str = Field(
        default="https://html.duckduckgo.com/html/",
        description="Search endpoint scraped by the barcode web search fallback.",
    )
    cache_ttl_seconds: float = Field(
        default=30.0,
        description="Seconds an inventory snapshot stays fresh in the server cache.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("TOOLSHED_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (api_token := _env("TOOLSHED_API_TOKEN")):
        payload["api_token"] = api_token
    if (log_level := _env("TOOLSHED_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("TOOLSHED_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("TOOLSHED_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (llm_provider := _env("TOOLSHED_LLM_PROVIDER")):
        payload["llm_provider"] = llm_provider.strip().lower()
    if (llm_api_key := _env("TOOLSHED_LLM_API_KEY")):
        payload["llm_api_key"] = llm_api_key.strip()
    if (llm_base_url := _env("TOOLSHED_LLM_BASE_URL")):
        payload["llm_base_url"] = llm_base_url
    if (llm_models := _env("TOOLSHED_LLM_MODELS")):
        payload["llm_models"] = _split_csv(llm_models)
    if (llm_temperature := _env("TOOLSHED_LLM_TEMPERATURE")):
        try:
            payload["llm_temperature"] = float(llm_temperature)
        except ValueError:
            pass
    if (llm_max_tokens := _env("TOOLSHED_LLM_MAX_TOKENS")):
        try:
            payload["llm_max_tokens"] = int(llm_max_tokens)
        except ValueError:
            pass
    if (llm_timeout := _env("TOOLSHED_LLM_TIMEOUT")):
        try:
            payload["llm_timeout"] = float(llm_timeout)
        except ValueError:
            pass
    if (barcode_timeout := _env("TOOLSHED_BARCODE_TIMEOUT")):
        try:
            payload["barcode_timeout"] = float(barcode_timeout)
        except ValueError:
            pass
    if (upcitemdb_url := _env("TOOLSHED_UPCITEMDB_URL")):
        payload["upcitemdb_url"] = upcitemdb_url
    if (mirrors := _env("TOOLSHED_OPENFACTS_MIRRORS")):
        payload["openfacts_mirrors"] = _split_csv(mirrors)
    if (web_search_enabled := _env("TOOLSHED_WEB_SEARCH_ENABLED")):
        payload["web_search_enabled"] = _coerce_bool(web_search_enabled)
    if (web_search_url := _env("TOOLSHED_WEB_SEARCH_URL")):
        payload["web_search_url"] = web_search_url
    if (cache_ttl := _env("TOOLSHED_CACHE_TTL_SECONDS")):
        try:
            payload["cache_ttl_seconds"] = float(cache_ttl)
        except ValueError:
            pass
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
