"""Helpers for preparing prompts and reading JSON out of model responses."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional

from toolshed.models.analysis import ToolAnalysis

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_JSON_SPAN_RE = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")
_DATA_URL_RE = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

DEFAULT_PROMPT_LIMIT = 2000


def extract_json_payload(text: str) -> Any:
    """Parse the JSON object or array a model returned, tolerating fences and chatter.

    Raises ``ValueError`` when no JSON can be recovered.
    """

    cleaned = _FENCE_RE.sub("", text or "").replace("```", "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    match = _JSON_SPAN_RE.search(cleaned)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass

    snippet = cleaned.replace("\n", " ")[:200]
    raise ValueError(f"Model response was not valid JSON: payload={snippet}")


def sanitize_for_prompt(text: Optional[str], max_length: int = DEFAULT_PROMPT_LIMIT) -> str:
    """Truncate user text and strip control characters before it enters a prompt."""

    if not text:
        return ""
    return _CONTROL_RE.sub("", text[:max_length]).strip()


def strip_data_url(value: str) -> str:
    return _DATA_URL_RE.sub("", value.strip())


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def coerce_tool_analysis(raw: Any) -> ToolAnalysis:
    """Build a ``ToolAnalysis`` from loosely-typed model output.

    Every field is checked for its expected type; anything else falls back to a
    safe default so callers never see partially-typed data.
    """

    obj: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    name = obj.get("name")
    tags = obj.get("tags")
    specs = obj.get("specs")
    interval = obj.get("maintenanceIntervalDays")
    requires = obj.get("requiresMaintenance")

    clean_specs: dict[str, Any] = {}
    if isinstance(specs, Mapping):
        for key, value in specs.items():
            if isinstance(value, (str, int, float, bool)):
                clean_specs[str(key)] = value

    interval_days: Optional[int] = None
    if isinstance(interval, (int, float)) and not isinstance(interval, bool) and interval > 0:
        interval_days = int(interval)

    return ToolAnalysis(
        name=name if isinstance(name, str) and name.strip() else "Unknown Item",
        description=_str_or_none(obj.get("description")) or "",
        category=_str_or_none(obj.get("category")) or "",
        tags=[tag for tag in tags if isinstance(tag, str)] if isinstance(tags, list) else [],
        estimated_price=_str_or_none(obj.get("estimatedPrice")),
        specs=clean_specs,
        manual_search_query=_str_or_none(obj.get("manualSearchQuery")),
        video_search_query=_str_or_none(obj.get("videoSearchQuery")),
        product_url=_str_or_none(obj.get("productUrl")),
        manual_url=_str_or_none(obj.get("manualUrl")),
        video_url=_str_or_none(obj.get("videoUrl")),
        image_url=_str_or_none(obj.get("imageUrl")),
        requires_maintenance=requires if isinstance(requires, bool) else False,
        maintenance_interval_days=interval_days,
        maintenance_task=_str_or_none(obj.get("maintenanceTask")),
    )


__all__ = [
    "coerce_tool_analysis",
    "extract_json_payload",
    "sanitize_for_prompt",
    "strip_data_url",
]
