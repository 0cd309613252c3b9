"""Barcode enrichment: external lookup first, the model fills in the rest."""

from __future__ import annotations

import json
import logging
from typing import Callable, Optional
from urllib.parse import quote_plus

from toolshed.barcode.resolver import BarcodeResolver
from toolshed.barcode.sources import is_http_url
from toolshed.barcode.variants import normalize_barcode
from toolshed.barcode.web_search import fetch_web_search_context
from toolshed.config import get_settings
from toolshed.llm.client import ImageData
from toolshed.llm.interface import TextGenerator
from toolshed.llm.parsing import coerce_tool_analysis, extract_json_payload, sanitize_for_prompt
from toolshed.models.analysis import ProductLookupResult, ToolAnalysis

logger = logging.getLogger(__name__)

MAX_BARCODE_CHARS = 100
MAX_WEB_CONTEXT_CHARS = 4000

GOOGLE_SEARCH_URL = "https://www.google.com/search?q="
YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query="

BARCODE_PROMPT_TEMPLATE = """You are a barcode + product enrichment expert.

BARCODE VALUE: {barcode}

BARCODE LOOKUP DATA (may be partial):
{lookup_json}

WEB SEARCH CONTEXT (fallback):
{web_context}

Task:
1) Infer the product represented by this barcode using BARCODE LOOKUP DATA as the primary source.
2) If lookup data is missing, use WEB SEARCH CONTEXT to identify the product.
3) If your runtime offers web search, search for the barcode value when the data above is weak or missing.
4) Do NOT invent a different product type/brand if all data is weak or ambiguous.
5) Use image/context only to supplement fields, never to contradict lookup data.
6) Provide detailed specs when possible.

Return JSON:
{{
  "name": "Product name",
  "description": "2-sentence practical description",
  "category": "Best category",
  "tags": ["tag1", "tag2", "tag3"],
  "estimatedPrice": "Estimated USD price/range",
  "specs": {{
    "Barcode": "{barcode}",
    "Brand": "...",
    "Model": "..."
  }},
  "productUrl": "Direct product page URL when known, else a search URL",
  "manualUrl": "Direct manual URL when known, else a search URL",
  "videoUrl": "Direct tutorial/review URL when known, else a search URL",
  "imageUrl": "Direct main product image URL if known",
  "manualSearchQuery": "search query for manual",
  "videoSearchQuery": "search query for tutorial/review",
  "requiresMaintenance": true/false,
  "maintenanceIntervalDays": 180,
  "maintenanceTask": "Routine maintenance task description if applicable"
}}"""

WebSearch = Callable[[str], Optional[str]]


def _settings_web_search(barcode: str) -> Optional[str]:
    settings = get_settings()
    return fetch_web_search_context(
        barcode,
        search_url=settings.web_search_url,
        enabled=settings.web_search_enabled,
    )


def append_user_context(prompt: str, context: Optional[str], suffix: str) -> str:
    if context:
        cleaned = sanitize_for_prompt(context)
        if cleaned:
            prompt += f"\n\nAdditional User Context: {cleaned}"
    return f"{prompt}\n{suffix}"


def render_barcode_prompt(
    barcode: str,
    lookup: Optional[ProductLookupResult],
    web_context: Optional[str],
    context: Optional[str] = None,
) -> str:
    lookup_json = json.dumps(
        lookup.model_dump(by_alias=True, exclude_none=True) if lookup else {},
        ensure_ascii=False,
        indent=2,
    )
    prompt = BARCODE_PROMPT_TEMPLATE.format(
        barcode=sanitize_for_prompt(barcode, MAX_BARCODE_CHARS),
        lookup_json=lookup_json,
        web_context=sanitize_for_prompt(web_context, MAX_WEB_CONTEXT_CHARS) if web_context else "None",
    )
    return append_user_context(prompt, context, "Return ONLY raw JSON, no markdown formatting.")


def _first_text(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def merge_barcode_analysis(
    barcode: str,
    parsed: ToolAnalysis,
    lookup: Optional[ProductLookupResult],
) -> ToolAnalysis:
    """Overlay lookup data on the model's answer and fill link gaps with search URLs."""

    specs = dict(parsed.specs)
    if not specs.get("Barcode"):
        specs["Barcode"] = barcode
    if lookup and lookup.brand and not specs.get("Brand"):
        specs["Brand"] = lookup.brand

    product_search = GOOGLE_SEARCH_URL + quote_plus(f"{parsed.name} {barcode} product")
    manual_search = GOOGLE_SEARCH_URL + quote_plus(
        parsed.manual_search_query or f"{parsed.name} manual PDF"
    )
    video_search = YOUTUBE_SEARCH_URL + quote_plus(
        parsed.video_search_query or f"{parsed.name} review tutorial"
    )

    if is_http_url(parsed.product_url):
        product_url = parsed.product_url
    elif lookup and is_http_url(lookup.product_url):
        product_url = lookup.product_url
    else:
        product_url = product_search

    if is_http_url(parsed.image_url):
        image_url = parsed.image_url
    elif lookup and is_http_url(lookup.image_url):
        image_url = lookup.image_url
    else:
        image_url = None

    return parsed.model_copy(
        update={
            "name": _first_text(lookup.title if lookup else None) or parsed.name,
            "description": _first_text(lookup.description if lookup else None) or parsed.description,
            "category": _first_text(lookup.category if lookup else None) or parsed.category,
            "specs": specs,
            "product_url": product_url,
            "manual_url": parsed.manual_url if is_http_url(parsed.manual_url) else manual_search,
            "video_url": parsed.video_url if is_http_url(parsed.video_url) else video_search,
            "image_url": image_url,
        }
    )


def analyze_barcode(
    barcode: str,
    resolver: BarcodeResolver,
    llm: TextGenerator,
    context: Optional[str] = None,
    image: Optional[ImageData] = None,
    *,
    web_search: Optional[WebSearch] = None,
) -> ToolAnalysis:
    """Identify and enrich the product behind ``barcode``.

    The resolver's answer is authoritative for name, description and category.
    When it carries no identifying signal the web search fallback supplies
    context for the model instead.
    """

    if not normalize_barcode(barcode):
        raise ValueError("Barcode is required.")

    lookup = resolver.resolve(barcode)
    web_context: Optional[str] = None
    if lookup is None or not lookup.has_signal:
        search = web_search or _settings_web_search
        web_context = search(barcode)

    prompt = render_barcode_prompt(barcode, lookup, web_context, context)
    result = llm.generate(prompt, image)
    parsed = coerce_tool_analysis(extract_json_payload(result.text))
    merged = merge_barcode_analysis(barcode, parsed, lookup)
    logger.info(
        "Barcode %s analyzed via %s/%s (lookup=%s, web_context=%s): %s",
        barcode,
        result.provider,
        result.model,
        lookup is not None,
        web_context is not None,
        merged.name,
    )
    return merged


__all__ = ["analyze_barcode", "merge_barcode_analysis", "render_barcode_prompt"]
