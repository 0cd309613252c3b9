"""Best-effort web search fallback used when no lookup source knows a barcode."""

from __future__ import annotations

import logging
import re

import httpx

logger = logging.getLogger(__name__)

WEB_SEARCH_TIMEOUT = 6.0
MAX_CONTEXT_CHARS = 8000

_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.0 Mobile/15E148 Safari/604.1"
)
_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def html_to_text(html: str, *, limit: int = MAX_CONTEXT_CHARS) -> str:
    """Drop scripts, styles and tags, leaving whitespace-collapsed text."""

    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _WS_RE.sub(" ", text).strip()
    return text[:limit]


def fetch_web_search_context(
    barcode: str,
    *,
    search_url: str,
    enabled: bool = True,
    timeout: float = WEB_SEARCH_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> str | None:
    """Return plain text from a search results page for ``barcode``, or ``None``."""

    if not enabled:
        logger.warning("Web search fallback is disabled; skipping barcode %s", barcode)
        return None

    query = f"{barcode} product"
    try:
        with httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": _USER_AGENT},
            follow_redirects=True,
        ) as client:
            response = client.get(search_url, params={"q": query})
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Web search fallback failed for %s: %s", barcode, exc)
        return None

    text = html_to_text(response.text)
    return text or None


__all__ = ["fetch_web_search_context", "html_to_text", "MAX_CONTEXT_CHARS"]
