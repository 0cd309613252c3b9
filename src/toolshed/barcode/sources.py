"""External product lookup sources queried by the barcode resolver."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx

from toolshed.barcode.variants import has_strong_barcode_match, numeric_variants
from toolshed.models.analysis import ProductLookupResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 4.5
_HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_http_url(value: Any) -> bool:
    return isinstance(value, str) and bool(_HTTP_URL_RE.match(value.strip()))


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _first_csv_entry(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return _text(value.split(",")[0])


class LookupSource(ABC):
    """A remote product database that can be asked about one barcode."""

    name: str = "source"

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @abstractmethod
    def lookup(self, barcode: str) -> ProductLookupResult | None:
        """Return a confident match for ``barcode`` or ``None``."""

    def _get_json(self, url: str) -> dict[str, Any] | None:
        """GET ``url`` and decode a JSON object; any failure yields ``None``."""

        try:
            with httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            ) as client:
                response = client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("%s lookup request failed url=%s: %s", self.name, url, exc)
            return None
        except ValueError as exc:
            logger.warning("%s lookup returned invalid JSON url=%s: %s", self.name, url, exc)
            return None

        if not isinstance(payload, dict):
            logger.warning("%s lookup returned unexpected payload type url=%s", self.name, url)
            return None
        return payload


class UpcItemDbSource(LookupSource):
    """UPCitemdb trial API; only numeric codes are accepted."""

    name = "upcitemdb"

    def __init__(self, base_url: str = "https://api.upcitemdb.com/prod/trial/lookup", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url

    def lookup(self, barcode: str) -> ProductLookupResult | None:
        for code in numeric_variants(barcode):
            payload = self._get_json(f"{self._base_url}?upc={quote(code)}")
            if payload is None:
                continue

            items = payload.get("items")
            if not isinstance(items, list):
                continue

            matched = next(
                (
                    candidate
                    for candidate in items
                    if isinstance(candidate, dict) and has_strong_barcode_match(candidate, barcode)
                ),
                None,
            )
            if matched is None:
                logger.debug(
                    "upcitemdb returned %s loose candidate(s) for %s; none matched", len(items), code
                )
                continue
            return self._to_result(matched)
        return None

    @staticmethod
    def _to_result(item: dict[str, Any]) -> ProductLookupResult:
        images = item.get("images")
        offers = item.get("offers")
        image_url = images[0] if isinstance(images, list) and images and isinstance(images[0], str) else None
        product_url = None
        if isinstance(offers, list) and offers and isinstance(offers[0], dict):
            link = offers[0].get("link")
            product_url = link if isinstance(link, str) else None
        return ProductLookupResult(
            title=_text(item.get("title")),
            description=_text(item.get("description")),
            brand=_text(item.get("brand")),
            category=_text(item.get("category")),
            image_url=image_url,
            product_url=product_url,
        )


class OpenFactsSource(LookupSource):
    """Open Beauty/Food/Products Facts mirrors sharing the v2 product API."""

    name = "openfacts"

    def __init__(self, mirrors: Sequence[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._mirrors = [mirror.rstrip("/") for mirror in mirrors if mirror]

    def lookup(self, barcode: str) -> ProductLookupResult | None:
        for code in numeric_variants(barcode):
            for mirror in self._mirrors:
                payload = self._get_json(f"{mirror}/{quote(code)}.json")
                if payload is None:
                    continue

                product = payload.get("product")
                if not isinstance(product, dict):
                    continue

                reported = payload.get("code")
                if _is_reported_code(reported) and not has_strong_barcode_match(
                    {"barcode": reported}, barcode
                ):
                    logger.debug("%s answered %s with unrelated code %s", mirror, code, reported)
                    continue

                result = self._to_result(product)
                if result is None:
                    continue
                return result
        return None

    @staticmethod
    def _to_result(product: dict[str, Any]) -> ProductLookupResult | None:
        title = _text(product.get("product_name")) or _text(product.get("generic_name"))
        description = _text(product.get("generic_name"))
        brand = _first_csv_entry(product.get("brands"))
        category = _first_csv_entry(product.get("categories"))
        if not (title or brand or description or category):
            return None

        image_url = product.get("image_front_url") or product.get("image_url")
        product_url = product.get("product_url") or product.get("url")
        return ProductLookupResult(
            title=title,
            description=description,
            brand=brand,
            category=category,
            image_url=image_url if is_http_url(image_url) else None,
            product_url=product_url if is_http_url(product_url) else None,
        )


def _is_reported_code(value: Any) -> bool:
    return isinstance(value, (str, int)) and not isinstance(value, bool) and bool(str(value).strip())


__all__ = [
    "DEFAULT_TIMEOUT",
    "LookupSource",
    "OpenFactsSource",
    "UpcItemDbSource",
    "is_http_url",
]
