"""Barcode identity resolution across prioritized lookup sources."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import httpx

from toolshed import metrics
from toolshed.barcode.sources import LookupSource, OpenFactsSource, UpcItemDbSource
from toolshed.barcode.variants import barcode_variants
from toolshed.config import Settings, get_settings
from toolshed.models.analysis import ProductLookupResult

logger = logging.getLogger(__name__)


class BarcodeResolver:
    """Ask each source in order and return the first confident product match.

    Sources run strictly one after another. A source that errors, times out or
    answers with unrelated products counts as a miss and the next one is tried;
    nothing is retried and nothing is remembered between calls.
    """

    def __init__(self, sources: Iterable[LookupSource]) -> None:
        self._sources: List[LookupSource] = list(sources)

    @property
    def sources(self) -> List[LookupSource]:
        return list(self._sources)

    def resolve(self, barcode: str) -> Optional[ProductLookupResult]:
        variants = barcode_variants(barcode)
        if not variants:
            logger.debug("Barcode %r normalizes to nothing; skipping lookup", barcode)
            return None

        for source in self._sources:
            try:
                result = source.lookup(barcode)
            except Exception as exc:
                logger.warning("Barcode source %s failed for %s: %s", source.name, barcode, exc)
                metrics.BARCODE_LOOKUPS.labels(source=source.name, result="error").inc()
                continue

            if result is None:
                metrics.BARCODE_LOOKUPS.labels(source=source.name, result="miss").inc()
                continue

            metrics.BARCODE_LOOKUPS.labels(source=source.name, result="hit").inc()
            logger.info("Barcode %s resolved via %s: %s", barcode, source.name, result.title)
            return result

        logger.info("Barcode %s not found in %s source(s)", barcode, len(self._sources))
        return None


def build_barcode_resolver(
    settings: Settings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> BarcodeResolver:
    """Create the default resolver: UPCitemdb first, then the Open*Facts mirrors."""

    settings = settings or get_settings()
    sources: List[LookupSource] = [
        UpcItemDbSource(
            settings.upcitemdb_url,
            timeout=settings.barcode_timeout,
            transport=transport,
        )
    ]
    if settings.openfacts_mirrors:
        sources.append(
            OpenFactsSource(
                settings.openfacts_mirrors,
                timeout=settings.barcode_timeout,
                transport=transport,
            )
        )
    return BarcodeResolver(sources)


__all__ = ["BarcodeResolver", "build_barcode_resolver"]
