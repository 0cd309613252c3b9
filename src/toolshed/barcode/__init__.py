"""Barcode normalization and product lookup."""

from __future__ import annotations

from .resolver import BarcodeResolver, build_barcode_resolver
from .sources import LookupSource, OpenFactsSource, UpcItemDbSource
from .variants import (
    barcode_variants,
    has_strong_barcode_match,
    normalize_barcode,
    same_product_identity,
)
from .web_search import fetch_web_search_context

__all__ = [
    "BarcodeResolver",
    "LookupSource",
    "OpenFactsSource",
    "UpcItemDbSource",
    "barcode_variants",
    "build_barcode_resolver",
    "fetch_web_search_context",
    "has_strong_barcode_match",
    "normalize_barcode",
    "same_product_identity",
]
