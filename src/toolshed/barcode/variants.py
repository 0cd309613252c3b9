"""Barcode normalization and product identity helpers.

UPC-A codes are 12 digits; the same product printed as EAN-13 gains a leading
zero. A scanned or typed code is expanded into a small set of variants so that
either representation identifies the same product.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping

BARCODE_ITEM_KEYS = ("upc", "ean", "gtin", "barcode")

_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")
_NON_DIGIT_RE = re.compile(r"\D")


def normalize_barcode(value: str) -> str:
    """Strip everything outside ``[0-9A-Za-z]`` and uppercase."""

    return _NON_ALNUM_RE.sub("", value or "").upper()


def barcode_digits(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


def barcode_variants(barcode: str) -> List[str]:
    """Return the ordered, de-duplicated variant set for ``barcode``.

    The set holds the canonical form, the digit-only form, and the UPC-12/EAN-13
    leading-zero counterpart of the digit-only form. An empty list means there
    is nothing to search for.
    """

    normalized = normalize_barcode(barcode)
    if not normalized:
        return []

    variants: List[str] = [normalized]
    digits = barcode_digits(normalized)
    if digits:
        variants.append(digits)
        if len(digits) == 12:
            variants.append(f"0{digits}")
        if len(digits) == 13 and digits.startswith("0"):
            variants.append(digits[1:])

    return list(dict.fromkeys(variant for variant in variants if variant))


def numeric_variants(barcode: str) -> List[str]:
    """Variants usable against lookup services that only accept digits."""

    return [variant for variant in barcode_variants(barcode) if variant.isdigit()]


def _is_scalar_code(value: Any) -> bool:
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def collect_candidate_codes(record: Mapping[str, Any]) -> List[str]:
    """Pull the normalized identifiers a lookup record claims for itself."""

    candidates: List[str] = []
    for key in BARCODE_ITEM_KEYS:
        raw = record.get(key)
        entries: Iterable[Any]
        if _is_scalar_code(raw):
            entries = [raw]
        elif isinstance(raw, (list, tuple)):
            entries = raw
        else:
            continue
        for entry in entries:
            if not _is_scalar_code(entry):
                continue
            normalized = normalize_barcode(str(entry))
            if normalized:
                candidates.append(normalized)
    return list(dict.fromkeys(candidates))


def has_strong_barcode_match(record: Mapping[str, Any], barcode: str) -> bool:
    """True when ``record``'s own identifiers provably refer to ``barcode``."""

    expected = barcode_variants(barcode)
    if not expected:
        return False

    expected_set = set(expected)
    expected_digits = {barcode_digits(variant) for variant in expected} - {""}

    for candidate in collect_candidate_codes(record):
        if candidate in expected_set:
            return True

        digits = barcode_digits(candidate)
        if not digits:
            continue
        if digits in expected_digits:
            return True
        if len(digits) == 13 and digits.startswith("0") and digits[1:] in expected_digits:
            return True
        if len(digits) == 12 and f"0{digits}" in expected_digits:
            return True

    return False


def same_product_identity(first: str, second: str) -> bool:
    """Two barcodes identify the same product when their variant sets intersect."""

    left = set(barcode_variants(first))
    if not left:
        return False
    return not left.isdisjoint(barcode_variants(second))


__all__ = [
    "BARCODE_ITEM_KEYS",
    "barcode_digits",
    "barcode_variants",
    "collect_candidate_codes",
    "has_strong_barcode_match",
    "normalize_barcode",
    "numeric_variants",
    "same_product_identity",
]
