"""Task tool requirement matching."""

from __future__ import annotations

from .matcher import (
    ALTERNATIVE_THRESHOLD,
    OWNED_THRESHOLD,
    BestMatch,
    classify_score,
    coerce_inventory_item,
    coerce_requirement,
    dedupe_matches,
    find_best_match,
    match_all,
    normalize_text,
    reconcile_requirement,
    score_candidate,
)
from .synonyms import KEYWORD_SYNONYMS

__all__ = [
    "ALTERNATIVE_THRESHOLD",
    "KEYWORD_SYNONYMS",
    "OWNED_THRESHOLD",
    "BestMatch",
    "classify_score",
    "coerce_inventory_item",
    "coerce_requirement",
    "dedupe_matches",
    "find_best_match",
    "match_all",
    "normalize_text",
    "reconcile_requirement",
    "score_candidate",
]
