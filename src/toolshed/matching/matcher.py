"""Heuristic matching of task tool requirements against the household inventory.

The assistant's model proposes which tools a task needs and, optionally, which
inventory items cover them. This module scores every inventory item against each
requirement using token overlap and a synonym table, then reconciles that score
with the model's own proposal.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from toolshed.matching.synonyms import KEYWORD_SYNONYMS
from toolshed.models.analysis import (
    AlternativeToolRef,
    MatchStatus,
    OwnedToolRef,
    ToolMatch,
    ToolRequirement,
)
from toolshed.models.inventory import InventoryItem

logger = logging.getLogger(__name__)

SUBSTRING_BONUS = 0.7
TOKEN_OVERLAP_WEIGHT = 0.3
SYNONYM_BONUS = 0.08

OWNED_THRESHOLD = 0.62
ALTERNATIVE_THRESHOLD = 0.42

DEFAULT_TOOL_NAME = "Unspecified tool"
DEFAULT_DESCRIPTION = "Useful for this task."
DEFAULT_CATEGORY = "General"
AI_ALTERNATIVE_REASON = "Can substitute for this task."
HEURISTIC_ALTERNATIVE_REASON = "Closest available match in your inventory."

_VALID_STATUSES = {"owned", "alternative", "missing"}
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WS_RE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    lowered = (value or "").lower()
    return _WS_RE.sub(" ", _NON_ALNUM_RE.sub(" ", lowered)).strip()


@dataclasses.dataclass(frozen=True)
class BestMatch:
    item: InventoryItem
    score: float


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _field(raw: Any, *names: str) -> Any:
    if isinstance(raw, Mapping):
        for name in names:
            if name in raw:
                return raw[name]
        return None
    for name in names:
        if hasattr(raw, name):
            return getattr(raw, name)
    return None


def coerce_inventory_item(raw: Any) -> Optional[InventoryItem]:
    """Turn an inventory row (model or mapping) into a snapshot item, or drop it."""

    if isinstance(raw, InventoryItem):
        return raw
    item_id = _identifier(_field(raw, "id"))
    if item_id is None:
        return None
    tags = _field(raw, "tags")
    category = _field(raw, "category")
    location = _text(_field(raw, "location", "location_path")).strip()
    return InventoryItem(
        id=item_id,
        name=_text(_field(raw, "name")),
        description=_text(_field(raw, "description")),
        category=category if isinstance(category, str) else None,
        tags=[tag for tag in tags if isinstance(tag, str)] if isinstance(tags, (list, tuple)) else [],
        location=location or "Unorganized",
    )


def coerce_requirement(raw: Any) -> ToolRequirement:
    """Validate-and-default one requirement from the model's JSON payload."""

    if isinstance(raw, ToolRequirement):
        return raw
    if not isinstance(raw, Mapping):
        return ToolRequirement()

    status = raw.get("matchStatus", raw.get("match_status"))
    owned = raw.get("ownedTool", raw.get("owned_tool"))
    alternative = raw.get("alternativeTool", raw.get("alternative_tool"))
    alternative_reason = _text(alternative.get("reason")).strip() if isinstance(alternative, Mapping) else ""

    return ToolRequirement(
        name=_text(raw.get("requiredToolName", raw.get("name"))).strip(),
        description=_text(raw.get("description")).strip(),
        category=_text(raw.get("category")).strip(),
        required=raw.get("required") is not False,
        proposed_status=status if status in _VALID_STATUSES else None,
        owned_tool_id=_identifier(owned.get("id")) if isinstance(owned, Mapping) else None,
        alternative_tool_id=(
            _identifier(alternative.get("id")) if isinstance(alternative, Mapping) else None
        ),
        alternative_reason=alternative_reason or None,
    )


def score_candidate(requirement_name: str, item: InventoryItem) -> float:
    """Score how well ``item`` satisfies a requirement named ``requirement_name``."""

    required = normalize_text(requirement_name)
    required_tokens = [token for token in required.split(" ") if token]
    if not required:
        return 0.0

    corpus = normalize_text(" ".join([item.name, item.description, item.category or "", *item.tags]))
    corpus_tokens = set(corpus.split(" "))
    candidate_name = normalize_text(item.name)

    score = 0.0
    if required in corpus or (candidate_name and candidate_name in required):
        score += SUBSTRING_BONUS

    overlap = sum(1 for token in required_tokens if token in corpus_tokens)
    score += (overlap / len(required_tokens)) * TOKEN_OVERLAP_WEIGHT

    for token in dict.fromkeys(required_tokens):
        synonyms = KEYWORD_SYNONYMS.get(token, ())
        if any(normalize_text(synonym) in corpus for synonym in synonyms):
            score += SYNONYM_BONUS

    return score


def find_best_match(requirement_name: str, inventory: Sequence[InventoryItem]) -> Optional[BestMatch]:
    """Highest-scoring item; equal scores go to the smallest id."""

    if not normalize_text(requirement_name):
        return None

    best: Optional[BestMatch] = None
    for candidate in inventory:
        score = score_candidate(requirement_name, candidate)
        if (
            best is None
            or score > best.score
            or (score == best.score and candidate.id < best.item.id)
        ):
            best = BestMatch(item=candidate, score=score)
    return best


def classify_score(score: Optional[float]) -> MatchStatus:
    if score is None:
        return "missing"
    if score >= OWNED_THRESHOLD:
        return "owned"
    if score >= ALTERNATIVE_THRESHOLD:
        return "alternative"
    return "missing"


def _owned_ref(item: InventoryItem) -> OwnedToolRef:
    return OwnedToolRef(id=item.id, name=item.name, location=item.location)


def _alternative_ref(item: InventoryItem, reason: str) -> AlternativeToolRef:
    return AlternativeToolRef(id=item.id, name=item.name, location=item.location, reason=reason)


def reconcile_requirement(
    requirement: ToolRequirement,
    inventory: Sequence[InventoryItem],
    inventory_by_id: Mapping[str, InventoryItem],
) -> ToolMatch:
    """Combine the model's proposal for one requirement with the local heuristic.

    Precedence: an owned item the model names by a real id; the heuristic's best
    match when the model said "owned" and the score clears the owned threshold;
    an alternative the model names by a real id; otherwise the heuristic alone,
    where an owned-level score beats a mere alternative.
    """

    ai_owned = inventory_by_id.get(requirement.owned_tool_id) if requirement.owned_tool_id else None
    ai_alternative = (
        inventory_by_id.get(requirement.alternative_tool_id) if requirement.alternative_tool_id else None
    )
    best = find_best_match(requirement.name, inventory) if requirement.name else None
    heuristic = classify_score(best.score if best else None)

    status: MatchStatus
    owned_tool: Optional[OwnedToolRef] = None
    alternative_tool: Optional[AlternativeToolRef] = None
    score = best.score if best else 0.0

    if ai_owned is not None:
        status = "owned"
        owned_tool = _owned_ref(ai_owned)
        score = score_candidate(requirement.name, ai_owned)
    elif requirement.proposed_status == "owned" and heuristic == "owned" and best:
        status = "owned"
        owned_tool = _owned_ref(best.item)
    elif ai_alternative is not None:
        status = "alternative"
        alternative_tool = _alternative_ref(
            ai_alternative, requirement.alternative_reason or AI_ALTERNATIVE_REASON
        )
        score = score_candidate(requirement.name, ai_alternative)
    elif heuristic == "owned" and best:
        status = "owned"
        owned_tool = _owned_ref(best.item)
    elif heuristic == "alternative" and best:
        status = "alternative"
        alternative_tool = _alternative_ref(best.item, HEURISTIC_ALTERNATIVE_REASON)
    else:
        status = "missing"

    return ToolMatch(
        required_tool_name=requirement.name or DEFAULT_TOOL_NAME,
        description=requirement.description or DEFAULT_DESCRIPTION,
        category=requirement.category or DEFAULT_CATEGORY,
        required=requirement.required,
        match_status=status,
        owned_tool=owned_tool,
        alternative_tool=alternative_tool,
        score=score,
    )


def dedupe_matches(matches: Iterable[ToolMatch]) -> List[ToolMatch]:
    """Collapse requirements with the same normalized name.

    The first result per name is kept unless it is ``missing`` and a later one is
    not; a missing result never replaces a non-missing one.
    """

    collapsed: dict[str, ToolMatch] = {}
    for match in matches:
        key = normalize_text(match.required_tool_name)
        if not key:
            continue
        existing = collapsed.get(key)
        if existing is None or (existing.match_status == "missing" and match.match_status != "missing"):
            collapsed[key] = match
    return list(collapsed.values())


def match_all(requirements: Any, inventory: Any) -> List[ToolMatch]:
    """Classify every requirement as owned, alternative or missing.

    Both arguments are snapshots supplied by the caller; malformed entries are
    coerced or dropped rather than raising.
    """

    if not isinstance(requirements, (list, tuple)) or not requirements:
        return []

    snapshot: List[InventoryItem] = []
    if isinstance(inventory, (list, tuple)):
        for raw in inventory:
            item = coerce_inventory_item(raw)
            if item is not None:
                snapshot.append(item)
    inventory_by_id = {item.id: item for item in snapshot}

    reconciled = [
        reconcile_requirement(coerce_requirement(raw), snapshot, inventory_by_id)
        for raw in requirements
    ]
    matches = dedupe_matches(reconciled)
    logger.debug(
        "Matched %s requirement(s) against %s item(s): %s",
        len(matches),
        len(snapshot),
        [match.match_status for match in matches],
    )
    return matches


__all__ = [
    "ALTERNATIVE_THRESHOLD",
    "BestMatch",
    "OWNED_THRESHOLD",
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
