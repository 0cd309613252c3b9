"""Work assistant: which tools does a task need, and which of them are already owned."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence

from toolshed import metrics
from toolshed.db.shopping_list import add_missing_tools
from toolshed.llm.interface import TextGenerator
from toolshed.llm.parsing import extract_json_payload, sanitize_for_prompt
from toolshed.matching import match_all
from toolshed.models.analysis import WorkAnalysisResult
from toolshed.models.inventory import InventoryItem, ShoppingListItem

logger = logging.getLogger(__name__)

MAX_TASK_CHARS = 1000
MAX_NOTE_CHARS = 1000

WORK_PROMPT_TEMPLATE = (
    'You are a professional contractor and tool expert. A user wants to: "{task}"\n\n'
    "USER'S TOOL INVENTORY ({count} items):\n"
    "{inventory_json}\n\n"
    "Analyze this task and return a JSON response:\n"
    "{{\n"
    '  "toolMatches": [\n'
    "    {{\n"
    '      "requiredToolName": "Name of tool needed",\n'
    '      "description": "Why this tool is needed for the task",\n'
    '      "category": "Hand Tools|Power Tools|Measuring|Safety|Fasteners|etc",\n'
    '      "required": true or false (true = essential, false = optional/nice-to-have),\n'
    '      "matchStatus": "owned" | "alternative" | "missing",\n'
    '      "ownedTool": {{ "id": "id from inventory", "name": "exact name from inventory", '
    '"location": "location from inventory" }} or null,\n'
    '      "alternativeTool": {{ "id": "id from inventory", "name": "name from inventory", '
    '"reason": "how this tool can substitute", "location": "location" }} or null\n'
    "    }}\n"
    "  ],\n"
    '  "additionalMaterials": ["non-tool items needed like screws, paint, tape, etc"],\n'
    '  "safetyTips": ["relevant safety warnings for this task"]\n'
    "}}\n\n"
    "MATCHING RULES:\n"
    '- Match flexibly: "cordless drill" matches "drill", "power drill", "drill/driver"\n'
    "- Check tags too: an item tagged with the required tool's name is a match\n"
    '- "owned": tool found in inventory (exact or very similar)\n'
    '- "alternative": a DIFFERENT tool from inventory that could substitute (explain why)\n'
    '- "missing": no matching or alternative tool in inventory\n'
    "- Include essential tools, optional helpers, safety equipment and measuring tools\n"
    "- Keep it practical; don't list 20 tools for a simple task\n\n"
    "Return ONLY valid JSON, no markdown formatting or code blocks."
)

EMPTY_INVENTORY_TEXT = "EMPTY - user has no tools cataloged yet."

ShoppingListAdder = Callable[[Iterable[str], Optional[str]], List[ShoppingListItem]]


def render_work_prompt(task: str, inventory: Sequence[InventoryItem]) -> str:
    if inventory:
        inventory_json = json.dumps(
            [item.model_dump(mode="json") for item in inventory],
            ensure_ascii=False,
            indent=2,
        )
    else:
        inventory_json = EMPTY_INVENTORY_TEXT
    return WORK_PROMPT_TEMPLATE.format(
        task=sanitize_for_prompt(task, MAX_TASK_CHARS),
        count=len(inventory),
        inventory_json=inventory_json,
    )


def _clean_strings(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    cleaned = []
    for value in values:
        if value is None or value is False:
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return cleaned


def _default_shopping_list_adder(names: Iterable[str], notes: Optional[str]) -> List[ShoppingListItem]:
    return add_missing_tools(names, notes=notes)


def analyze_work_task(
    task: str,
    inventory: Sequence[InventoryItem],
    llm: TextGenerator,
    *,
    add_missing_to_shopping_list: bool = False,
    shopping_list_adder: Optional[ShoppingListAdder] = None,
) -> WorkAnalysisResult:
    """Ask the model which tools ``task`` needs and reconcile them with ``inventory``.

    Raises ``ValueError`` for an empty task or an unparseable model reply; provider
    failures propagate as ``LLMError``.
    """

    task = (task or "").strip()
    if not task:
        raise ValueError("Task description is required.")

    snapshot = list(inventory)
    result = llm.generate(render_work_prompt(task, snapshot))
    parsed = extract_json_payload(result.text)
    if not isinstance(parsed, dict):
        raise ValueError("Work assistant response was not a JSON object.")

    matches = match_all(parsed.get("toolMatches"), snapshot)
    for match in matches:
        metrics.TOOL_MATCHES.labels(status=match.match_status).inc()

    added: List[str] = []
    if add_missing_to_shopping_list:
        missing = [match.required_tool_name for match in matches if match.match_status == "missing"]
        if missing:
            adder = shopping_list_adder or _default_shopping_list_adder
            note = f"Needed for: {task}"[:MAX_NOTE_CHARS]
            added = [entry.tool_name for entry in adder(missing, note)]

    logger.info(
        "Work task analyzed via %s/%s: %s match(es), %s added to shopping list",
        result.provider,
        result.model,
        len(matches),
        len(added),
    )
    return WorkAnalysisResult(
        task=task,
        tool_matches=matches,
        additional_materials=_clean_strings(parsed.get("additionalMaterials")),
        safety_tips=_clean_strings(parsed.get("safetyTips")),
        shopping_list_added=added,
    )


__all__ = ["analyze_work_task", "render_work_prompt"]
