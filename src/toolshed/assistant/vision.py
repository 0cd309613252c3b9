"""Photo analysis for single items and whole workbenches."""

from __future__ import annotations

import logging
from typing import List, Optional

from toolshed.assistant.barcode import append_user_context
from toolshed.llm.client import ImageData
from toolshed.llm.interface import TextGenerator
from toolshed.llm.parsing import coerce_tool_analysis, extract_json_payload, strip_data_url
from toolshed.models.analysis import ToolAnalysis

logger = logging.getLogger(__name__)

SINGLE_ITEM_PROMPT = """Analyze this image of a tool or hardware item.
Identify the item and provide details in the following JSON format:
{
  "name": "Short name of the tool",
  "description": "2-sentence description of what it is used for",
  "category": "General category (e.g., Hand Tools, Power Tools, Fasteners)",
  "tags": ["tag1", "tag2", "tag3"],
  "estimatedPrice": "Estimated price range in USD",
  "specs": {
     "Voltage": "18V",
     "Length": "5 in",
     "Material": "Steel"
  },
  "manualSearchQuery": "search query to find the product manual online (e.g. 'DeWalt DCD771 user manual PDF')",
  "videoSearchQuery": "search query to find a how-to or review video (e.g. 'DeWalt DCD771 drill review tutorial')",
  "requiresMaintenance": true/false,
  "maintenanceIntervalDays": 180 (estimated days between routine maintenance, or null if none),
  "maintenanceTask": "Primary maintenance needed (e.g. 'Change oil', 'Sharpen blade', 'Lubricate chain')"
}"""

BULK_PROMPT = """Analyze this image carefully. It may contain MULTIPLE tools or hardware items.
Identify EVERY distinct tool/item visible in the image.

For EACH item, provide details in the following JSON format.
Return an array of objects:
[
  {
    "name": "Short name of the tool",
    "description": "2-sentence description of what it is used for",
    "category": "General category (e.g., Hand Tools, Power Tools, Fasteners)",
    "tags": ["tag1", "tag2", "tag3"],
    "estimatedPrice": "Estimated price range in USD",
    "specs": { "key": "value" },
    "manualSearchQuery": "search query to find the product manual",
    "videoSearchQuery": "search query to find a how-to video",
    "requiresMaintenance": true/false,
    "maintenanceIntervalDays": 180,
    "maintenanceTask": "Primary maintenance task"
  }
]

If only ONE item is visible, return an array with one object.
Be thorough - identify every separate tool you can see."""


def _image_payload(image_base64: str, mime_type: str) -> ImageData:
    data = strip_data_url(image_base64 or "")
    if not data:
        raise ValueError("Image data is required.")
    return ImageData(base64=data, mime_type=mime_type)


def analyze_image(
    image_base64: str,
    llm: TextGenerator,
    context: Optional[str] = None,
    *,
    mime_type: str = "image/jpeg",
) -> ToolAnalysis:
    """Describe the single item shown in a photo."""

    image = _image_payload(image_base64, mime_type)
    prompt = append_user_context(SINGLE_ITEM_PROMPT, context, "Return ONLY raw JSON, no markdown formatting.")
    result = llm.generate(prompt, image)
    analysis = coerce_tool_analysis(extract_json_payload(result.text))
    logger.info("Image analyzed via %s/%s: %s", result.provider, result.model, analysis.name)
    return analysis


def analyze_bulk_image(
    image_base64: str,
    llm: TextGenerator,
    context: Optional[str] = None,
    *,
    mime_type: str = "image/jpeg",
) -> List[ToolAnalysis]:
    """Describe every item in a photo; a lone object reply counts as one item."""

    image = _image_payload(image_base64, mime_type)
    prompt = append_user_context(BULK_PROMPT, context, "Return ONLY raw JSON array, no markdown formatting.")
    result = llm.generate(prompt, image)
    parsed = extract_json_payload(result.text)
    entries = parsed if isinstance(parsed, list) else [parsed]
    analyses = [coerce_tool_analysis(entry) for entry in entries]
    logger.info("Bulk image analyzed via %s/%s: %s item(s)", result.provider, result.model, len(analyses))
    return analyses


__all__ = ["analyze_bulk_image", "analyze_image"]
