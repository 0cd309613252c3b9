"""AI-assisted workflows built on the matcher, resolver and model client."""

from toolshed.assistant.barcode import analyze_barcode
from toolshed.assistant.vision import analyze_bulk_image, analyze_image
from toolshed.assistant.work import analyze_work_task

__all__ = [
    "analyze_barcode",
    "analyze_bulk_image",
    "analyze_image",
    "analyze_work_task",
]
