"""AI provider client and response parsing helpers."""

from __future__ import annotations

from .client import (
    ImageData,
    LLMClient,
    LLMConfigurationError,
    LLMError,
    LLMQuotaError,
    LLMResult,
    build_llm_client,
)
from .interface import ScriptedLLM, TextGenerator
from .parsing import coerce_tool_analysis, extract_json_payload, sanitize_for_prompt, strip_data_url

__all__ = [
    "ImageData",
    "LLMClient",
    "LLMConfigurationError",
    "LLMError",
    "LLMQuotaError",
    "LLMResult",
    "ScriptedLLM",
    "TextGenerator",
    "build_llm_client",
    "coerce_tool_analysis",
    "extract_json_payload",
    "sanitize_for_prompt",
    "strip_data_url",
]
