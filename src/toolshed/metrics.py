"""Prometheus metrics definitions for Toolshed."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "toolshed_http_requests_total",
    "Total number of HTTP requests processed by the Toolshed API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "toolshed_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Toolshed API",
    ["method", "path"],
)

BARCODE_LOOKUPS = Counter(
    "toolshed_barcode_lookups_total",
    "Barcode lookup attempts by source and outcome",
    ["source", "result"],
)

LLM_REQUESTS = Counter(
    "toolshed_llm_requests_total",
    "AI provider calls by provider and status",
    ["provider", "status"],
)

TOOL_MATCHES = Counter(
    "toolshed_tool_matches_total",
    "Tool requirement classifications produced by the matcher",
    ["status"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "BARCODE_LOOKUPS",
    "LLM_REQUESTS",
    "TOOL_MATCHES",
]
