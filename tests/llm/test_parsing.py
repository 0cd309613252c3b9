"""Unit tests for model response parsing helpers."""

from __future__ import annotations

import pytest

from toolshed.llm.parsing import (
    coerce_tool_analysis,
    extract_json_payload,
    sanitize_for_prompt,
    strip_data_url,
)


def test_extract_json_payload_handles_fences_and_chatter():
    assert extract_json_payload('```json\n{"name": "Drill"}\n```') == {"name": "Drill"}
    assert extract_json_payload('Sure! Here it is: [{"name": "Saw"}] Hope that helps.') == [{"name": "Saw"}]
    assert extract_json_payload('{"a": [1, 2]}') == {"a": [1, 2]}


def test_extract_json_payload_rejects_prose():
    with pytest.raises(ValueError, match="not valid JSON"):
        extract_json_payload("I could not identify this item.")
    with pytest.raises(ValueError):
        extract_json_payload("")


def test_sanitize_for_prompt_truncates_and_strips_controls():
    assert sanitize_for_prompt("keep\nnew\tlines\x00\x07") == "keep\nnew\tlines"
    assert sanitize_for_prompt("abcdef", max_length=3) == "abc"
    assert sanitize_for_prompt(None) == ""


def test_strip_data_url():
    assert strip_data_url("data:image/png;base64,AAAA") == "AAAA"
    assert strip_data_url("  AAAA ") == "AAAA"


def test_coerce_tool_analysis_keeps_typed_fields():
    analysis = coerce_tool_analysis(
        {
            "name": "Orbital Sander",
            "description": "Smooths wood.",
            "category": "Power Tools",
            "tags": ["sander", 3, None, "wood"],
            "estimatedPrice": "$60-$80",
            "specs": {"Voltage": "120V", "Pads": 2, "Nested": {"x": 1}, "Corded": True},
            "requiresMaintenance": True,
            "maintenanceIntervalDays": 90.0,
            "maintenanceTask": "Replace pad",
        }
    )

    assert analysis.name == "Orbital Sander"
    assert analysis.tags == ["sander", "wood"]
    assert analysis.specs == {"Voltage": "120V", "Pads": 2, "Corded": True}
    assert analysis.requires_maintenance is True
    assert analysis.maintenance_interval_days == 90
    assert analysis.maintenance_task == "Replace pad"


def test_coerce_tool_analysis_defaults_bad_values():
    analysis = coerce_tool_analysis(
        {
            "name": "  ",
            "tags": "sander",
            "specs": ["not", "a", "map"],
            "requiresMaintenance": "yes",
            "maintenanceIntervalDays": -5,
            "productUrl": 42,
        }
    )

    assert analysis.name == "Unknown Item"
    assert analysis.tags == []
    assert analysis.specs == {}
    assert analysis.requires_maintenance is False
    assert analysis.maintenance_interval_days is None
    assert analysis.product_url is None

    assert coerce_tool_analysis(["not", "an", "object"]).name == "Unknown Item"
