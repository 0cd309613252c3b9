"""Tests for the Toolshed command-line interface."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from toolshed.barcode.resolver import BarcodeResolver
from toolshed.cli import app
from toolshed.config import get_settings
from toolshed.db.items import create_item
from toolshed.db.shopping_list import list_shopping_items
from toolshed.llm.interface import ScriptedLLM

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setenv("TOOLSHED_LOG_LEVEL", "ERROR")
    get_settings.cache_clear()


def test_match_command_with_inventory_file(tmp_path):
    requirements = tmp_path / "requirements.json"
    inventory = tmp_path / "inventory.json"
    requirements.write_text(json.dumps([{"requiredToolName": "Hammer"}, {"requiredToolName": "Router"}]))
    inventory.write_text(json.dumps([{"id": "h1", "name": "Claw Hammer"}]))

    result = runner.invoke(app, ["match", str(requirements), "--inventory", str(inventory), "--no-pretty"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [entry["matchStatus"] for entry in payload] == ["owned", "missing"]


def test_match_command_defaults_to_database(tmp_path):
    create_item(name="Torpedo Level")
    requirements = tmp_path / "requirements.json"
    requirements.write_text(json.dumps([{"requiredToolName": "Level"}]))

    result = runner.invoke(app, ["match", str(requirements)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["ownedTool"]["name"] == "Torpedo Level"


def test_lookup_command(monkeypatch):
    monkeypatch.setattr("toolshed.cli.build_barcode_resolver", lambda: BarcodeResolver([]))
    owned = create_item(name="Drill", specs={"Barcode": "012345678905"})

    result = runner.invoke(app, ["lookup", "012345678905", "--no-pretty"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["ownedItems"][0]["id"] == owned.id

    result = runner.invoke(app, ["lookup", "4006381333931"])
    assert result.exit_code == 1


def test_analyze_task_command(monkeypatch):
    reply = json.dumps({"toolMatches": [{"requiredToolName": "Stud Finder"}], "safetyTips": []})
    monkeypatch.setattr("toolshed.cli.build_llm_client", lambda: ScriptedLLM([reply]))

    result = runner.invoke(app, ["analyze-task", "hang a shelf", "--add-missing", "--no-pretty"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["shoppingListAdded"] == ["Stud Finder"]
    assert [entry.tool_name for entry in list_shopping_items()] == ["Stud Finder"]


def test_analyze_task_without_provider_exits():
    result = runner.invoke(app, ["analyze-task", "hang a shelf"])
    assert result.exit_code == 2


def test_reminders_command():
    create_item(name="Screws", is_consumable=True, quantity=1, low_stock_threshold=5)

    result = runner.invoke(app, ["reminders"])

    assert result.exit_code == 0, result.output
    assert "Low stock: 1" in result.stdout
