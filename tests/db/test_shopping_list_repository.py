"""Unit tests for the shopping list repository helpers."""

from __future__ import annotations

import pytest

from toolshed.db.shopping_list import (
    add_missing_tools,
    clear_purchased,
    create_shopping_item,
    delete_shopping_item,
    get_shopping_item,
    list_shopping_items,
    update_shopping_item,
)


def test_create_and_list_shopping_items():
    create_shopping_item(tool_name="Stud Finder", estimated_price="$25")
    create_shopping_item(tool_name="Level")

    items = list_shopping_items()
    assert {item.tool_name for item in items} == {"Stud Finder", "Level"}
    assert all(item.id for item in items)
    assert all(item.purchased is False for item in items)


def test_purchased_items_sort_last_and_clear():
    first = create_shopping_item(tool_name="Chisel set")
    create_shopping_item(tool_name="Wood glue")

    update_shopping_item(first.id, purchased=True)
    assert list_shopping_items()[-1].id == first.id

    assert clear_purchased() == 1
    assert [item.tool_name for item in list_shopping_items()] == ["Wood glue"]
    assert clear_purchased() == 0


def test_update_and_delete_shopping_item():
    item = create_shopping_item(tool_name="Sandpaper")

    updated = update_shopping_item(item.id, estimated_price=" $8 ", notes="120 grit")
    assert updated.estimated_price == "$8"
    assert updated.notes == "120 grit"

    delete_shopping_item(item.id)
    assert get_shopping_item(item.id) is None


def test_add_missing_tools_skips_duplicates_case_insensitively():
    create_shopping_item(tool_name="Tape Measure")

    added = add_missing_tools(["tape measure", "Stud Finder", "stud finder ", ""], notes="Needed for: shelf")

    assert [item.tool_name for item in added] == ["Stud Finder"]
    assert added[0].notes == "Needed for: shelf"
    assert len(list_shopping_items()) == 2


def test_update_missing_item_raises():
    with pytest.raises(ValueError):
        update_shopping_item("missing", tool_name="nope")
