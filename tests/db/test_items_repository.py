"""Unit tests for the item repository helpers."""

from __future__ import annotations

import pytest

from toolshed.db.items import (
    create_item,
    delete_item,
    find_items_by_barcode,
    get_item,
    list_inventory_snapshot,
    list_items,
    location_label,
    search_items,
    update_item,
)
from toolshed.db.locations import create_container, create_location


def test_location_label():
    assert location_label("Red Box", "Garage") == "Garage > Red Box"
    assert location_label("Red Box", None) == "Red Box"
    assert location_label(None, "Garage") == "Unorganized"


def test_create_item_inherits_container_location():
    garage = create_location(name="Garage")
    box = create_container(name="Red Box", location_id=garage.id)

    item = create_item(
        name="  Claw Hammer ",
        tags=["hammer", ""],
        specs={"Weight": "16 oz"},
        container_id=box.id,
    )

    assert item.name == "Claw Hammer"
    assert item.tags == ["hammer"]
    assert item.location_id == garage.id
    assert item.location_path == "Garage > Red Box"
    assert item.quantity == 1
    assert item.condition == "good"
    assert get_item(item.id) == item


def test_create_item_rejects_unknown_placement():
    with pytest.raises(ValueError, match="Container"):
        create_item(name="Saw", container_id="nope")
    with pytest.raises(ValueError, match="Location"):
        create_item(name="Saw", location_id="nope")


def test_snapshot_labels_follow_containers():
    garage = create_location(name="Garage")
    red_box = create_container(name="Red Box", location_id=garage.id)
    bin_ = create_container(name="Loose Bin")
    create_item(name="Drill", category="Power Tools", tags=["drill"], container_id=red_box.id)
    create_item(name="Level", container_id=bin_.id)
    create_item(name="Pry Bar", location_id=garage.id)
    create_item(name="Zip Ties")

    snapshot = {entry.name: entry for entry in list_inventory_snapshot()}

    assert snapshot["Drill"].location == "Garage > Red Box"
    assert snapshot["Drill"].tags == ["drill"]
    assert snapshot["Level"].location == "Loose Bin"
    assert snapshot["Pry Bar"].location == "Unorganized"
    assert snapshot["Zip Ties"].location == "Unorganized"


def test_update_item_changes_fields_and_placement():
    garage = create_location(name="Garage")
    shed = create_location(name="Shed")
    box = create_container(name="Red Box", location_id=garage.id)
    item = create_item(name="Drill", container_id=box.id)

    updated = update_item(item.id, quantity=2, is_favorite=True, container_id=None, location_id=shed.id)

    assert updated.quantity == 2
    assert updated.is_favorite is True
    assert updated.container_id is None
    assert updated.location_id == shed.id
    assert updated.location_path == "Unorganized"

    with pytest.raises(TypeError):
        update_item(item.id, colour="red")
    with pytest.raises(ValueError, match="not found"):
        update_item("missing", quantity=1)


def test_list_items_filters():
    create_item(name="Drill", category="Power Tools", is_favorite=True)
    create_item(name="Sander", category="Power Tools")
    create_item(name="Hammer", category="Hand Tools")

    assert [item.name for item in list_items(category="Power Tools")] == ["Drill", "Sander"]
    assert [item.name for item in list_items(favorites_only=True)] == ["Drill"]


def test_search_items_substring_then_fuzzy():
    create_item(name="Claw Hammer", description="16 oz steel")
    create_item(name="Hacksaw", tags=["metal"])
    create_item(name="Cordless Drill", category="Power Tools")

    assert [item.name for item in search_items("steel")] == ["Claw Hammer"]
    assert [item.name for item in search_items("METAL")] == ["Hacksaw"]
    assert [item.name for item in search_items("cordles drill")] == ["Cordless Drill"]
    assert len(search_items("  ")) == 3
    assert search_items("hammer", category="Power Tools") == []


def test_find_items_by_barcode_matches_identity():
    owned = create_item(name="Drill", specs={"Barcode": "012345678905"})
    create_item(name="Glue", specs={"Barcode": "4006381333931"})
    create_item(name="Tape", specs={"Barcode": True})

    assert [item.id for item in find_items_by_barcode("0012345678905")] == [owned.id]
    assert find_items_by_barcode("999") == []


def test_delete_item():
    item = create_item(name="Drill")

    delete_item(item.id)

    assert get_item(item.id) is None
    with pytest.raises(ValueError):
        delete_item(item.id)
