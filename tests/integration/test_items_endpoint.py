"""Integration tests for the item endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers


def _create(client, **payload):
    response = client.post("/items", json=payload, headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_item_create_update_delete_flow(client):
    garage = client.post("/locations", json={"name": "Garage"}, headers=auth_headers()).json()
    box = client.post(
        "/containers",
        json={"name": "Red Box", "location_id": garage["id"]},
        headers=auth_headers(),
    ).json()

    created = _create(
        client,
        name="Cordless Drill",
        category="Power Tools",
        tags=["drill"],
        specs={"Voltage": "20V"},
        container_id=box["id"],
    )
    assert created["location_path"] == "Garage > Red Box"
    assert created["location_id"] == garage["id"]

    response = client.get(f"/items/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["specs"] == {"Voltage": "20V"}

    response = client.put(
        f"/items/{created['id']}",
        json={"quantity": 2, "condition": "worn", "description": None},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["quantity"] == 2
    assert updated["condition"] == "worn"
    assert updated["description"] == ""

    response = client.delete(f"/items/{created['id']}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/items/{created['id']}").status_code == status.HTTP_404_NOT_FOUND


def test_item_search_and_filters(client):
    _create(client, name="Claw Hammer", category="Hand Tools", is_favorite=True)
    _create(client, name="Cordless Drill", category="Power Tools")

    response = client.get("/items", params={"q": "hammer"})
    assert [item["name"] for item in response.json()] == ["Claw Hammer"]

    response = client.get("/items", params={"category": "Power Tools"})
    assert [item["name"] for item in response.json()] == ["Cordless Drill"]

    response = client.get("/items", params={"favorites": "true"})
    assert [item["name"] for item in response.json()] == ["Claw Hammer"]


def test_item_validation_and_missing_rows(client):
    response = client.post("/items", json={"name": "Drill", "condition": "broken"}, headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"]

    response = client.post("/items", json={"name": "Drill", "container_id": "missing"}, headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.put("/items/missing", json={"quantity": 1}, headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.delete("/items/missing", headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_item_writes_refresh_the_matcher_snapshot(client):
    requirements = {"requirements": [{"requiredToolName": "Hammer"}]}

    response = client.post("/assistant/match", json=requirements)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["matchStatus"] == "missing"

    hammer = _create(client, name="Claw Hammer")

    response = client.post("/assistant/match", json=requirements)
    match = response.json()[0]
    assert match["matchStatus"] == "owned"
    assert match["ownedTool"]["id"] == hammer["id"]
