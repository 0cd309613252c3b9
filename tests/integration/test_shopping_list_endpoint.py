"""Integration tests for the shopping list endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers


def test_shopping_list_crud(client):
    response = client.get("/shopping-list")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []

    headers = auth_headers()
    response = client.post(
        "/shopping-list",
        json={"tool_name": "Stud Finder", "estimated_price": "$25", "notes": "magnetic"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    item = response.json()
    assert item["tool_name"] == "Stud Finder"
    assert item["purchased"] is False

    response = client.put(f"/shopping-list/{item['id']}", json={"purchased": True}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["purchased"] is True

    response = client.delete(f"/shopping-list/{item['id']}", headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/shopping-list").json() == []


def test_clear_purchased(client):
    headers = auth_headers()
    bought = client.post("/shopping-list", json={"tool_name": "Level"}, headers=headers).json()
    client.post("/shopping-list", json={"tool_name": "Chisel"}, headers=headers)
    client.put(f"/shopping-list/{bought['id']}", json={"purchased": True}, headers=headers)

    response = client.post("/shopping-list/clear-purchased", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"removed": 1}
    assert [entry["tool_name"] for entry in client.get("/shopping-list").json()] == ["Chisel"]


def test_shopping_list_errors(client):
    headers = auth_headers()
    assert client.put("/shopping-list/missing", json={"notes": "x"}, headers=headers).status_code == 404
    assert client.post("/shopping-list", json={"tool_name": ""}, headers=headers).status_code == 422
    assert client.post("/shopping-list", json={"tool_name": "Saw", "notes": "x" * 1001}, headers=headers).status_code == 422
