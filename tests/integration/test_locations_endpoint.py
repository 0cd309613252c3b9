"""Integration tests for the location and container endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers


def test_location_and_container_flow(client):
    response = client.post("/locations", json={"name": "Garage"}, headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED
    garage = response.json()

    response = client.post(
        "/containers",
        json={"name": "Red Box", "location_id": garage["id"]},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED
    box = response.json()
    assert box["location_name"] == "Garage"

    response = client.get("/containers", params={"location_id": garage["id"]})
    assert response.status_code == status.HTTP_200_OK
    assert [entry["id"] for entry in response.json()] == [box["id"]]

    response = client.put(
        f"/locations/{garage['id']}",
        json={"description": "Attached two-car garage"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["description"] == "Attached two-car garage"

    response = client.delete(f"/locations/{garage['id']}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/containers").json() == []


def test_location_errors(client):
    response = client.put("/locations/missing", json={"name": "Shed"}, headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.post("/locations", json={"name": ""}, headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    created = client.post("/locations", json={"name": "Shed"}, headers=auth_headers()).json()
    response = client.put(f"/locations/{created['id']}", json={}, headers=auth_headers())
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post(
        "/containers",
        json={"name": "Bin", "location_id": "missing"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
