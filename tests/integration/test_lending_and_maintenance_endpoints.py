"""Integration tests for loans, maintenance reminders and reminder counts."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import status

from tests.integration.utils import auth_headers


def _item(client, name: str, **extra) -> dict:
    response = client.post("/items", json={"name": name, **extra}, headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_loan_flow(client):
    drill = _item(client, "Drill")
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    response = client.post(
        "/loans",
        json={"item_id": drill["id"], "borrower_name": "Sam", "expected_return_date": yesterday},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED
    loan = response.json()
    assert loan["item_name"] == "Drill"

    assert client.get("/reminders/counts").json()["overdue_loans"] == 1

    response = client.post(f"/loans/{loan['id']}/return", headers=auth_headers())
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["returned_date"] == date.today().isoformat()

    assert client.get("/loans", params={"active": "true"}).json() == []
    assert len(client.get("/loans").json()) == 1
    assert client.get("/reminders/counts").json()["overdue_loans"] == 0

    response = client.post("/loans", json={"item_id": "missing", "borrower_name": "Sam"}, headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_maintenance_flow(client):
    mower = _item(client, "Lawn Mower")
    today = date.today()

    response = client.post(
        "/maintenance",
        json={
            "item_id": mower["id"],
            "task_description": "Change oil",
            "interval_days": 30,
            "next_due": today.isoformat(),
            "is_recurring": True,
        },
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED
    reminder = response.json()

    response = client.get("/maintenance", params={"due_by": today.isoformat()})
    assert [entry["id"] for entry in response.json()] == [reminder["id"]]
    assert client.get("/reminders/counts").json()["maintenance_due"] == 1

    response = client.post(f"/maintenance/{reminder['id']}/complete", headers=auth_headers())
    assert response.status_code == status.HTTP_200_OK
    completed = response.json()
    assert completed["last_performed"] == today.isoformat()
    assert completed["next_due"] == (today + timedelta(days=30)).isoformat()
    assert client.get("/reminders/counts").json()["maintenance_due"] == 0

    response = client.post(
        "/maintenance",
        json={"item_id": mower["id"], "task_description": "Sharpen", "interval_days": 0},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.delete(f"/maintenance/{reminder['id']}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.post("/maintenance/missing/complete", headers=auth_headers()).status_code == 404


def test_low_stock_counts(client):
    _item(client, "Screws", is_consumable=True, quantity=3, low_stock_threshold=10)

    counts = client.get("/reminders/counts").json()

    assert counts == {"maintenance_due": 0, "overdue_loans": 0, "low_stock_items": 1}
