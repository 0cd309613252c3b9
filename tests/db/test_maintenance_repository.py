"""Unit tests for maintenance reminders and reminder counts."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from toolshed.db.items import create_item
from toolshed.db.loans import create_loan, return_loan
from toolshed.db.maintenance import (
    complete_maintenance,
    create_reminder,
    delete_reminder,
    get_reminder_counts,
    list_reminders,
    list_upcoming_reminders,
    update_reminder,
)

TODAY = date(2026, 5, 1)


def test_complete_recurring_reminder_schedules_next_due():
    mower = create_item(name="Lawn Mower")
    reminder = create_reminder(
        item_id=mower.id,
        task_description="Change oil",
        interval_days=90,
        next_due=TODAY - timedelta(days=3),
        is_recurring=True,
    )
    assert reminder.item_name == "Lawn Mower"

    completed = complete_maintenance(reminder.id, today=TODAY)

    assert completed.last_performed == TODAY
    assert completed.next_due == TODAY + timedelta(days=90)


def test_complete_one_off_reminder_clears_due_date():
    saw = create_item(name="Chainsaw")
    reminder = create_reminder(item_id=saw.id, task_description="Sharpen chain", next_due=TODAY)

    completed = complete_maintenance(reminder.id, today=TODAY)

    assert completed.next_due is None
    assert completed.last_performed == TODAY


def test_list_reminders_by_due_date():
    mower = create_item(name="Lawn Mower")
    due = create_reminder(item_id=mower.id, task_description="Oil", next_due=TODAY)
    soon = create_reminder(item_id=mower.id, task_description="Blade", next_due=TODAY + timedelta(days=5))
    later = create_reminder(item_id=mower.id, task_description="Filter", next_due=TODAY + timedelta(days=30))
    unscheduled = create_reminder(item_id=mower.id, task_description="Wash")

    assert [entry.id for entry in list_reminders()] == [due.id, soon.id, later.id, unscheduled.id]
    assert [entry.id for entry in list_reminders(due_by=TODAY)] == [due.id]
    assert [entry.id for entry in list_upcoming_reminders(TODAY)] == [soon.id]


def test_update_and_delete_reminder():
    mower = create_item(name="Lawn Mower")
    reminder = create_reminder(item_id=mower.id, task_description="Oil")

    updated = update_reminder(reminder.id, interval_days=30, is_recurring=True)
    assert updated.interval_days == 30
    assert updated.is_recurring is True

    delete_reminder(reminder.id)
    assert list_reminders() == []
    with pytest.raises(ValueError, match="not found"):
        complete_maintenance(reminder.id)
    with pytest.raises(ValueError, match="Item"):
        create_reminder(item_id="missing", task_description="Oil")


def test_reminder_counts():
    mower = create_item(name="Lawn Mower")
    drill = create_item(name="Drill")
    create_item(name="Screws", is_consumable=True, quantity=5, low_stock_threshold=10)
    create_item(name="Nails", is_consumable=True, quantity=50, low_stock_threshold=10)
    create_item(name="Glue", is_consumable=True, quantity=0, low_stock_threshold=0)

    create_reminder(item_id=mower.id, task_description="Oil", next_due=TODAY)
    create_reminder(item_id=mower.id, task_description="Blade", next_due=TODAY + timedelta(days=1))
    create_loan(item_id=drill.id, borrower_name="Sam", expected_return_date=TODAY - timedelta(days=1))
    create_loan(item_id=drill.id, borrower_name="Ana", expected_return_date=TODAY)
    returned = create_loan(item_id=mower.id, borrower_name="Lee", expected_return_date=TODAY - timedelta(days=9))
    return_loan(returned.id)

    counts = get_reminder_counts(TODAY)

    assert counts.maintenance_due == 1
    assert counts.overdue_loans == 1
    assert counts.low_stock_items == 1
