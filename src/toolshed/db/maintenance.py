"""Maintenance reminders and the household reminder counts."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func, select

from toolshed.models.inventory import MaintenanceReminder, ReminderCounts

from .models import ItemORM, MaintenanceReminderORM, ToolLoanORM
from .repository import session_scope

_UNSET = object()

UPCOMING_WINDOW_DAYS = 7


def _to_model(row: MaintenanceReminderORM, item_name: Optional[str]) -> MaintenanceReminder:
    return MaintenanceReminder.model_validate(
        {
            "id": row.id,
            "item_id": row.item_id,
            "item_name": item_name,
            "task_description": row.task_description,
            "interval_days": row.interval_days,
            "last_performed": row.last_performed,
            "next_due": row.next_due,
            "is_recurring": row.is_recurring,
            "created_at": row.created_at,
        }
    )


def list_reminders(*, due_by: Optional[date] = None) -> List[MaintenanceReminder]:
    """Return reminders ordered by due date (undated last), optionally only those due by ``due_by``."""

    with session_scope() as session:
        stmt = (
            select(MaintenanceReminderORM, ItemORM.name)
            .join(ItemORM, MaintenanceReminderORM.item_id == ItemORM.id)
            .order_by(
                MaintenanceReminderORM.next_due.is_(None),
                MaintenanceReminderORM.next_due.asc(),
                MaintenanceReminderORM.id,
            )
        )
        if due_by is not None:
            stmt = stmt.where(MaintenanceReminderORM.next_due <= due_by)
        return [_to_model(row, item_name) for row, item_name in session.execute(stmt)]


def list_upcoming_reminders(today: Optional[date] = None) -> List[MaintenanceReminder]:
    """Reminders due after ``today`` but within the next week."""

    today = today or date.today()
    horizon = today + timedelta(days=UPCOMING_WINDOW_DAYS)
    return [
        reminder
        for reminder in list_reminders(due_by=horizon)
        if reminder.next_due is not None and reminder.next_due > today
    ]


def create_reminder(
    *,
    item_id: str,
    task_description: str,
    interval_days: Optional[int] = None,
    next_due: Optional[date] = None,
    is_recurring: bool = False,
) -> MaintenanceReminder:
    with session_scope() as session:
        item = session.get(ItemORM, item_id)
        if item is None:
            raise ValueError(f"Item {item_id} not found")
        row = MaintenanceReminderORM(
            item_id=item_id,
            task_description=task_description.strip(),
            interval_days=interval_days,
            next_due=next_due,
            is_recurring=is_recurring,
        )
        session.add(row)
        session.flush()
        return _to_model(row, item.name)


def update_reminder(
    reminder_id: str,
    *,
    task_description: str | object = _UNSET,
    interval_days: int | None | object = _UNSET,
    next_due: date | None | object = _UNSET,
    is_recurring: bool | object = _UNSET,
) -> MaintenanceReminder:
    with session_scope() as session:
        row = session.get(MaintenanceReminderORM, reminder_id)
        if row is None:
            raise ValueError(f"Maintenance reminder {reminder_id} not found")

        if task_description is not _UNSET:
            row.task_description = str(task_description).strip()
        if interval_days is not _UNSET:
            row.interval_days = interval_days  # type: ignore[assignment]
        if next_due is not _UNSET:
            row.next_due = next_due  # type: ignore[assignment]
        if is_recurring is not _UNSET:
            row.is_recurring = bool(is_recurring)

        session.flush()
        item = session.get(ItemORM, row.item_id)
        return _to_model(row, item.name if item else None)


def complete_maintenance(reminder_id: str, *, today: Optional[date] = None) -> MaintenanceReminder:
    """Record the task as done and schedule the next occurrence for recurring reminders."""

    today = today or date.today()
    with session_scope() as session:
        row = session.get(MaintenanceReminderORM, reminder_id)
        if row is None:
            raise ValueError(f"Maintenance reminder {reminder_id} not found")

        row.last_performed = today
        if row.is_recurring and row.interval_days:
            row.next_due = today + timedelta(days=row.interval_days)
        else:
            row.next_due = None

        session.flush()
        item = session.get(ItemORM, row.item_id)
        return _to_model(row, item.name if item else None)


def delete_reminder(reminder_id: str) -> None:
    with session_scope() as session:
        row = session.get(MaintenanceReminderORM, reminder_id)
        if row is None:
            raise ValueError(f"Maintenance reminder {reminder_id} not found")
        session.delete(row)


def get_reminder_counts(today: Optional[date] = None) -> ReminderCounts:
    """Count due maintenance, overdue loans and low-stock consumables as of ``today``."""

    today = today or date.today()
    with session_scope() as session:
        maintenance_due = session.scalar(
            select(func.count())
            .select_from(MaintenanceReminderORM)
            .where(MaintenanceReminderORM.next_due.is_not(None))
            .where(MaintenanceReminderORM.next_due <= today)
        )
        overdue_loans = session.scalar(
            select(func.count())
            .select_from(ToolLoanORM)
            .where(ToolLoanORM.returned_date.is_(None))
            .where(ToolLoanORM.expected_return_date.is_not(None))
            .where(ToolLoanORM.expected_return_date < today)
        )
        low_stock_items = session.scalar(
            select(func.count())
            .select_from(ItemORM)
            .where(ItemORM.is_consumable.is_(True))
            .where(ItemORM.low_stock_threshold > 0)
            .where(ItemORM.quantity <= ItemORM.low_stock_threshold)
        )
    return ReminderCounts(
        maintenance_due=maintenance_due or 0,
        overdue_loans=overdue_loans or 0,
        low_stock_items=low_stock_items or 0,
    )


__all__ = [
    "complete_maintenance",
    "create_reminder",
    "delete_reminder",
    "get_reminder_counts",
    "list_reminders",
    "list_upcoming_reminders",
    "update_reminder",
]
