"""Unit tests for the tool lending repository helpers."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from toolshed.db.items import create_item, delete_item
from toolshed.db.loans import create_loan, delete_loan, list_loans, return_loan, update_loan


def test_loan_lifecycle():
    drill = create_item(name="Drill")

    loan = create_loan(item_id=drill.id, borrower_name=" Sam ", expected_return_date=date(2030, 1, 1))
    assert loan.borrower_name == "Sam"
    assert loan.item_name == "Drill"
    assert loan.borrowed_date == date.today()
    assert loan.returned_date is None

    updated = update_loan(loan.id, notes="Bring back the bits too")
    assert updated.notes == "Bring back the bits too"

    returned = return_loan(loan.id, returned_on=date(2029, 12, 24))
    assert returned.returned_date == date(2029, 12, 24)
    assert list_loans(active_only=True) == []
    assert [entry.id for entry in list_loans()] == [loan.id]

    delete_loan(loan.id)
    assert list_loans() == []


def test_active_loans_listed_before_returned():
    drill = create_item(name="Drill")
    saw = create_item(name="Saw")
    older = create_loan(item_id=drill.id, borrower_name="Ana", borrowed_date=date.today() - timedelta(days=10))
    newer = create_loan(item_id=saw.id, borrower_name="Ben")
    return_loan(newer.id)

    assert [entry.id for entry in list_loans()] == [older.id, newer.id]


def test_loan_requires_existing_item_and_cascades():
    with pytest.raises(ValueError, match="Item"):
        create_loan(item_id="missing", borrower_name="Sam")

    drill = create_item(name="Drill")
    create_loan(item_id=drill.id, borrower_name="Sam")
    delete_item(drill.id)

    assert list_loans() == []
    with pytest.raises(ValueError):
        return_loan("missing")
