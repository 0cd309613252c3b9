"""Tool lending persistence helpers."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select

from toolshed.models.inventory import ToolLoan

from .models import ItemORM, ToolLoanORM
from .repository import session_scope

_UNSET = object()


def _to_model(row: ToolLoanORM, item_name: Optional[str]) -> ToolLoan:
    return ToolLoan.model_validate(
        {
            "id": row.id,
            "item_id": row.item_id,
            "item_name": item_name,
            "borrower_name": row.borrower_name,
            "borrowed_date": row.borrowed_date,
            "expected_return_date": row.expected_return_date,
            "returned_date": row.returned_date,
            "notes": row.notes,
            "created_at": row.created_at,
        }
    )


def list_loans(*, active_only: bool = False) -> List[ToolLoan]:
    """Return loans, outstanding ones first, then by borrow date."""

    with session_scope() as session:
        stmt = (
            select(ToolLoanORM, ItemORM.name)
            .join(ItemORM, ToolLoanORM.item_id == ItemORM.id)
            .order_by(
                ToolLoanORM.returned_date.is_not(None),
                ToolLoanORM.borrowed_date.desc(),
                ToolLoanORM.id,
            )
        )
        if active_only:
            stmt = stmt.where(ToolLoanORM.returned_date.is_(None))
        return [_to_model(row, item_name) for row, item_name in session.execute(stmt)]


def create_loan(
    *,
    item_id: str,
    borrower_name: str,
    borrowed_date: Optional[date] = None,
    expected_return_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> ToolLoan:
    with session_scope() as session:
        item = session.get(ItemORM, item_id)
        if item is None:
            raise ValueError(f"Item {item_id} not found")
        row = ToolLoanORM(
            item_id=item_id,
            borrower_name=borrower_name.strip(),
            borrowed_date=borrowed_date or date.today(),
            expected_return_date=expected_return_date,
            notes=notes,
        )
        session.add(row)
        session.flush()
        return _to_model(row, item.name)


def update_loan(
    loan_id: str,
    *,
    borrower_name: str | object = _UNSET,
    expected_return_date: date | None | object = _UNSET,
    notes: str | None | object = _UNSET,
) -> ToolLoan:
    with session_scope() as session:
        row = session.get(ToolLoanORM, loan_id)
        if row is None:
            raise ValueError(f"Loan {loan_id} not found")

        if borrower_name is not _UNSET:
            row.borrower_name = str(borrower_name).strip()
        if expected_return_date is not _UNSET:
            row.expected_return_date = expected_return_date  # type: ignore[assignment]
        if notes is not _UNSET:
            row.notes = notes  # type: ignore[assignment]

        session.flush()
        item = session.get(ItemORM, row.item_id)
        return _to_model(row, item.name if item else None)


def return_loan(loan_id: str, *, returned_on: Optional[date] = None) -> ToolLoan:
    """Mark a loan as returned (today unless ``returned_on`` is given)."""

    with session_scope() as session:
        row = session.get(ToolLoanORM, loan_id)
        if row is None:
            raise ValueError(f"Loan {loan_id} not found")
        row.returned_date = returned_on or date.today()
        session.flush()
        item = session.get(ItemORM, row.item_id)
        return _to_model(row, item.name if item else None)


def delete_loan(loan_id: str) -> None:
    with session_scope() as session:
        row = session.get(ToolLoanORM, loan_id)
        if row is None:
            raise ValueError(f"Loan {loan_id} not found")
        session.delete(row)


__all__ = ["create_loan", "delete_loan", "list_loans", "return_loan", "update_loan"]
