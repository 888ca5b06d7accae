"""Expense mutations and lookups.

Each function takes its collaborators explicitly (a ``Database`` and, for
writes, an ``ExpenseValidator``) and raises the domain errors from
``expense_tracker.core.errors``; routers only translate arguments.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from expense_tracker.core.errors import ConcurrencyConflict, NotFound, ValidationError
from expense_tracker.models.expense import ExpenseIn, ExpenseOut, ExpenseUpdateIn

if TYPE_CHECKING:  # pragma: no cover
    from expense_tracker.db.dal import Database
    from expense_tracker.services.expense_validation import ExpenseValidator

logger = logging.getLogger("expense_tracker.expenses")


def get_expense(db: "Database", expense_id: int) -> ExpenseOut:
    row = db.get_expense(expense_id)
    if row is None:
        raise NotFound()
    return ExpenseOut.from_row(row)


def create_expense(
    db: "Database", validator: "ExpenseValidator", payload: ExpenseIn
) -> ExpenseOut:
    expense = validator.validate(payload)
    expense_id = db.insert_expense(expense)
    logger.info("expense created", extra={"expense_id": expense_id})
    return ExpenseOut(id=expense_id, **expense.model_dump())


def update_expense(
    db: "Database",
    validator: "ExpenseValidator",
    expense_id: int,
    payload: ExpenseUpdateIn,
) -> None:
    """Replace every field of an existing expense.

    Order of checks: id mismatch, payload rules, existence. A row deleted
    between the existence check and the write surfaces as
    ``ConcurrencyConflict``.
    """
    if payload.id != expense_id:
        raise ValidationError("Expense id mismatch")
    expense = validator.validate(payload)
    if not db.expense_exists(expense_id):
        raise NotFound()
    if not db.replace_expense(expense_id, expense):
        raise ConcurrencyConflict()
    logger.info("expense updated", extra={"expense_id": expense_id})


def delete_expense(db: "Database", expense_id: int) -> None:
    if not db.delete_expense(expense_id):
        raise NotFound()
    logger.info("expense deleted", extra={"expense_id": expense_id})
