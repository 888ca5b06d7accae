"""Pydantic domain models for the Expense Tracker."""

from .constants import (
    DEFAULT_CATEGORIES,
    PAGINATION_MODES,
    SORT_COLUMNS,
)  # re-export
from .expense import ExpenseIn, ExpenseOut, ExpenseUpdateIn

__all__ = [
    "DEFAULT_CATEGORIES",
    "PAGINATION_MODES",
    "SORT_COLUMNS",
    "ExpenseIn",
    "ExpenseOut",
    "ExpenseUpdateIn",
]
