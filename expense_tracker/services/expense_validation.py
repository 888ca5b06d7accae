"""Domain-level expense validation.

Pydantic only guarantees payload shapes (a string name, a decimal amount, an
ISO date). The rules below need runtime configuration, the allowed category
set, so they run here, before anything reaches the store:

- amount must be positive and at most MAX_AMOUNT; it is quantized to cents,
  then must be strictly positive and still within MAX_AMOUNT;
- name must contain a non-whitespace character;
- category must be one of the configured categories (case-sensitive).

Existing rows are never revalidated when the category set changes.
"""

from __future__ import annotations
from typing import Iterable, Tuple, TypeVar

from expense_tracker.core.errors import ValidationError
from expense_tracker.models.expense import ExpenseIn
from expense_tracker.services.money import MAX_AMOUNT, quantize, within_range

E = TypeVar("E", bound=ExpenseIn)


class ExpenseValidator:
    def __init__(self, categories: Iterable[str]):
        self.categories: Tuple[str, ...] = tuple(categories)

    def category_message(self) -> str:
        return "Invalid category. Allowed categories: " + ", ".join(self.categories)

    def validate(self, expense: E) -> E:
        """Return a copy with the amount rounded to cents, or raise ``ValidationError``."""
        if expense.amount <= 0 or not expense.name.strip():
            raise ValidationError()
        if not within_range(expense.amount):
            raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}")
        amount = quantize(expense.amount)
        if amount <= 0:
            raise ValidationError()
        if not within_range(amount):
            raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}")
        if expense.category not in self.categories:
            raise ValidationError(self.category_message())
        return expense.model_copy(update={"amount": amount})
