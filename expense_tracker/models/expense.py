from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from expense_tracker.services.money import from_storage


class ExpenseIn(BaseModel):
    """Create payload. Only shapes are checked here.

    Business rules (amount range, non-blank name, allowed category) live in
    ``ExpenseValidator`` because the category set is runtime configuration.
    """

    name: str
    amount: Decimal
    date: date
    category: str


class ExpenseUpdateIn(ExpenseIn):
    """Full-replacement update payload; ``id`` must echo the path id."""

    id: Optional[int] = None


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    amount: Decimal
    date: date
    category: str

    @field_serializer("amount")
    def amount_as_number(self, amount: Decimal) -> float:
        return float(amount)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ExpenseOut":
        return cls(
            id=row["id"],
            name=row["name"],
            amount=from_storage(row["amount_cents"]),
            date=date.fromisoformat(row["date"]),
            category=row["category"],
        )
