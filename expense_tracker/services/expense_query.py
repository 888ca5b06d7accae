"""Expense listing: parameter normalization, filtering, ordering, paging.

Raw query-string values are never rejected. Anything malformed is coerced to
its default (or dropped, for filters) by ``build_expense_query`` so a listing
request cannot fail on bad input. The resulting ``ExpenseQuery`` is executed
by ``run_expense_query`` through the store's read-only path:

1. all supplied filters are ANDed,
2. rows are ordered by the sort key (``date`` desc by default), ties by id,
3. the filtered total is counted,
4. the requested page is sliced out (paginated mode only).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import math
from typing import TYPE_CHECKING, Iterable, List, Optional

from expense_tracker.models.constants import DEFAULT_SORT_KEY, SORT_COLUMNS
from expense_tracker.models.expense import ExpenseOut

if TYPE_CHECKING:  # pragma: no cover
    from expense_tracker.db.dal import Database

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class ExpenseQuery:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None
    sort_by: str = DEFAULT_SORT_KEY
    descending: bool = True
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    paginate: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class ExpensePage:
    items: List[ExpenseOut]
    total_count: int
    page: int
    page_size: int
    paginated: bool

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    def headers(self) -> dict:
        """Pagination metadata headers; empty outside paginated mode."""
        if not self.paginated:
            return {}
        return {
            "X-Total-Count": str(self.total_count),
            "X-Total-Pages": str(self.total_pages),
            "X-Current-Page": str(self.page),
        }


# Parsers ----------------------------------------------------------


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def parse_decimal(value: Optional[str]) -> Optional[Decimal]:
    if _blank(value):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_date(value: Optional[str]) -> Optional[date]:
    """Accept ``YYYY-MM-DD`` or a full ISO datetime (its date part is used)."""
    if _blank(value):
        return None
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_int(value: Optional[str]) -> Optional[int]:
    if _blank(value):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


# Normalization ----------------------------------------------------


def build_expense_query(
    *,
    categories: Iterable[str],
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    paginate: bool = True,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> ExpenseQuery:
    """Normalize raw listing parameters into an ``ExpenseQuery``."""
    category_filter = None
    if not _blank(category) and category in set(categories):
        category_filter = category

    key = (sort_by or "").strip().lower()
    if key in SORT_COLUMNS:
        descending = (order or "").strip().lower() == "desc"
    else:
        # unrecognized or absent sortBy ignores ``order`` entirely
        key, descending = DEFAULT_SORT_KEY, True

    page_number = parse_int(page)
    if page_number is None or page_number < 1:
        page_number = 1
    size = parse_int(page_size)
    if size is None or not 1 <= size <= max_page_size:
        size = default_page_size

    return ExpenseQuery(
        min_price=parse_decimal(min_price),
        max_price=parse_decimal(max_price),
        start_date=parse_date(start_date),
        end_date=parse_date(end_date),
        category=category_filter,
        sort_by=key,
        descending=descending,
        page=page_number,
        page_size=size,
        paginate=paginate,
    )


def run_expense_query(db: "Database", query: ExpenseQuery) -> ExpensePage:
    rows, total = db.query_expenses(query)
    return ExpensePage(
        items=[ExpenseOut.from_row(r) for r in rows],
        total_count=total,
        page=query.page,
        page_size=query.page_size,
        paginated=query.paginate,
    )
