"""Data Access Layer for expense records.

Responsibilities
----------------
- Hand out explicit read-only (``reader``) and read-write (``writer``)
  connection scopes; there is no session or change tracking shared between
  calls.
- Translate a normalized ``ExpenseQuery`` into one COUNT and one SELECT.
- Perform single-statement creates, full replacements and deletes, each
  committed atomically.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import sqlite3
from typing import Any, Dict, Iterator, List, Optional, Tuple

from expense_tracker.models import ExpenseIn, SORT_COLUMNS
from expense_tracker.services.expense_query import ExpenseQuery
from expense_tracker.services.money import lower_bound_cents, to_storage, upper_bound_cents

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"


class Database:
    def __init__(self, db_path: Path, timeout: float = 5.0):
        self.db_path = Path(db_path)
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self, readonly: bool = False) -> sqlite3.Connection:
        if readonly:
            uri = self.db_path.resolve().as_uri() + "?mode=ro"
            conn = sqlite3.connect(uri, uri=True, timeout=self.timeout)
        else:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def reader(self) -> Iterator[sqlite3.Cursor]:
        """Read-only cursor; any write attempt fails at the SQLite level."""
        conn = self._connect(readonly=True)
        try:
            yield conn.cursor()
        finally:
            conn.close()

    @contextmanager
    def writer(self) -> Iterator[sqlite3.Cursor]:
        """Read-write cursor committed on success, rolled back on error."""
        conn = self._connect()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Reads
    def ping(self) -> bool:
        with self.reader() as cur:
            cur.execute("SELECT 1")
            return cur.fetchone()[0] == 1

    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self.reader() as cur:
            cur.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def expense_exists(self, expense_id: int) -> bool:
        with self.reader() as cur:
            cur.execute("SELECT 1 FROM expenses WHERE id = ?", (expense_id,))
            return cur.fetchone() is not None

    def query_expenses(self, query: ExpenseQuery) -> Tuple[List[Dict[str, Any]], int]:
        """Return (rows, total_count) for a normalized query.

        ``total_count`` counts every filtered row; ``rows`` is the requested
        page, or all filtered rows when the query is not paginated.
        """
        clauses: List[str] = []
        params: List[Any] = []
        if query.min_price is not None:
            clauses.append("amount_cents >= ?")
            params.append(lower_bound_cents(query.min_price))
        if query.max_price is not None:
            clauses.append("amount_cents <= ?")
            params.append(upper_bound_cents(query.max_price))
        if query.start_date is not None:
            clauses.append("date >= ?")
            params.append(query.start_date.isoformat())
        if query.end_date is not None:
            clauses.append("date <= ?")
            params.append(query.end_date.isoformat())
        if query.category is not None:
            clauses.append("category = ?")
            params.append(query.category)
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""

        column = SORT_COLUMNS[query.sort_by]
        direction = "DESC" if query.descending else "ASC"
        # id breaks ties in the same direction so asc/desc are exact mirrors
        order_by = f" ORDER BY {column} {direction}, id {direction}"

        with self.reader() as cur:
            cur.execute(f"SELECT COUNT(*) FROM expenses{where}", params)
            row = cur.fetchone()
            total = int(row[0] if row and row[0] is not None else 0)

            sql = f"SELECT * FROM expenses{where}{order_by}"
            page_params = list(params)
            if query.paginate:
                if query.offset >= total:
                    return [], total
                sql += " LIMIT ? OFFSET ?"
                page_params.extend([query.page_size, query.offset])
            cur.execute(sql, page_params)
            return [dict(r) for r in cur.fetchall()], total

    # ------------------------------------------------------------------
    # Writes
    def insert_expense(self, expense: ExpenseIn) -> int:
        with self.writer() as cur:
            cur.execute(
                f"""
                INSERT INTO expenses (name, amount_cents, date, category, created_at, updated_at)
                VALUES (?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (
                    expense.name,
                    to_storage(expense.amount),
                    expense.date.isoformat(),
                    expense.category,
                ),
            )
            return int(cur.lastrowid)

    def replace_expense(self, expense_id: int, expense: ExpenseIn) -> bool:
        """Overwrite every mutable column; False when the row is gone."""
        with self.writer() as cur:
            cur.execute(
                f"""
                UPDATE expenses
                SET name = ?, amount_cents = ?, date = ?, category = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (
                    expense.name,
                    to_storage(expense.amount),
                    expense.date.isoformat(),
                    expense.category,
                    expense_id,
                ),
            )
            return cur.rowcount > 0

    def delete_expense(self, expense_id: int) -> bool:
        with self.writer() as cur:
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            return cur.rowcount > 0
