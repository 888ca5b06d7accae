"""Database schema DDL definitions and initialization utilities.

Tables:
  - expenses: individual expense records (AUTOINCREMENT so ids are never reused;
    amounts as integer cents)
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0),
    amount_cents INTEGER NOT NULL CHECK (amount_cents > 0),
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    category TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

# Lookup speed only; ordering/filter semantics do not depend on them.
INDEX_DDL: Sequence[str] = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);",
    "CREATE INDEX IF NOT EXISTS idx_expenses_category ON expenses(category);",
    "CREATE INDEX IF NOT EXISTS idx_expenses_amount ON expenses(amount_cents);",
)

DDL_ORDER: Sequence[str] = (
    EXPENSES_DDL,
    METADATA_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables and indexes idempotently.

    Parameters
    ----------
    path: Path to SQLite database file. Missing parent directories are created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        ensure_indexes(cur)
        conn.commit()
    finally:
        conn.close()


def ensure_indexes(cur: sqlite3.Cursor) -> None:
    """Create indexes, tolerating legacy tables missing indexed columns."""
    for ddl in INDEX_DDL:
        try:
            cur.execute(ddl)
        except sqlite3.OperationalError:
            # Legacy expenses table; the migration rebuilds it and retries.
            continue
