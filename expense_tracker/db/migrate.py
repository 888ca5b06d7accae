"""Database migration utilities.

The schema version is an integer stored under ``schema_version`` in the
metadata table. ``apply_migrations`` brings a database file up to
``CURRENT_SCHEMA_VERSION`` in place and refuses to touch a file written by a
newer release.

Versions:
  1: amounts stored as REAL in ``expenses.amount``
  2: amounts stored as integer cents in ``expenses.amount_cents``
"""

from __future__ import annotations
from pathlib import Path
import logging
import sqlite3
from typing import Optional

from . import schema as schema_def
from .schema import ensure_indexes, init_db

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schema_version"

logger = logging.getLogger("expense_tracker.db")


class SchemaVersionError(RuntimeError):
    """Database was created by a newer schema than this code understands."""


def get_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,))
        row = cur.fetchone()
        if row:
            return int(row[0])
    except sqlite3.OperationalError:
        # metadata table may not exist yet (first run before init_db)
        return None
    return None


def apply_migrations(db_path: Path) -> int:
    """Apply required migrations and return resulting schema version."""
    init_db(db_path)
    conn = sqlite3.connect(db_path)
    try:
        stored = get_schema_version(conn)
        if stored is not None and stored > CURRENT_SCHEMA_VERSION:
            raise SchemaVersionError(
                f"database schema version {stored} is newer than supported version {CURRENT_SCHEMA_VERSION}"
            )
        # A fresh file is created at the current version by init_db.
        version = stored or CURRENT_SCHEMA_VERSION
        if version < 2:
            _migrate_to_v2(conn)
            version = 2
        _set_schema_version(conn, version)
        conn.commit()
        if stored != version:
            logger.info(
                "database schema initialized",
                extra={"db_path": str(db_path), "schema_version": version},
            )
        return version
    finally:
        conn.close()


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    cur = conn.cursor()
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _migrate_to_v2(conn: sqlite3.Connection) -> None:
    """Upgrade schema to version 2 (integer-cent amounts)."""
    cur = conn.cursor()
    try:
        if not _column_exists(cur, "expenses", "amount_cents"):
            _rebuild_expenses(cur)
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def _rebuild_expenses(cur: sqlite3.Cursor) -> None:
    last_id = _sequence_value(cur, "expenses")
    cur.execute("ALTER TABLE expenses RENAME TO expenses_legacy")
    cur.execute(schema_def.EXPENSES_DDL)
    cur.execute(
        """
        INSERT INTO expenses (id, name, amount_cents, date, category, created_at, updated_at)
        SELECT id, name, CAST(ROUND(amount * 100) AS INTEGER), date, category, created_at, updated_at
        FROM expenses_legacy
        """
    )
    cur.execute("DROP TABLE expenses_legacy")
    ensure_indexes(cur)
    _restore_sequence(cur, "expenses", last_id)


def _sequence_value(cur: sqlite3.Cursor, table: str) -> int:
    cur.execute("SELECT seq FROM sqlite_sequence WHERE name=?", (table,))
    row = cur.fetchone()
    return int(row[0]) if row else 0


def _restore_sequence(cur: sqlite3.Cursor, table: str, last_id: int) -> None:
    # Deleted ids above MAX(id) must stay retired after the rebuild.
    if last_id <= _sequence_value(cur, table):
        return
    cur.execute("DELETE FROM sqlite_sequence WHERE name=?", (table,))
    cur.execute("INSERT INTO sqlite_sequence (name, seq) VALUES (?, ?)", (table, last_id))


def _column_exists(cur: sqlite3.Cursor, table: str, column: str) -> bool:
    cur.execute(f"PRAGMA table_info({table})")
    return any(row[1] == column for row in cur.fetchall())
