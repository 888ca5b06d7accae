from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from expense_tracker.core.config import Settings
from expense_tracker.db.dal import Database
from expense_tracker.db.migrate import apply_migrations
from expense_tracker.main import create_app
from expense_tracker.models.expense import ExpenseIn
from expense_tracker.services.expense_validation import ExpenseValidator


@pytest.fixture()
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Build isolated settings over ``tmp_path``; each call gets its own DB file."""
    counter = iter(range(1_000))

    def _make(**overrides) -> Settings:
        settings = Settings(
            _env_file=None,
            data_dir=tmp_path,
            db_filename=f"test-{next(counter)}.sqlite3",
            **overrides,
        )
        settings.init_post_load()
        return settings

    return _make


@pytest.fixture()
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture()
def db(settings: Settings) -> Database:
    apply_migrations(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture()
def validator(settings: Settings) -> ExpenseValidator:
    return ExpenseValidator(settings.allowed_categories)


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings_override=settings)
    with TestClient(app) as test_client:
        yield test_client


def expense(name: str, amount: str, day: date, category: str = "Food") -> ExpenseIn:
    return ExpenseIn(name=name, amount=Decimal(amount), date=day, category=category)


@pytest.fixture()
def add_expense(db: Database) -> Callable[..., int]:
    def _add(name: str, amount: str, day: date, category: str = "Food") -> int:
        return db.insert_expense(expense(name, amount, day, category))

    return _add


@pytest.fixture()
def coffee_and_rent(db: Database, add_expense) -> Database:
    """Coffee (id 1) and Rent (id 2) as in the documented scenario."""
    add_expense("Coffee", "4.50", date(2024, 1, 5), "Food")
    add_expense("Rent", "1200", date(2024, 1, 1), "Housing")
    return db


@pytest.fixture()
def count_expenses(db: Database) -> Callable[[], int]:
    def _count() -> int:
        with db.reader() as cur:
            cur.execute("SELECT COUNT(*) FROM expenses")
            return int(cur.fetchone()[0])

    return _count
