from __future__ import annotations

import pytest

from expense_tracker.core.config import Settings
from expense_tracker.models.constants import DEFAULT_CATEGORIES


def test_defaults(settings, tmp_path):
    assert settings.db_path.parent == tmp_path
    assert settings.allowed_categories == list(DEFAULT_CATEGORIES)
    assert settings.paginated is True
    assert settings.default_page_size == 20
    assert settings.max_page_size == 100


def test_categories_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ALLOWED_CATEGORIES", '["Pets", "Garden"]')
    monkeypatch.setenv("PAGINATION_MODE", "simple")
    settings = Settings(_env_file=None, data_dir=tmp_path)
    settings.init_post_load()
    assert settings.allowed_categories == ["Pets", "Garden"]
    assert settings.paginated is False
    assert settings.db_path == tmp_path / "expenses.sqlite3"


@pytest.mark.parametrize(
    "overrides",
    [
        {"pagination_mode": "infinite"},
        {"allowed_categories": []},
        {"allowed_categories": ["Food", "Food"]},
        {"default_page_size": 0},
        {"default_page_size": 150},
    ],
)
def test_invalid_combinations_are_rejected(make_settings, overrides):
    with pytest.raises(ValueError):
        make_settings(**overrides)


def test_api_prefix_trailing_slash_is_dropped(make_settings):
    assert make_settings(api_prefix="/api/").api_prefix == "/api"
