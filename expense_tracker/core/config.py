from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.models.constants import DEFAULT_CATEGORIES, PAGINATION_MODES


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, PAGINATION_MODE). List values such as
    ALLOWED_CATEGORIES and CORS_ORIGINS are read as JSON arrays.
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Expense Tracker"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "expenses.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    db_timeout_seconds: float = 5.0

    # HTTP surface
    api_prefix: str = ""
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    gzip_minimum_size: int = 1000
    response_cache_seconds: int = 0  # 0 disables Cache-Control on expense reads
    categories_cache_seconds: int = 3600

    # Expense domain
    allowed_categories: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES)
    )

    # Listing behaviour: 'paginated' (slices + X-Total-* headers) or 'simple'
    pagination_mode: str = "paginated"
    default_page_size: int = 20
    max_page_size: int = 100

    def init_post_load(self) -> None:
        """Finalize derived fields and validate cross-field constraints."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.api_prefix = self.api_prefix.rstrip("/")
        if self.pagination_mode not in PAGINATION_MODES:
            raise ValueError(
                f"Unsupported pagination_mode '{self.pagination_mode}'. Allowed: {PAGINATION_MODES}"
            )
        if not self.allowed_categories:
            raise ValueError("allowed_categories cannot be empty")
        if len(set(self.allowed_categories)) != len(self.allowed_categories):
            raise ValueError("allowed_categories contains duplicates")
        if self.max_page_size < 1:
            raise ValueError("max_page_size must be at least 1")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                f"default_page_size must be between 1 and {self.max_page_size}"
            )

    @property
    def paginated(self) -> bool:
        return self.pagination_mode == "paginated"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
