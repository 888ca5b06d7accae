"""Domain constants shared by settings, validation and the query engine.

The category tuple is only the default; the running application reads the
allowed set from ``Settings.allowed_categories``.
"""

from typing import Dict, Tuple

DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Bills",
    "Transportation",
    "Health",
    "Entertainment",
    "Shopping",
    "Education",
    "Housing",
    "Savings",
    "Investments",
    "Other",
)

PAGINATION_MODES: Tuple[str, ...] = ("paginated", "simple")

# Public sort key -> expenses column
SORT_COLUMNS: Dict[str, str] = {
    "name": "name",
    "amount": "amount_cents",
    "date": "date",
}
DEFAULT_SORT_KEY = "date"
