"""Domain constants for ledger reporting."""

NO_CATEGORY_NAME = "No category"

DEFAULT_PRIMARY_CURRENCY = "EUR"
DEFAULT_PIVOT_CURRENCY = "EUR"

TOP_ACCOUNTS_LIMIT = 10


__all__ = [
    "DEFAULT_PIVOT_CURRENCY",
    "DEFAULT_PRIMARY_CURRENCY",
    "NO_CATEGORY_NAME",
    "TOP_ACCOUNTS_LIMIT",
]
