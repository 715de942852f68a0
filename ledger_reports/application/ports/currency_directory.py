"""Port for resolving currency metadata."""

from typing import Protocol

from ledger_reports.domain.models import Currency


class CurrencyDirectoryPort(Protocol):
    """Read-only lookup of currencies by id or ISO code.

    Implementations raise DataIntegrityError for unknown currencies.
    """

    def find_by_id(self, currency_id: int) -> Currency:
        """Return the currency with this id."""

    def find_by_code(self, code: str) -> Currency:
        """Return the currency with this ISO code."""


__all__ = ["CurrencyDirectoryPort"]
