"""Port for stored exchange rates."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from ledger_reports.domain.models import Currency


class ExchangeRateSourcePort(Protocol):
    """Port exposing the most recent stored rate for a currency pair."""

    def fetch_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        on: date,
    ) -> Decimal | None:
        """Return the latest rate dated on or before ``on``, if any.

        Raises:
            RateLookupError: When the source cannot be queried.
        """


__all__ = ["ExchangeRateSourcePort"]
