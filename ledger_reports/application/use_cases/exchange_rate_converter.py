"""Request-scoped exchange rate resolution with caching."""

from datetime import date, datetime
from decimal import Decimal

from ledger_reports.application.ports.currency_directory import (
    CurrencyDirectoryPort,
)
from ledger_reports.application.ports.exchange_rates import (
    ExchangeRateSourcePort,
)
from ledger_reports.domain.constants import DEFAULT_PIVOT_CURRENCY
from ledger_reports.domain.errors import (
    DataIntegrityError,
    RateLookupError,
    missing_rate,
)
from ledger_reports.domain.models import Currency
from ledger_reports.infrastructure.logging.logger import get_app_logger
from ledger_reports.utils.decimal_utils import ONE, multiply_exact


class ExchangeRateResolver:
    """Resolve conversion rates, memoizing every (pair, date) lookup.

    Rates are looked up directly, then through the inverse pair, then
    through a pivot currency. One instance serves a single request; create
    a new one (or call ``clear``) to avoid stale rates.
    """

    def __init__(
        self,
        rate_source: ExchangeRateSourcePort,
        currency_directory: CurrencyDirectoryPort,
        logger=None,
        pivot_code: str = DEFAULT_PIVOT_CURRENCY,
    ) -> None:
        """Initialize the resolver.

        Args:
            rate_source: Port providing stored exchange rates.
            currency_directory: Port used to resolve the pivot currency.
            logger: Optional logger compatible with logging.Logger-like API.
            pivot_code: ISO code of the currency used for cross rates.
        """
        self._rate_source = rate_source
        self._currency_directory = currency_directory
        self._logger = logger or get_app_logger()
        self._pivot_code = pivot_code
        self._pivot: Currency | None = None
        self._cache: dict[tuple[int, int, date], Decimal | None] = {}
        self._hits = 0
        self._queries = 0

    def rate(self, source: Currency, target: Currency, on: datetime) -> Decimal:
        """Return the rate converting ``source`` amounts into ``target``.

        Args:
            source: Currency of the amount.
            target: Currency to convert into.
            on: Effective date of the conversion.

        Returns:
            Decimal: Conversion rate, ``1`` when both currencies are equal.

        Raises:
            RateLookupError: When no direct, inverse or cross rate exists.
        """
        if source.id == target.id:
            return ONE
        day = on.date() if isinstance(on, datetime) else on
        key = (source.id, target.id, day)
        if key in self._cache:
            self._hits += 1
            cached = self._cache[key]
        else:
            cached = self._cache.setdefault(key, self._resolve(source, target, day))
        if cached is None:
            raise RateLookupError(missing_rate(source.code, target.code, day))
        return cached

    def summarize(self) -> dict[str, int]:
        """Log and return cache statistics for the request."""
        missing = sum(1 for value in self._cache.values() if value is None)
        stats = {
            "cached": len(self._cache),
            "missing": missing,
            "hits": self._hits,
            "queries": self._queries,
        }
        self._logger.debug(
            f"Exchange rates: {stats['cached']} pairs cached "
            f"({stats['missing']} missing), {stats['hits']} cache hits, "
            f"{stats['queries']} source queries"
        )
        return stats

    def clear(self) -> None:
        """Forget all cached rates and statistics."""
        self._cache.clear()
        self._hits = 0
        self._queries = 0

    def _resolve(
        self,
        source: Currency,
        target: Currency,
        day: date,
    ) -> Decimal | None:
        rate = self._pair_rate(source, target, day)
        if rate is not None:
            return rate
        pivot = self._pivot_currency()
        if pivot is None or pivot.id in (source.id, target.id):
            return None
        to_pivot = self._pair_rate(source, pivot, day)
        from_pivot = self._pair_rate(pivot, target, day)
        if to_pivot is None or from_pivot is None:
            return None
        return multiply_exact(to_pivot, from_pivot)

    def _pair_rate(
        self,
        source: Currency,
        target: Currency,
        day: date,
    ) -> Decimal | None:
        direct = self._fetch(source, target, day)
        if direct is not None and not direct.is_zero():
            return direct
        inverse = self._fetch(target, source, day)
        if inverse is not None and not inverse.is_zero():
            return ONE / inverse
        return None

    def _fetch(
        self,
        source: Currency,
        target: Currency,
        day: date,
    ) -> Decimal | None:
        self._queries += 1
        return self._rate_source.fetch_rate(source, target, day)

    def _pivot_currency(self) -> Currency | None:
        if self._pivot is None:
            try:
                self._pivot = self._currency_directory.find_by_code(
                    self._pivot_code
                )
            except DataIntegrityError:
                self._logger.warning(
                    f"Pivot currency {self._pivot_code} is unknown, "
                    "cross rates are disabled"
                )
                return None
        return self._pivot


__all__ = ["ExchangeRateResolver"]
