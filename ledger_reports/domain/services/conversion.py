"""Per-request currency conversion policy."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from logging import Logger
from typing import Protocol

from ledger_reports.domain.errors import RateLookupError
from ledger_reports.domain.models import Currency, TransactionRecord
from ledger_reports.utils.decimal_utils import ONE, multiply_exact


class RateResolver(Protocol):
    """Anything able to produce a conversion rate for a date."""

    def rate(self, source: Currency, target: Currency, on: datetime) -> Decimal:
        """Return the rate, raising RateLookupError when unknown."""


@dataclass(frozen=True)
class AmountLeg:
    """An unsigned amount attributed to a currency."""

    currency: Currency
    amount: Decimal


@dataclass(frozen=True)
class ConversionPolicy:
    """Decide which currency and which amount field a record contributes.

    Built once per request and passed explicitly to the aggregator and the
    period-series builder.

    Attributes:
        primary_currency: Home currency of the user for this request.
        convert_to_primary: Whether amounts are expressed in the primary
            currency.
        rate_resolver: Rate source used when a record carries no
            precomputed primary amount. Only consulted when converting.
        logger: Logger receiving rate fallback warnings.
    """

    primary_currency: Currency
    convert_to_primary: bool = False
    rate_resolver: RateResolver | None = None
    logger: Logger | None = None

    def ignore_settings(self) -> "ConversionPolicy":
        """Return a copy that always reports native amounts."""
        return self.with_conversion(False)

    def with_conversion(self, convert_to_primary: bool) -> "ConversionPolicy":
        """Return a copy with the conversion flag overridden."""
        return replace(self, convert_to_primary=convert_to_primary)

    def resolve(
        self,
        record: TransactionRecord,
        include_foreign: bool = True,
    ) -> list[AmountLeg]:
        """Return the currency/amount legs a record contributes.

        Args:
            record: Transaction record to resolve.
            include_foreign: Whether a foreign leg adds its own contribution
                when amounts are not converted.

        Returns:
            list[AmountLeg]: One leg, or two for a foreign leg in another
            currency reported in native mode.
        """
        if not self.convert_to_primary:
            legs = [AmountLeg(record.currency, record.amount)]
            if (
                include_foreign
                and record.has_foreign_leg
                and record.foreign_currency_id != record.currency_id
            ):
                legs.append(
                    AmountLeg(record.foreign_currency, record.foreign_amount)
                )
            return legs

        if record.currency_id == self.primary_currency.id:
            return [AmountLeg(record.currency, record.amount)]
        return [AmountLeg(self.primary_currency, self.primary_amount(record))]

    def primary_amount(self, record: TransactionRecord) -> Decimal:
        """Return the record amount expressed in the primary currency.

        Prefers the native amount when it already is in the primary currency,
        then the foreign amount, then the precomputed converted amount, and
        finally converts on the fly with the rate of ``record.date``.
        """
        if record.currency_id == self.primary_currency.id:
            return record.amount
        if record.foreign_currency_id == self.primary_currency.id:
            return record.foreign_amount
        if record.primary_converted_amount is not None:
            return record.primary_converted_amount
        rate = self.rate(record.currency, record.date)
        return multiply_exact(record.amount, rate)

    def convert(
        self,
        amount: Decimal,
        currency: Currency,
        on: datetime,
    ) -> Decimal:
        """Convert an amount in ``currency`` into the primary currency."""
        if currency.id == self.primary_currency.id:
            return amount
        return multiply_exact(amount, self.rate(currency, on))

    def rate(self, currency: Currency, on: datetime) -> Decimal:
        """Return the rate to the primary currency, falling back to 1."""
        if currency.id == self.primary_currency.id:
            return ONE
        if self.rate_resolver is None:
            self._warn(
                f"No rate resolver configured, using rate 1 for "
                f"{currency.code} to {self.primary_currency.code}"
            )
            return ONE
        try:
            return self.rate_resolver.rate(currency, self.primary_currency, on)
        except RateLookupError as exc:
            self._warn(f"{exc}. Falling back to rate 1.")
            return ONE

    def _warn(self, message: str) -> None:
        if self.logger is not None:
            self.logger.warning(message)


__all__ = ["AmountLeg", "ConversionPolicy", "RateResolver"]
