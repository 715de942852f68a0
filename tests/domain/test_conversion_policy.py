"""Tests for the per-request conversion policy."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

from factories import EUR, JPY, USD, make_record
from ledger_reports.domain.errors import RateLookupError
from ledger_reports.domain.services import AmountLeg, ConversionPolicy


def test_native_mode_returns_native_leg(native_policy) -> None:
    """Without conversion a record contributes its native amount."""
    legs = native_policy.resolve(make_record(amount="10.00"))

    assert legs == [AmountLeg(EUR, Decimal("10.00"))]


def test_native_mode_adds_foreign_leg(native_policy) -> None:
    """A foreign leg adds a second contribution in its own currency."""
    record = make_record(amount="10.00", foreign=("11.00", USD))

    assert native_policy.resolve(record) == [
        AmountLeg(EUR, Decimal("10.00")),
        AmountLeg(USD, Decimal("11.00")),
    ]
    assert native_policy.resolve(record, include_foreign=False) == [
        AmountLeg(EUR, Decimal("10.00")),
    ]


def test_primary_native_never_consults_resolver(
    converting_policy,
    rate_resolver,
) -> None:
    """Records already in the primary currency skip rate lookups."""
    record = make_record(amount="10.00", foreign=("11.00", USD))

    legs = converting_policy.resolve(record)

    assert legs == [AmountLeg(EUR, Decimal("10.00"))]
    rate_resolver.rate.assert_not_called()


def test_foreign_primary_leg_is_preferred(
    converting_policy,
    rate_resolver,
) -> None:
    """A foreign amount in the primary currency beats any conversion."""
    record = make_record(
        amount="12.00",
        currency=USD,
        foreign=("9.00", EUR),
        primary_converted_amount="8.00",
    )

    assert converting_policy.resolve(record) == [AmountLeg(EUR, Decimal("9.00"))]
    rate_resolver.rate.assert_not_called()


def test_precomputed_primary_amount_is_used(
    converting_policy,
    rate_resolver,
) -> None:
    """The stored converted amount is used before the resolver."""
    record = make_record(
        amount="12.00",
        currency=USD,
        primary_converted_amount="8.50",
    )

    assert converting_policy.resolve(record) == [AmountLeg(EUR, Decimal("8.50"))]
    rate_resolver.rate.assert_not_called()


def test_resolver_converts_at_record_date(
    converting_policy,
    rate_resolver,
) -> None:
    """Without a stored amount the resolver rate of the record date applies."""
    record = make_record(amount="12.00", currency=USD, foreign=("1800", JPY))

    legs = converting_policy.resolve(record)

    assert legs == [AmountLeg(EUR, Decimal("6.00"))]
    rate_resolver.rate.assert_called_once_with(USD, EUR, record.date)


def test_rate_failure_falls_back_to_one(converting_policy, rate_resolver) -> None:
    """A failed lookup converts at rate 1 and logs a warning every time."""
    rate_resolver.rate.side_effect = RateLookupError("No exchange rate")
    record = make_record(amount="12.00", currency=USD)

    first = converting_policy.resolve(record)
    second = converting_policy.resolve(record)

    assert first == second == [AmountLeg(EUR, Decimal("12.00"))]
    assert converting_policy.logger.warning.call_count == 2


def test_missing_resolver_falls_back_to_one() -> None:
    """A converting policy without resolver uses rate 1 with a warning."""
    logger = MagicMock()
    policy = ConversionPolicy(EUR, convert_to_primary=True, logger=logger)

    assert policy.rate(USD, datetime(2024, 1, 5)) == Decimal("1")
    logger.warning.assert_called_once()


def test_ignore_settings_returns_native_copy(converting_policy) -> None:
    """ignore_settings should not alter the original policy."""
    native = converting_policy.ignore_settings()

    assert native.convert_to_primary is False
    assert native.primary_currency == EUR
    assert converting_policy.convert_to_primary is True
    assert converting_policy.with_conversion(True) == converting_policy


def test_convert_short_circuits_primary(converting_policy, rate_resolver) -> None:
    """Converting a primary amount returns it unchanged."""
    on = datetime(2024, 1, 5)

    assert converting_policy.convert(Decimal("3.10"), EUR, on) == Decimal("3.10")
    assert converting_policy.convert(Decimal("3.10"), USD, on) == Decimal("1.55")
    rate_resolver.rate.assert_called_once_with(USD, EUR, on)
