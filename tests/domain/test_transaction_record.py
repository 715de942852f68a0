"""Tests for the transaction record contract."""

from datetime import date
from decimal import Decimal

import pytest

from factories import EUR, JPY, USD, make_record
from ledger_reports.domain.errors import DataIntegrityError
from ledger_reports.domain.models import TagRef, TransactionType


def test_record_parses_amounts_and_type() -> None:
    """String amounts become Decimals and the type becomes an enum."""
    record = make_record(
        amount="20.005",
        transaction_type="Deposit",
        primary_converted_amount="18.1",
    )

    assert record.amount == Decimal("20.005")
    assert str(record.amount) == "20.005"
    assert record.transaction_type is TransactionType.DEPOSIT
    assert record.primary_converted_amount == Decimal("18.1")


def test_record_exposes_currencies() -> None:
    """Currency properties rebuild the native and foreign currencies."""
    record = make_record(currency=USD, foreign=("1500", JPY))

    assert record.currency == USD
    assert record.foreign_currency == JPY
    assert record.has_foreign_leg is True
    assert record.foreign_amount == Decimal("1500")


def test_record_without_foreign_leg() -> None:
    """A record without a second leg reports no foreign currency."""
    record = make_record()

    assert record.foreign_currency is None
    assert record.has_foreign_leg is False


def test_record_has_tag() -> None:
    """has_tag should look the tag up by id."""
    record = make_record(tags=[TagRef(7, "holiday"), TagRef(8, "family")])

    assert record.tags == (TagRef(7, "holiday"), TagRef(8, "family"))
    assert record.has_tag(8)
    assert not record.has_tag(9)


def test_missing_required_field_is_fatal() -> None:
    """A missing journal id breaks the record contract."""
    with pytest.raises(DataIntegrityError, match="journal_id"):
        make_record(journal_id=None)


@pytest.mark.parametrize("amount", ["abc", 12.5, None, "NaN"])
def test_invalid_amount_is_fatal(amount) -> None:
    """Amounts must be finite decimals given as text or Decimal."""
    with pytest.raises(DataIntegrityError, match="amount"):
        make_record(amount=amount)


def test_unknown_type_is_fatal() -> None:
    """Transaction types outside the ledger vocabulary are rejected."""
    with pytest.raises(DataIntegrityError, match="transaction_type"):
        make_record(transaction_type="Liability credit")


def test_date_must_be_a_datetime() -> None:
    """Plain dates are not accepted as record dates."""
    with pytest.raises(DataIntegrityError, match="date"):
        make_record(date=date(2024, 1, 5))


def test_foreign_amount_without_currency_is_fatal() -> None:
    """A foreign amount needs a foreign currency and vice versa."""
    with pytest.raises(DataIntegrityError, match="inconsistent"):
        make_record(foreign_amount="5.00")
    with pytest.raises(DataIntegrityError, match="inconsistent"):
        make_record(foreign_currency_id=EUR.id, foreign_currency_code="EUR")
