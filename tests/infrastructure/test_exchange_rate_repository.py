"""Tests for the stored exchange rate source."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from factories import EUR, USD
from ledger_reports.domain.errors import RateLookupError
from ledger_reports.infrastructure.exchange_rate_repository import (
    SqlAlchemyExchangeRateSource,
)


def _db_port(conn):
    engine = MagicMock()
    engine.connect.return_value.__enter__.return_value = conn
    db_port = MagicMock()
    db_port.get_ledger_engine.return_value = engine
    return db_port


def test_fetch_rate_returns_decimal() -> None:
    """The latest stored rate is returned as a Decimal."""
    conn = MagicMock()
    conn.execute.return_value.first.return_value = SimpleNamespace(rate="1.0850")
    source = SqlAlchemyExchangeRateSource(_db_port(conn))

    rate = source.fetch_rate(EUR, USD, date(2024, 1, 5))

    assert rate == Decimal("1.0850")
    assert conn.execute.call_args.args[1] == {
        "from_id": EUR.id,
        "to_id": USD.id,
        "on": date(2024, 1, 5),
    }


def test_fetch_rate_returns_none_without_row() -> None:
    """Pairs without stored rates return None."""
    conn = MagicMock()
    conn.execute.return_value.first.return_value = None
    source = SqlAlchemyExchangeRateSource(_db_port(conn))

    assert source.fetch_rate(EUR, USD, date(2024, 1, 5)) is None


def test_fetch_rate_wraps_database_errors() -> None:
    """Driver failures surface as RateLookupError."""
    conn = MagicMock()
    conn.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
    source = SqlAlchemyExchangeRateSource(_db_port(conn))

    with pytest.raises(RateLookupError, match="EUR/USD"):
        source.fetch_rate(EUR, USD, date(2024, 1, 5))
