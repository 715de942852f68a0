"""Tests for the SQLAlchemy balance history."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from factories import EUR, USD
from ledger_reports.infrastructure.balance_history_repository import (
    SqlAlchemyBalanceHistory,
)


def test_fetch_balance_snapshots_keeps_running_totals() -> None:
    """Daily sums accumulate into a running balance per currency."""
    rows = [
        SimpleNamespace(day=date(2024, 1, 1), currency_id=1, amount="100.00"),
        SimpleNamespace(day="2024-01-02", currency_id=2, amount=Decimal("5")),
        SimpleNamespace(
            day=datetime(2024, 1, 3), currency_id=1, amount=Decimal("-30.25")
        ),
    ]
    conn = MagicMock()
    conn.execute.return_value.all.return_value = rows
    engine = MagicMock()
    engine.connect.return_value.__enter__.return_value = conn
    db_port = MagicMock()
    db_port.get_ledger_engine.return_value = engine
    directory = MagicMock()
    directory.find_by_id.side_effect = {1: EUR, 2: USD}.get
    end = datetime(2024, 1, 31, 23, 59, 59)

    snapshots = SqlAlchemyBalanceHistory(db_port, directory).fetch_balance_snapshots(
        5, end
    )

    assert conn.execute.call_args.args[1] == {"account_id": 5, "end_date": end}
    assert [(s.currency.code, s.balance) for s in snapshots] == [
        ("EUR", Decimal("100.00")),
        ("USD", Decimal("5")),
        ("EUR", Decimal("69.75")),
    ]
    assert snapshots[0].date == datetime(2024, 1, 1, 23, 59, 59, 999999)
    assert snapshots[1].date == datetime(2024, 1, 2, 23, 59, 59, 999999)
