"""Tests for the period-series builder."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

from factories import EUR, JPY, USD, make_record
from ledger_reports.domain.models import BalanceSnapshot, PeriodAmount
from ledger_reports.domain.services import (
    EARNED,
    SPENT,
    PeriodSeriesBuilder,
    Step,
)


def _snapshot(day: int, balance: str, currency=EUR):
    return BalanceSnapshot(
        date=datetime(2024, 1, day, 23, 59, 59),
        currency=currency,
        balance=Decimal(balance),
    )


def test_balance_gap_fill_carries_forward(native_policy) -> None:
    """Days between snapshots repeat the last known balance."""
    builder = PeriodSeriesBuilder(native_policy)

    series = builder.balance_series(
        [_snapshot(10, "150"), _snapshot(1, "100")],
        datetime(2024, 1, 1),
        datetime(2024, 1, 15),
        Step.DAY,
    )

    entries = series[EUR.id].entries
    assert len(entries) == 15
    assert all(entries[f"2024-01-{day:02d}"] == "100.00" for day in range(1, 10))
    assert all(entries[f"2024-01-{day:02d}"] == "150.00" for day in range(10, 16))
    assert series[EUR.id].pc_entries == {}


def test_balance_before_range_and_unknown_currency(native_policy) -> None:
    """Earlier snapshots seed the range; currencies start at zero."""
    builder = PeriodSeriesBuilder(native_policy)

    series = builder.balance_series(
        [
            _snapshot(2, "7", USD),
            BalanceSnapshot(datetime(2023, 12, 20), EUR, Decimal("42.5")),
        ],
        datetime(2024, 1, 1),
        datetime(2024, 1, 3),
        Step.DAY,
    )

    assert series[EUR.id].entries == {
        "2024-01-01": "42.50",
        "2024-01-02": "42.50",
        "2024-01-03": "42.50",
    }
    assert series[USD.id].entries == {
        "2024-01-01": "0.00",
        "2024-01-02": "7.00",
        "2024-01-03": "7.00",
    }


def test_balance_without_snapshots_reports_primary_zero(native_policy) -> None:
    """An empty history still yields a zero series in the primary currency."""
    series = PeriodSeriesBuilder(native_policy).balance_series(
        [], datetime(2024, 1, 1), datetime(2024, 3, 31), Step.MONTH
    )

    assert list(series) == [EUR.id]
    assert series[EUR.id].entries == {
        "2024-01": "0.00",
        "2024-02": "0.00",
        "2024-03": "0.00",
    }


def test_balance_converts_each_boundary(converting_policy, rate_resolver) -> None:
    """pc_entries hold the converted balance when converting."""
    series = PeriodSeriesBuilder(converting_policy).balance_series(
        [_snapshot(1, "100", USD)],
        datetime(2024, 1, 1),
        datetime(2024, 1, 2),
        Step.DAY,
        label="savings",
    )

    usd = series[USD.id]
    assert usd.label == "savings"
    assert usd.entries == {"2024-01-01": "100.00", "2024-01-02": "100.00"}
    assert usd.pc_entries == {"2024-01-01": "50.00", "2024-01-02": "50.00"}
    assert rate_resolver.rate.call_count == 2


def test_empty_range_gives_empty_series(native_policy) -> None:
    """start > end produces no series at all."""
    builder = PeriodSeriesBuilder(native_policy)
    start, end = datetime(2024, 2, 1), datetime(2024, 1, 1)

    assert builder.balance_series([_snapshot(1, "1")], start, end, Step.DAY) == {}
    assert builder.flow_series([], start, end, Step.DAY) == {}


def test_flow_series_rounds_once_per_entry(native_policy) -> None:
    """Period sums are exact and rounded only when emitted."""
    day = datetime(2024, 1, 5)
    amounts = [
        PeriodAmount(day, EUR, Decimal("-10.00")),
        PeriodAmount(day, EUR, Decimal("-20.005")),
        PeriodAmount(day, EUR, Decimal("-5.00")),
        PeriodAmount(datetime(2024, 1, 20), EUR, Decimal("0.004")),
        PeriodAmount(datetime(2024, 1, 21), EUR, Decimal("0.004")),
    ]

    series = PeriodSeriesBuilder(native_policy).flow_series(
        amounts, datetime(2024, 1, 1), datetime(2024, 1, 31), Step.WEEK
    )

    assert series[EUR.id].entries == {
        "2024-W01": "-35.01",
        "2024-W02": "0.00",
        "2024-W03": "0.01",
        "2024-W04": "0.00",
        "2024-W05": "0.00",
    }


def test_flow_series_uses_currency_decimal_places(converting_policy) -> None:
    """Entries follow their own currency; pc entries the primary one."""
    amounts = [
        PeriodAmount(
            datetime(2024, 1, 1), JPY, Decimal("-1234.5"), Decimal("-7.777")
        ),
    ]

    series = PeriodSeriesBuilder(converting_policy).flow_series(
        amounts,
        datetime(2024, 1, 1),
        datetime(2024, 1, 1),
        Step.DAY,
        currencies=[EUR],
        label="spent",
    )

    assert series[JPY.id].entries == {"2024-01-01": "-1235"}
    assert series[JPY.id].pc_entries == {"2024-01-01": "-7.78"}
    assert series[EUR.id].entries == {"2024-01-01": "0.00"}
    assert list(series) == [EUR.id, JPY.id]


def test_income_expense_split_by_direction(native_policy) -> None:
    """Deposits and incoming transfers are earned; the rest is spent."""
    records = [
        make_record(
            1,
            "100.00",
            transaction_type="Deposit",
            source=(30, "Employer"),
            destination=(10, "Checking"),
        ),
        make_record(2, "30.00", transaction_type="Withdrawal"),
        make_record(
            3, "25.00", transaction_type="Transfer", destination=(11, "Savings")
        ),
        make_record(
            4,
            "5.00",
            transaction_type="Transfer",
            source=(11, "Savings"),
            destination=(10, "Checking"),
        ),
        make_record(5, "12.00", currency=USD, date=datetime(2024, 2, 3)),
    ]
    logger = MagicMock()

    builder = PeriodSeriesBuilder(native_policy, logger=logger)
    datasets = builder.income_expense_datasets(
        records, [10], datetime(2024, 1, 1), datetime(2024, 2, 29), "1M"
    )

    assert [(d.label, d.series.currency.code) for d in datasets] == [
        (EARNED, "EUR"),
        (SPENT, "EUR"),
        (EARNED, "USD"),
        (SPENT, "USD"),
    ]
    earned_eur, spent_eur, earned_usd, spent_usd = datasets
    assert earned_eur.series.entries == {"2024-01": "105.00", "2024-02": "0.00"}
    assert spent_eur.series.entries == {"2024-01": "-55.00", "2024-02": "0.00"}
    assert earned_usd.series.entries == {"2024-01": "0.00", "2024-02": "0.00"}
    assert spent_usd.series.entries == {"2024-01": "0.00", "2024-02": "-12.00"}
    assert all(d.period == "1M" and d.chart_type == "line" for d in datasets)
    logger.debug.assert_called_once()


def test_income_expense_primary_entries(converting_policy) -> None:
    """When converting every dataset carries primary currency entries."""
    records = [
        make_record(1, "12.00", currency=USD),
        make_record(
            2, "3.00", transaction_type="Deposit", destination=(10, "Checking")
        ),
    ]

    datasets = PeriodSeriesBuilder(converting_policy).income_expense_datasets(
        records, [10], datetime(2024, 1, 1), datetime(2024, 1, 31), Step.MONTH
    )

    by_key = {(d.label, d.series.currency.code): d for d in datasets}
    assert by_key[(SPENT, "USD")].series.entries == {"2024-01": "-12.00"}
    assert by_key[(SPENT, "USD")].series.pc_entries == {"2024-01": "-6.00"}
    assert by_key[(EARNED, "EUR")].series.pc_entries == {"2024-01": "3.00"}
    payload = by_key[(SPENT, "USD")].to_dict()
    assert payload["label"] == SPENT
    assert payload["type"] == "line"
    assert payload["currency_code"] == "USD"
    assert payload["primary_currency_code"] == "EUR"
    assert payload["start_date"] == "2024-01-01T00:00:00"


def test_income_expense_always_includes_primary(native_policy) -> None:
    """No records still gives the primary currency's pair of datasets."""
    datasets = PeriodSeriesBuilder(native_policy).income_expense_datasets(
        [], [10], datetime(2024, 1, 1), datetime(2024, 1, 2), Step.DAY
    )

    assert [(d.label, d.series.currency.code) for d in datasets] == [
        (EARNED, "EUR"),
        (SPENT, "EUR"),
    ]
