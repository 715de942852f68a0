"""Tests for the BudgetOperationsUseCase."""

from datetime import datetime
from unittest.mock import MagicMock

from factories import EUR, JPY, USD, make_record
from ledger_reports.application.use_cases import BudgetOperationsUseCase

START = datetime(2024, 1, 1)
END = datetime(2024, 1, 31)


def _build_use_case(records, policy):
    repository = MagicMock()
    repository.fetch_transactions.return_value = records
    return BudgetOperationsUseCase(repository, policy, logger=MagicMock()), repository


def _daily(journal_id, amount, **kwargs):
    return make_record(journal_id, amount, budget_id=9, budget_name="Daily", **kwargs)


def test_collect_expenses_drops_unbudgeted(native_policy) -> None:
    """Only withdrawals with a budget are collected."""
    records = [_daily(1, "4.00"), make_record(2, "8.00")]
    use_case, repository = _build_use_case(records, native_policy)

    collected = use_case.collect_expenses(START, END, [10], [9], currency_id=2)

    query = repository.fetch_transactions.call_args.args[0]
    assert query.source_account_ids == (10,)
    assert query.budget_ids == (9,)
    assert query.currency_id == 2
    assert [record.journal_id for record in collected] == [1]


def test_list_expenses_groups_by_budget(native_policy) -> None:
    """Listings nest journals under currency then budget."""
    records = [_daily(1, "4.00"), _daily(2, "3.00", currency=USD)]
    use_case, _ = _build_use_case(records, native_policy)

    result = use_case.list_expenses(START, END)

    assert result[EUR.id].entities[9].name == "Daily"
    assert list(result[USD.id].entities[9].journals) == [2]


def test_sum_by_budget(native_policy) -> None:
    """Sums are keyed by budget and currency."""
    records = [
        _daily(1, "4.00"),
        _daily(2, "3.50"),
        make_record(3, "1.00", budget_id=10, budget_name="Travel"),
    ]
    use_case, _ = _build_use_case(records, native_policy)

    rows = use_case.sum_by_budget(START, END)

    assert [(row["id"], row["name"], row["sum"]) for row in rows] == [
        (9, "Daily", "-7.50"),
        (10, "Travel", "-1.00"),
    ]


def test_sum_expenses_includes_foreign_leg(native_policy) -> None:
    """Budget expense sums add foreign legs in native mode."""
    records = [_daily(1, "4.00", foreign=("600", JPY))]
    use_case, _ = _build_use_case(records, native_policy)

    rows = use_case.sum_expenses(START, END)

    assert [(row["currency_code"], row["sum"]) for row in rows] == [
        ("EUR", "-4.00"),
        ("JPY", "-600"),
    ]


def test_sum_collected_expenses_matches_native_or_foreign(native_policy) -> None:
    """A record qualifies through either currency; only its native leg counts."""
    records = [
        _daily(1, "4.00", foreign=("5.00", USD)),
        _daily(2, "6.00", currency=USD),
        _daily(3, "600", currency=JPY),
    ]
    use_case, _ = _build_use_case(records, native_policy)

    rows = use_case.sum_collected_expenses(records, USD.id)

    assert [(row["currency_code"], row["sum"]) for row in rows] == [
        ("EUR", "-4.00"),
        ("USD", "-6.00"),
    ]


def test_sum_collected_expenses_by_budget_converts(converting_policy) -> None:
    """Collected budget sums can be expressed in the primary currency."""
    records = [_daily(1, "4.00"), _daily(2, "6.00", currency=USD)]
    use_case, _ = _build_use_case(records, converting_policy)

    rows = use_case.sum_collected_expenses_by_budget(
        records, 9, convert_to_primary=True
    )

    assert [(row["currency_code"], row["sum"]) for row in rows] == [
        ("EUR", "-7.000")
    ]
