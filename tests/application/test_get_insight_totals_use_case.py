"""Tests for the GetInsightTotalsUseCase."""

from datetime import datetime
from unittest.mock import MagicMock

from factories import EUR, USD, make_record
from ledger_reports.application.use_cases import GetInsightTotalsUseCase
from ledger_reports.domain.models import TransactionType

START = datetime(2024, 1, 1)
END = datetime(2024, 1, 31, 23, 59, 59)


def _build_use_case(records, policy):
    repository = MagicMock()
    repository.fetch_transactions.return_value = records
    logger = MagicMock()
    use_case = GetInsightTotalsUseCase(repository, policy, logger=logger)
    return use_case, repository, logger


def test_expense_total_is_negative_per_currency(native_policy) -> None:
    """Expense totals are negative and ignore foreign legs."""
    records = [
        make_record(1, "10.00", foreign=("11.00", USD)),
        make_record(2, "20.005"),
        make_record(3, "5.00"),
        make_record(4, "2.00", currency=USD),
    ]
    use_case, repository, logger = _build_use_case(records, native_policy)

    rows = use_case.expense_total(START, END, [10])

    query = repository.fetch_transactions.call_args.args[0]
    assert query.types == (TransactionType.WITHDRAWAL,)
    assert query.source_account_ids == (10,)
    assert rows == [
        {
            "difference": "-35.005",
            "difference_float": -35.005,
            "currency_id": EUR.id,
            "currency_code": "EUR",
        },
        {
            "difference": "-2.00",
            "difference_float": -2.0,
            "currency_id": USD.id,
            "currency_code": "USD",
        },
    ]
    logger.info.assert_called_once()


def test_income_total_converts_to_primary(converting_policy) -> None:
    """With conversion on, income totals collapse into the primary currency."""
    records = [
        make_record(1, "10.00", transaction_type="Deposit"),
        make_record(
            2,
            "4.00",
            transaction_type="Deposit",
            currency=USD,
            primary_converted_amount="3.60",
        ),
    ]
    use_case, repository, _ = _build_use_case(records, converting_policy)

    rows = use_case.income_total(START, END, [10])

    query = repository.fetch_transactions.call_args.args[0]
    assert query.destination_account_ids == (10,)
    assert [(row["currency_code"], row["difference"]) for row in rows] == [
        ("EUR", "13.60")
    ]


def test_transfer_total_and_empty_result(native_policy) -> None:
    """Transfers are positive; no records means no rows."""
    use_case, repository, _ = _build_use_case([], native_policy)

    assert use_case.transfer_total(START, END, [10]) == []
    query = repository.fetch_transactions.call_args.args[0]
    assert query.types == (TransactionType.TRANSFER,)
    assert query.destination_account_ids == (10,)
