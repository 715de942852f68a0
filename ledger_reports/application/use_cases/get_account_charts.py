"""Use case producing chart datasets for asset accounts."""

from datetime import datetime
from typing import Iterable

from ledger_reports.application.ports.balance_history import BalanceHistoryPort
from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.application.use_cases.report_helpers import (
    as_ids,
    bucket_rows,
)
from ledger_reports.domain.constants import TOP_ACCOUNTS_LIMIT
from ledger_reports.domain.models import ChartDataset, TransactionType
from ledger_reports.domain.services import (
    ConversionPolicy,
    PeriodSeriesBuilder,
    SignMode,
    Step,
    TransactionAggregator,
    by_destination_account,
    by_source_account,
    calculate_step,
    sort_buckets,
)
from ledger_reports.domain.services.periods import end_of_day, start_of_day
from ledger_reports.infrastructure.logging.logger import get_app_logger

EXPENSE = "expense"
REVENUE = "revenue"


class GetAccountChartsUseCase:
    """Build income/expense, balance and top-account charts."""

    def __init__(
        self,
        transaction_repository: TransactionQueryPort,
        balance_history: BalanceHistoryPort,
        policy: ConversionPolicy,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            transaction_repository: Port returning filtered transaction records.
            balance_history: Port returning account balance snapshots.
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._transaction_repository = transaction_repository
        self._balance_history = balance_history
        self._policy = policy
        self._logger = logger or get_app_logger()
        self._builder = PeriodSeriesBuilder(policy, logger=self._logger)
        self._aggregator = TransactionAggregator(policy, logger=self._logger)

    def income_expense_chart(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int],
        step: Step | str | None = None,
    ) -> list[ChartDataset]:
        """Return "earned" and "spent" datasets per native currency.

        Args:
            start: First day of the range.
            end: Last day of the range.
            accounts: Asset accounts the chart is drawn for.
            step: Period length; picked from the range length when omitted.

        Returns:
            list[ChartDataset]: Two datasets per currency.
        """
        account_ids = as_ids(accounts)
        resolved_step = self._resolve_step(start, end, step)
        records = self._transaction_repository.fetch_transactions(
            TransactionQuery(
                start=start_of_day(start),
                end=end_of_day(end),
                account_ids=account_ids,
            )
        )
        datasets = self._builder.income_expense_datasets(
            records, account_ids, start, end, resolved_step
        )
        self._logger.info(
            f"Income/expense chart: {len(records)} records, "
            f"{len(datasets)} datasets, step {resolved_step.value}"
        )
        return datasets

    def account_balance_chart(
        self,
        account_id: int,
        start: datetime,
        end: datetime,
        step: Step | str | None = None,
        label: str = "balance",
    ) -> list[ChartDataset]:
        """Return the end-of-period balance of one account, per currency."""
        resolved_step = self._resolve_step(start, end, step)
        snapshots = self._balance_history.fetch_balance_snapshots(
            account_id, end_of_day(end)
        )
        series = self._builder.balance_series(
            snapshots, start, end, resolved_step, label=label
        )
        self._logger.info(
            f"Balance chart for account {account_id}: "
            f"{len(snapshots)} snapshots, {len(series)} currencies"
        )
        return [
            ChartDataset(
                label=label,
                chart_type="line",
                period=resolved_step.value,
                start=start,
                end=end,
                series=item,
            )
            for item in series.values()
        ]

    def top_accounts_chart(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        kind: str = EXPENSE,
        limit: int = TOP_ACCOUNTS_LIMIT,
    ) -> list[dict[str, object]]:
        """Return the largest expense or revenue accounts.

        Amounts are positive magnitudes sorted largest first; ties keep the
        order in which the accounts first appeared.

        Args:
            start: First day of the range.
            end: Last day of the range.
            accounts: Asset accounts money left (expense) or entered (revenue).
            kind: ``"expense"`` or ``"revenue"``.
            limit: Maximum number of rows.

        Returns:
            list[dict[str, object]]: Rows with ``id``, ``name`` and ``sum``.

        Raises:
            ValueError: When ``kind`` is unknown.
        """
        account_ids = as_ids(accounts)
        if kind == EXPENSE:
            query = TransactionQuery(
                start=start_of_day(start),
                end=end_of_day(end),
                types=(TransactionType.WITHDRAWAL,),
                source_account_ids=account_ids,
            )
            group_key = by_destination_account
        elif kind == REVENUE:
            query = TransactionQuery(
                start=start_of_day(start),
                end=end_of_day(end),
                types=(TransactionType.DEPOSIT,),
                destination_account_ids=account_ids,
            )
            group_key = by_source_account
        else:
            raise ValueError(f"Unsupported top accounts kind: {kind}")
        records = self._transaction_repository.fetch_transactions(query)
        buckets = self._aggregator.aggregate(
            records, group_key, SignMode.POSITIVE, include_foreign=False
        )
        ranked = sort_buckets(buckets.values(), descending=True)[:limit]
        return bucket_rows(ranked)

    @staticmethod
    def _resolve_step(
        start: datetime,
        end: datetime,
        step: Step | str | None,
    ) -> Step:
        if step is None:
            return calculate_step(start, end)
        return Step.parse(step)


__all__ = ["EXPENSE", "REVENUE", "GetAccountChartsUseCase"]
