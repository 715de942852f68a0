"""Use case exposing budget expense reports."""

from datetime import datetime
from typing import Iterable

from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.application.use_cases.report_helpers import (
    as_ids,
    bucket_rows,
    journal_line,
)
from ledger_reports.domain.models import (
    CurrencyJournals,
    EntityJournals,
    TransactionRecord,
    TransactionType,
)
from ledger_reports.domain.services import (
    ConversionPolicy,
    SignMode,
    TransactionAggregator,
    by_budget,
    by_currency,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger


class BudgetOperationsUseCase:
    """List and sum withdrawals per budget."""

    def __init__(
        self,
        transaction_repository: TransactionQueryPort,
        policy: ConversionPolicy,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            transaction_repository: Port returning filtered transaction records.
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._transaction_repository = transaction_repository
        self._policy = policy
        self._logger = logger or get_app_logger()
        self._aggregator = TransactionAggregator(policy, logger=self._logger)

    def list_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        budgets: Iterable[int] | None = None,
    ) -> dict[int, CurrencyJournals]:
        """Return budgeted withdrawals per currency and budget."""
        records = self.collect_expenses(start, end, accounts, budgets)
        result: dict[int, CurrencyJournals] = {}
        for record in records:
            group = result.get(record.currency_id)
            if group is None:
                group = CurrencyJournals(currency=record.currency)
                result[record.currency_id] = group
            entity = group.entities.get(record.budget_id)
            if entity is None:
                entity = EntityJournals(id=record.budget_id, name=record.budget_name)
                group.entities[record.budget_id] = entity
            entity.journals[record.journal_id] = journal_line(
                record, SignMode.NEGATIVE
            )
        return result

    def collect_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        budgets: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[TransactionRecord]:
        """Return withdrawals that carry a budget.

        Args:
            start: First day of the range.
            end: Last day of the range.
            accounts: Optional source accounts.
            budgets: Optional budgets; all budgets when empty.
            currency_id: Optional native or foreign currency filter.

        Returns:
            list[TransactionRecord]: Matching records with a budget.
        """
        records = self._transaction_repository.fetch_transactions(
            TransactionQuery(
                start=start,
                end=end,
                types=(TransactionType.WITHDRAWAL,),
                source_account_ids=as_ids(accounts),
                budget_ids=as_ids(budgets),
                currency_id=currency_id,
            )
        )
        self._logger.debug(f"Fetched {len(records)} budget withdrawals")
        return [record for record in records if record.budget_id is not None]

    def sum_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        budgets: Iterable[int] | None = None,
        currency_id: int | None = None,
    ) -> list[dict[str, object]]:
        """Return budgeted withdrawal sums per currency."""
        records = self.collect_expenses(start, end, accounts, budgets, currency_id)
        buckets = self._aggregator.aggregate(records, by_currency, SignMode.NEGATIVE)
        return bucket_rows(buckets.values())

    def sum_by_budget(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        budgets: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal sums per budget and currency."""
        records = self.collect_expenses(start, end, accounts, budgets)
        buckets = self._aggregator.aggregate(records, by_budget, SignMode.NEGATIVE)
        self._logger.info(
            f"Summed {len(records)} records into {len(buckets)} budget buckets"
        )
        return bucket_rows(buckets.values())

    def sum_collected_expenses(
        self,
        records: Iterable[TransactionRecord],
        currency_id: int,
        convert_to_primary: bool = False,
    ) -> list[dict[str, object]]:
        """Sum pre-collected withdrawals in one currency.

        A record qualifies when its native or its foreign currency matches.
        Foreign legs never add a bucket of their own here.
        """
        selected = [
            record
            for record in records
            if currency_id in (record.currency_id, record.foreign_currency_id)
        ]
        return self._sum_collected(selected, convert_to_primary)

    def sum_collected_expenses_by_budget(
        self,
        records: Iterable[TransactionRecord],
        budget_id: int,
        convert_to_primary: bool = False,
    ) -> list[dict[str, object]]:
        """Sum pre-collected withdrawals of one budget per currency."""
        selected = [record for record in records if record.budget_id == budget_id]
        return self._sum_collected(selected, convert_to_primary)

    def _sum_collected(
        self,
        records: list[TransactionRecord],
        convert_to_primary: bool,
    ) -> list[dict[str, object]]:
        aggregator = TransactionAggregator(
            self._policy.with_conversion(convert_to_primary),
            logger=self._logger,
        )
        buckets = aggregator.aggregate(
            records, by_currency, SignMode.NEGATIVE, include_foreign=False
        )
        return bucket_rows(buckets.values())


__all__ = ["BudgetOperationsUseCase"]
