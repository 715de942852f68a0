"""Use case computing insight totals per currency."""

from datetime import datetime
from typing import Iterable

from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.application.use_cases.report_helpers import (
    as_ids,
    difference_rows,
)
from ledger_reports.domain.models import TransactionType
from ledger_reports.domain.services import (
    ConversionPolicy,
    SignMode,
    TransactionAggregator,
    by_currency,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger


class GetInsightTotalsUseCase:
    """Compute expense, income and transfer totals for asset accounts.

    Each total is a list of ``{difference, difference_float, currency_id,
    currency_code}`` rows. Foreign legs never add a row of their own.
    """

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
        self._logger = logger or get_app_logger()
        self._aggregator = TransactionAggregator(policy, logger=self._logger)

    def expense_total(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawals leaving the accounts, as negative totals."""
        query = TransactionQuery(
            start=start,
            end=end,
            types=(TransactionType.WITHDRAWAL,),
            source_account_ids=as_ids(accounts),
        )
        return self._total(query, SignMode.NEGATIVE)

    def income_total(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return deposits landing in the accounts, as positive totals."""
        query = TransactionQuery(
            start=start,
            end=end,
            types=(TransactionType.DEPOSIT,),
            destination_account_ids=as_ids(accounts),
        )
        return self._total(query, SignMode.POSITIVE)

    def transfer_total(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return transfers landing in the accounts, as positive totals."""
        query = TransactionQuery(
            start=start,
            end=end,
            types=(TransactionType.TRANSFER,),
            destination_account_ids=as_ids(accounts),
        )
        return self._total(query, SignMode.POSITIVE)

    def _total(
        self,
        query: TransactionQuery,
        sign_mode: SignMode,
    ) -> list[dict[str, object]]:
        records = self._transaction_repository.fetch_transactions(query)
        buckets = self._aggregator.aggregate(
            records, by_currency, sign_mode, include_foreign=False
        )
        self._logger.info(
            f"Insight total for {query.types[0].value}: "
            f"{len(records)} records, {len(buckets)} currencies"
        )
        return difference_rows(buckets.values())


__all__ = ["GetInsightTotalsUseCase"]
