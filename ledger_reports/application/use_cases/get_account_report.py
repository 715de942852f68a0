"""Use case building expense and income reports per opposing account."""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ledger_reports.application.ports.currency_directory import (
    CurrencyDirectoryPort,
)
from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.application.use_cases.report_helpers import as_ids
from ledger_reports.domain.models import (
    AccountReport,
    AccountReportLine,
    Currency,
    CurrencyBucket,
    GroupKey,
    TransactionType,
)
from ledger_reports.domain.services import (
    ConversionPolicy,
    GroupKeyFn,
    SignMode,
    TransactionAggregator,
    by_destination_account,
    by_source_account,
    sort_buckets,
)
from ledger_reports.domain.services.periods import end_of_day
from ledger_reports.infrastructure.logging.logger import get_app_logger


class GetAccountReportUseCase:
    """Group money leaving or entering asset accounts by the other side.

    Reports use native amounts; each line carries the sum, the average per
    journal and the journal count.
    """

    def __init__(
        self,
        transaction_repository: TransactionQueryPort,
        currency_directory: CurrencyDirectoryPort,
        policy: ConversionPolicy,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            transaction_repository: Port returning filtered transaction records.
            currency_directory: Port resolving currency metadata.
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._transaction_repository = transaction_repository
        self._currency_directory = currency_directory
        self._logger = logger or get_app_logger()
        self._aggregator = TransactionAggregator(
            policy.ignore_settings(), logger=self._logger
        )

    def expense_report(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int],
    ) -> AccountReport:
        """Return withdrawals and transfers out, per destination account.

        Lines are sorted by sum, most negative first.
        """
        account_ids = as_ids(accounts)
        query = TransactionQuery(
            start=start,
            end=end_of_day(end),
            types=(TransactionType.WITHDRAWAL, TransactionType.TRANSFER),
            source_account_ids=account_ids,
            exclude_destination_account_ids=account_ids,
        )
        return self._report(
            query, by_destination_account, SignMode.NEGATIVE, descending=False
        )

    def income_report(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int],
    ) -> AccountReport:
        """Return deposits and transfers in, per source account.

        Lines are sorted by sum, largest first.
        """
        account_ids = as_ids(accounts)
        query = TransactionQuery(
            start=start,
            end=end_of_day(end),
            types=(TransactionType.DEPOSIT, TransactionType.TRANSFER),
            destination_account_ids=account_ids,
            exclude_source_account_ids=account_ids,
        )
        return self._report(
            query, by_source_account, SignMode.POSITIVE, descending=True
        )

    def _report(
        self,
        query: TransactionQuery,
        group_key: GroupKeyFn,
        sign_mode: SignMode,
        descending: bool,
    ) -> AccountReport:
        records = self._transaction_repository.fetch_transactions(query)
        buckets = self._aggregator.aggregate(
            records, group_key, sign_mode, include_foreign=False
        )
        currencies: dict[int, Currency] = {}
        lines = []
        totals: dict[int, CurrencyBucket] = {}
        for bucket in sort_buckets(buckets.values(), descending=descending):
            currency_id = bucket.key.currency_id
            if currency_id not in currencies:
                currencies[currency_id] = self._currency_directory.find_by_id(
                    currency_id
                )
            currency = currencies[currency_id]
            lines.append(
                AccountReportLine(
                    id=bucket.entity_id,
                    name=bucket.entity_name,
                    currency=currency,
                    sum=bucket.sum,
                    average=bucket.sum / Decimal(bucket.count),
                    count=bucket.count,
                )
            )
            total = totals.get(currency_id)
            if total is None:
                total = CurrencyBucket(key=GroupKey(currency_id), currency=currency)
                totals[currency_id] = total
            total.add(bucket.sum)
        self._logger.info(
            f"Account report: {len(records)} records, {len(lines)} lines"
        )
        return AccountReport(accounts=lines, sums=list(totals.values()))


__all__ = ["GetAccountReportUseCase"]
