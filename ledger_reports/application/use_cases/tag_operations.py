"""Use case exposing tag sums and insights."""

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
from ledger_reports.domain.models import TransactionRecord, TransactionType, TypeSums
from ledger_reports.domain.services import (
    ConversionPolicy,
    SignMode,
    TransactionAggregator,
    by_currency,
    by_tag,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger
from ledger_reports.utils.decimal_utils import add_exact


class TagOperationsUseCase:
    """Sum journals per tag."""

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

    def sums_of_tag(
        self,
        tag_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[int, TypeSums]:
        """Return signed sums per transaction type for one tag.

        Withdrawals are negative, every other type positive. Amounts are
        native, and a foreign leg adds to its own currency.

        Args:
            tag_id: Tag to report on.
            start: Optional first day of the range.
            end: Optional last day of the range.

        Returns:
            dict[int, TypeSums]: Sums keyed by currency id.
        """
        records = self._transaction_repository.fetch_transactions(
            TransactionQuery(
                start=start,
                end=end,
                tag_ids=(tag_id,),
            )
        )
        policy = self._policy.ignore_settings()
        sums: dict[int, TypeSums] = {}
        for record in records:
            if not record.has_tag(tag_id):
                continue
            sign_mode = (
                SignMode.NEGATIVE
                if record.transaction_type is TransactionType.WITHDRAWAL
                else SignMode.POSITIVE
            )
            for leg in policy.resolve(record, include_foreign=True):
                entry = sums.get(leg.currency.id)
                if entry is None:
                    entry = TypeSums(currency=leg.currency)
                    sums[leg.currency.id] = entry
                kind = record.transaction_type
                entry.sums[kind] = add_exact(
                    entry.sums[kind], sign_mode.apply(leg.amount)
                )
        return sums

    def income_per_tag(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        tags: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return deposit totals per tag and currency."""
        return self._per_tag(TransactionType.DEPOSIT, start, end, accounts, tags)

    def expense_per_tag(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        tags: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal totals per tag and currency."""
        return self._per_tag(TransactionType.WITHDRAWAL, start, end, accounts, tags)

    def income_without_tag(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return untagged deposit totals per currency."""
        return self._without_tag(TransactionType.DEPOSIT, start, end, accounts)

    def expense_without_tag(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return untagged withdrawal totals per currency."""
        return self._without_tag(TransactionType.WITHDRAWAL, start, end, accounts)

    def _per_tag(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
        tags: Iterable[int] | None,
    ) -> list[dict[str, object]]:
        tag_ids = as_ids(tags)
        records = self._fetch(
            transaction_type,
            start,
            end,
            accounts,
            tag_ids=tag_ids,
        )
        if tag_ids:
            wanted = set(tag_ids)

            def group_key(record, currency):
                return [
                    key
                    for key in by_tag(record, currency)
                    if key.entity_id in wanted
                ]

        else:
            group_key = by_tag
        buckets = self._aggregator.aggregate(
            records, group_key, self._sign_mode(transaction_type)
        )
        self._logger.info(
            f"Summed {len(records)} records into {len(buckets)} tag buckets"
        )
        return difference_rows(buckets.values())

    def _without_tag(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
    ) -> list[dict[str, object]]:
        records = self._fetch(
            transaction_type, start, end, accounts, without_tag=True
        )
        buckets = self._aggregator.aggregate(
            records,
            by_currency,
            self._sign_mode(transaction_type),
            include_foreign=False,
        )
        return difference_rows(buckets.values())

    def _fetch(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
        tag_ids: tuple[int, ...] = (),
        without_tag: bool = False,
    ) -> list[TransactionRecord]:
        account_ids = as_ids(accounts)
        if transaction_type is TransactionType.DEPOSIT:
            sources, destinations = (), account_ids
        else:
            sources, destinations = account_ids, ()
        return self._transaction_repository.fetch_transactions(
            TransactionQuery(
                start=start,
                end=end,
                types=(transaction_type,),
                source_account_ids=sources,
                destination_account_ids=destinations,
                tag_ids=tag_ids,
                without_tag=without_tag,
            )
        )

    @staticmethod
    def _sign_mode(transaction_type: TransactionType) -> SignMode:
        if transaction_type is TransactionType.WITHDRAWAL:
            return SignMode.NEGATIVE
        return SignMode.POSITIVE


__all__ = ["TagOperationsUseCase"]
