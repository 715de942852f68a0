"""Use case exposing category expense and income reports."""

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
from ledger_reports.domain.constants import NO_CATEGORY_NAME
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
    by_category,
    by_currency,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger


class CategoryOperationsUseCase:
    """List and sum journals per category."""

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
        categories: Iterable[int] | None = None,
    ) -> dict[int, CurrencyJournals]:
        """Return categorised withdrawals per currency and category.

        Withdrawals into one of ``accounts`` (for example a liability) are
        left out. Uncategorised withdrawals are skipped.
        """
        account_ids = as_ids(accounts)
        records = self._fetch(
            TransactionQuery(
                start=start,
                end=end,
                types=(TransactionType.WITHDRAWAL,),
                account_ids=account_ids,
                exclude_destination_account_ids=account_ids,
                category_ids=as_ids(categories),
            )
        )
        return self._list(records, SignMode.NEGATIVE, skip_uncategorised=True)

    def list_income(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> dict[int, CurrencyJournals]:
        """Return deposits per currency and category.

        Uncategorised deposits are listed under "No category".
        """
        account_ids = as_ids(accounts)
        records = self._fetch(
            TransactionQuery(
                start=start,
                end=end,
                types=(TransactionType.DEPOSIT,),
                account_ids=account_ids,
                exclude_source_account_ids=account_ids,
                category_ids=as_ids(categories),
            )
        )
        return self._list(records, SignMode.POSITIVE, skip_uncategorised=False)

    def collect_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[TransactionRecord]:
        """Return withdrawals for later use with ``sum_collected_by_category``."""
        return self._collect(
            TransactionType.WITHDRAWAL, start, end, accounts, categories
        )

    def collect_income(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[TransactionRecord]:
        return self._collect(TransactionType.DEPOSIT, start, end, accounts, categories)

    def collect_transfers(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[TransactionRecord]:
        return self._collect(TransactionType.TRANSFER, start, end, accounts, categories)

    def sum_expenses(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return withdrawal sums per currency."""
        records = self.collect_expenses(start, end, accounts, categories)
        buckets = self._aggregator.aggregate(records, by_currency, SignMode.NEGATIVE)
        return bucket_rows(buckets.values())

    def sum_income(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return deposit sums per currency, without foreign legs."""
        records = self.collect_income(start, end, accounts, categories)
        buckets = self._aggregator.aggregate(
            records, by_currency, SignMode.POSITIVE, include_foreign=False
        )
        return bucket_rows(buckets.values())

    def sum_transfers(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
    ) -> list[dict[str, object]]:
        """Return transfer sums per native currency."""
        records = self.collect_transfers(start, end, accounts, categories)
        aggregator = TransactionAggregator(
            self._policy.ignore_settings(), logger=self._logger
        )
        buckets = aggregator.aggregate(
            records, by_currency, SignMode.POSITIVE, include_foreign=False
        )
        return bucket_rows(buckets.values())

    def sum_by_category(
        self,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None = None,
        categories: Iterable[int] | None = None,
        sign_mode: SignMode = SignMode.NEGATIVE,
    ) -> list[dict[str, object]]:
        """Return withdrawal (or deposit) sums per category and currency."""
        transaction_type = (
            TransactionType.WITHDRAWAL
            if sign_mode is SignMode.NEGATIVE
            else TransactionType.DEPOSIT
        )
        records = self._collect(transaction_type, start, end, accounts, categories)
        buckets = self._aggregator.aggregate(records, by_category, sign_mode)
        self._logger.info(
            f"Summed {len(records)} records into {len(buckets)} category buckets"
        )
        return bucket_rows(buckets.values())

    def sum_collected_by_category(
        self,
        records: Iterable[TransactionRecord],
        category_id: int,
        sign_mode: SignMode = SignMode.NEGATIVE,
        convert_to_primary: bool = False,
    ) -> list[dict[str, object]]:
        """Sum pre-collected records of one category per currency.

        Foreign legs never add a bucket of their own here.

        Args:
            records: Records from one of the ``collect_*`` methods.
            category_id: Category to keep.
            sign_mode: Sign forced onto the sums.
            convert_to_primary: Whether to express sums in the primary
                currency, regardless of the request setting.

        Returns:
            list[dict[str, object]]: One row per currency.
        """
        policy = self._policy.with_conversion(convert_to_primary)
        selected = [record for record in records if record.category_id == category_id]
        aggregator = TransactionAggregator(policy, logger=self._logger)
        buckets = aggregator.aggregate(
            selected, by_currency, sign_mode, include_foreign=False
        )
        return bucket_rows(buckets.values())

    def _list(
        self,
        records: Iterable[TransactionRecord],
        sign_mode: SignMode,
        skip_uncategorised: bool,
    ) -> dict[int, CurrencyJournals]:
        result: dict[int, CurrencyJournals] = {}
        for record in records:
            if record.category_id is None and skip_uncategorised:
                continue
            group = result.get(record.currency_id)
            if group is None:
                group = CurrencyJournals(currency=record.currency)
                result[record.currency_id] = group
            entity = group.entities.get(record.category_id)
            if entity is None:
                entity = EntityJournals(
                    id=record.category_id,
                    name=record.category_name or NO_CATEGORY_NAME,
                )
                group.entities[record.category_id] = entity
            entity.journals[record.journal_id] = journal_line(record, sign_mode)
        return result

    def _collect(
        self,
        transaction_type: TransactionType,
        start: datetime,
        end: datetime,
        accounts: Iterable[int] | None,
        categories: Iterable[int] | None,
    ) -> list[TransactionRecord]:
        """Fetch records of one type carrying a category."""
        records = self._fetch(
            TransactionQuery(
                start=start,
                end=end,
                types=(transaction_type,),
                account_ids=as_ids(accounts),
                category_ids=as_ids(categories),
            )
        )
        return [record for record in records if record.category_id is not None]

    def _fetch(self, query: TransactionQuery) -> list[TransactionRecord]:
        records = self._transaction_repository.fetch_transactions(query)
        self._logger.debug(f"Fetched {len(records)} records for {query.types}")
        return records


__all__ = ["CategoryOperationsUseCase"]
