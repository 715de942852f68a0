"""Fold transaction records into currency buckets."""

from typing import Callable, Iterable

from ledger_reports.domain.models import (
    Currency,
    CurrencyBucket,
    GroupKey,
    TransactionRecord,
)
from ledger_reports.domain.services.conversion import ConversionPolicy
from ledger_reports.domain.services.sign import SignMode
from ledger_reports.utils.decimal_utils import to_display_float

GroupKeyFn = Callable[[TransactionRecord, Currency], list[GroupKey]]


def by_currency(record: TransactionRecord, currency: Currency) -> list[GroupKey]:
    return [GroupKey(currency.id)]


def by_source_account(
    record: TransactionRecord,
    currency: Currency,
) -> list[GroupKey]:
    return [
        GroupKey(
            currency.id,
            record.source_account_id,
            record.source_account_name,
        )
    ]


def by_destination_account(
    record: TransactionRecord,
    currency: Currency,
) -> list[GroupKey]:
    return [
        GroupKey(
            currency.id,
            record.destination_account_id,
            record.destination_account_name,
        )
    ]


def by_category(record: TransactionRecord, currency: Currency) -> list[GroupKey]:
    """Key by category; uncategorised records are left out."""
    if record.category_id is None:
        return []
    return [GroupKey(currency.id, record.category_id, record.category_name)]


def by_budget(record: TransactionRecord, currency: Currency) -> list[GroupKey]:
    """Key by budget; records without a budget are left out."""
    if record.budget_id is None:
        return []
    return [GroupKey(currency.id, record.budget_id, record.budget_name)]


def by_tag(record: TransactionRecord, currency: Currency) -> list[GroupKey]:
    """One key per tag, so a record with two tags counts for both."""
    return [GroupKey(currency.id, tag.id, tag.name) for tag in record.tags]


class TransactionAggregator:
    """Group records into exact decimal sums.

    Each call owns a fresh bucket map; nothing is shared between calls.
    """

    def __init__(self, policy: ConversionPolicy, logger=None) -> None:
        """Initialize the aggregator.

        Args:
            policy: Conversion policy of the current request.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._policy = policy
        self._logger = logger

    @property
    def policy(self) -> ConversionPolicy:
        return self._policy

    def aggregate(
        self,
        records: Iterable[TransactionRecord],
        group_key: GroupKeyFn = by_currency,
        sign_mode: SignMode = SignMode.NEGATIVE,
        include_foreign: bool = True,
    ) -> dict[GroupKey, CurrencyBucket]:
        """Aggregate records into buckets.

        Args:
            records: Records already filtered by the ledger query.
            group_key: Function returning the bucket keys of a record leg.
                An empty list leaves the leg out of the result.
            sign_mode: Sign forced onto every contribution.
            include_foreign: Whether foreign legs contribute in native mode.

        Returns:
            dict[GroupKey, CurrencyBucket]: Buckets in first-seen order.
        """
        buckets: dict[GroupKey, CurrencyBucket] = {}
        seen = 0
        for record in records:
            seen += 1
            for leg in self._policy.resolve(record, include_foreign):
                amount = sign_mode.apply(leg.amount)
                for key in group_key(record, leg.currency):
                    bucket = buckets.get(key)
                    if bucket is None:
                        bucket = CurrencyBucket(key=key, currency=leg.currency)
                        buckets[key] = bucket
                    bucket.add(amount)
        if self._logger is not None:
            self._logger.debug(
                f"Aggregated {seen} records into {len(buckets)} buckets "
                f"(sign={sign_mode.value})"
            )
        return buckets


def sort_buckets(
    buckets: Iterable[CurrencyBucket],
    descending: bool = True,
) -> list[CurrencyBucket]:
    """Sort buckets by their display float, keeping input order on ties."""
    return sorted(
        buckets,
        key=lambda bucket: to_display_float(bucket.sum),
        reverse=descending,
    )


__all__ = [
    "GroupKeyFn",
    "TransactionAggregator",
    "by_budget",
    "by_category",
    "by_currency",
    "by_destination_account",
    "by_source_account",
    "by_tag",
    "sort_buckets",
]
