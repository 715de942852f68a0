"""Shared shaping helpers for reporting use cases."""

from typing import Iterable

from ledger_reports.domain.models import (
    CurrencyBucket,
    CurrencyJournals,
    JournalLine,
    TransactionRecord,
)
from ledger_reports.domain.services import SignMode
from ledger_reports.utils.decimal_utils import to_display_float, to_plain_string


def as_ids(values: Iterable[int] | None) -> tuple[int, ...]:
    """Normalize optional id collections for a transaction query."""
    if not values:
        return ()
    return tuple(int(value) for value in values)


def journal_line(record: TransactionRecord, sign_mode: SignMode) -> JournalLine:
    """Return the listing view of a record with its amount signed."""
    return JournalLine(
        journal_id=record.journal_id,
        group_id=record.group_id,
        date=record.date,
        amount=sign_mode.apply(record.amount),
        description=record.description,
        source_account_id=record.source_account_id,
        source_account_name=record.source_account_name,
        destination_account_id=record.destination_account_id,
        destination_account_name=record.destination_account_name,
        category_name=record.category_name,
        budget_name=record.budget_name,
        tags=record.tags,
    )


def group_journals_by_currency(
    records: Iterable[TransactionRecord],
    sign_mode: SignMode,
) -> dict[int, CurrencyJournals]:
    """List journals under their native currency, keyed by journal id."""
    result: dict[int, CurrencyJournals] = {}
    for record in records:
        group = result.get(record.currency_id)
        if group is None:
            group = CurrencyJournals(currency=record.currency)
            result[record.currency_id] = group
        group.journals[record.journal_id] = journal_line(record, sign_mode)
    return result


def bucket_rows(buckets: Iterable[CurrencyBucket]) -> list[dict[str, object]]:
    """Return the sum-style output rows of a set of buckets."""
    return [bucket.to_dict() for bucket in buckets]


def difference_rows(buckets: Iterable[CurrencyBucket]) -> list[dict[str, object]]:
    """Return insight-style rows, one per bucket.

    Rows carry ``difference``, its display float and the currency id and
    code, plus ``id`` and ``name`` when the bucket is keyed by an entity.
    """
    rows = []
    for bucket in buckets:
        row: dict[str, object] = {}
        if bucket.entity_id is not None:
            row["id"] = bucket.entity_id
            row["name"] = bucket.entity_name
        row.update(
            {
                "difference": to_plain_string(bucket.sum),
                "difference_float": to_display_float(bucket.sum),
                "currency_id": bucket.currency.id,
                "currency_code": bucket.currency.code,
            }
        )
        rows.append(row)
    return rows


__all__ = [
    "as_ids",
    "bucket_rows",
    "difference_rows",
    "group_journals_by_currency",
    "journal_line",
]
