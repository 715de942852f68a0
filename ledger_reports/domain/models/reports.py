"""Domain models returned by reporting use cases."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from ledger_reports.domain.models.buckets import CurrencyBucket
from ledger_reports.domain.models.currency import Currency
from ledger_reports.domain.models.transactions import TagRef, TransactionType
from ledger_reports.utils.decimal_utils import (
    ZERO,
    add_exact,
    to_display_float,
    to_plain_string,
)


@dataclass(frozen=True)
class JournalLine:
    """Subset of a journal used by listing reports, with a signed amount."""

    journal_id: int
    group_id: int
    date: datetime
    amount: Decimal
    description: str
    source_account_id: int
    source_account_name: str
    destination_account_id: int
    destination_account_name: str
    category_name: str | None = None
    budget_name: str | None = None
    tags: tuple[TagRef, ...] = ()


@dataclass
class EntityJournals:
    """Journals listed under one category or budget."""

    id: int | None
    name: str
    journals: dict[int, JournalLine] = field(default_factory=dict)


@dataclass
class CurrencyJournals:
    """Journals grouped under their native currency."""

    currency: Currency
    journals: dict[int, JournalLine] = field(default_factory=dict)
    entities: dict[int | None, EntityJournals] = field(default_factory=dict)


@dataclass
class TransferFlow:
    """Money moved in and out of one account, in one currency."""

    id: int
    name: str
    currency: Currency
    amount_in: Decimal = ZERO
    amount_out: Decimal = ZERO

    @property
    def difference(self) -> Decimal:
        return add_exact(self.amount_in, self.amount_out)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "in": to_plain_string(self.amount_in),
            "in_float": to_display_float(self.amount_in),
            "out": to_plain_string(self.amount_out),
            "out_float": to_display_float(self.amount_out),
            "difference": to_plain_string(self.difference),
            "difference_float": to_display_float(self.difference),
            "currency_id": self.currency.id,
            "currency_code": self.currency.code,
        }


@dataclass(frozen=True)
class AccountReportLine:
    """Per-account line of an expense or income report."""

    id: int
    name: str
    currency: Currency
    sum: Decimal
    average: Decimal
    count: int

    @property
    def sum_float(self) -> float:
        return to_display_float(self.sum)


@dataclass(frozen=True)
class AccountReport:
    """Expense or income report grouped by opposing account."""

    accounts: list[AccountReportLine]
    sums: list[CurrencyBucket]


@dataclass(frozen=True)
class InsightTotal:
    """Difference summed for one currency."""

    currency: Currency
    difference: Decimal

    def to_dict(self) -> dict[str, object]:
        return {
            "difference": to_plain_string(self.difference),
            "difference_float": to_display_float(self.difference),
            "currency_id": self.currency.id,
            "currency_code": self.currency.code,
        }


@dataclass
class TypeSums:
    """Signed sums per transaction type, for one currency."""

    currency: Currency
    sums: dict[TransactionType, Decimal] = field(
        default_factory=lambda: {kind: ZERO for kind in TransactionType}
    )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = self.currency.to_dict()
        for kind, amount in self.sums.items():
            data[kind.value] = to_plain_string(amount)
        return data


__all__ = [
    "AccountReport",
    "AccountReportLine",
    "CurrencyJournals",
    "EntityJournals",
    "InsightTotal",
    "JournalLine",
    "TransferFlow",
    "TypeSums",
]
