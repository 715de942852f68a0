"""Domain models for ledger transaction records."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ledger_reports.domain.errors import DataIntegrityError, missing_field
from ledger_reports.domain.models.currency import Currency
from ledger_reports.utils.decimal_utils import parse_decimal


class TransactionType(str, Enum):
    """Journal types known to the ledger."""

    WITHDRAWAL = "Withdrawal"
    DEPOSIT = "Deposit"
    TRANSFER = "Transfer"
    RECONCILIATION = "Reconciliation"
    OPENING_BALANCE = "Opening balance"


@dataclass(frozen=True)
class TagRef:
    """Tag attached to a journal."""

    id: int
    name: str


@dataclass(frozen=True)
class TransactionRecord:
    """One leg of a journal, as seen by reporting.

    Amounts arrive as decimal strings or Decimals and are stored as Decimal.
    ``amount`` is non-negative by ledger convention; the sign is applied at
    grouping time.
    """

    journal_id: int
    group_id: int
    date: datetime
    amount: Decimal
    transaction_type: TransactionType
    currency_id: int
    currency_code: str
    currency_name: str
    currency_symbol: str
    currency_decimal_places: int
    source_account_id: int
    source_account_name: str
    destination_account_id: int
    destination_account_name: str
    foreign_amount: Decimal | None = None
    foreign_currency_id: int | None = None
    foreign_currency_code: str | None = None
    foreign_currency_name: str | None = None
    foreign_currency_symbol: str | None = None
    foreign_currency_decimal_places: int | None = None
    primary_converted_amount: Decimal | None = None
    description: str = ""
    category_id: int | None = None
    category_name: str | None = None
    budget_id: int | None = None
    budget_name: str | None = None
    tags: tuple[TagRef, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in (
            "journal_id",
            "group_id",
            "currency_id",
            "currency_code",
            "currency_decimal_places",
            "source_account_id",
            "destination_account_id",
        ):
            if getattr(self, name) is None:
                raise DataIntegrityError(missing_field(name, self.journal_id))
        if not isinstance(self.date, datetime):
            raise DataIntegrityError(missing_field("date", self.journal_id))
        try:
            transaction_type = TransactionType(self.transaction_type)
        except ValueError as exc:
            raise DataIntegrityError(
                missing_field("transaction_type", self.journal_id)
            ) from exc
        object.__setattr__(self, "transaction_type", transaction_type)

        amount = parse_decimal(self.amount)
        if amount is None:
            raise DataIntegrityError(missing_field("amount", self.journal_id))
        object.__setattr__(self, "amount", amount)

        if self.primary_converted_amount is not None:
            converted = parse_decimal(self.primary_converted_amount)
            if converted is None:
                raise DataIntegrityError(
                    missing_field("primary_converted_amount", self.journal_id)
                )
            object.__setattr__(self, "primary_converted_amount", converted)

        self._validate_foreign_leg()
        object.__setattr__(self, "tags", tuple(self.tags))

    def _validate_foreign_leg(self) -> None:
        has_amount = self.foreign_amount is not None
        has_currency = self.foreign_currency_id is not None
        if has_amount != has_currency:
            raise DataIntegrityError(
                f"Transaction record {self.journal_id} has an inconsistent "
                "foreign amount and foreign currency"
            )
        if not has_amount:
            return
        foreign_amount = parse_decimal(self.foreign_amount)
        if foreign_amount is None:
            raise DataIntegrityError(
                missing_field("foreign_amount", self.journal_id)
            )
        if self.foreign_currency_code is None:
            raise DataIntegrityError(
                missing_field("foreign_currency_code", self.journal_id)
            )
        object.__setattr__(self, "foreign_amount", foreign_amount)

    @property
    def currency(self) -> Currency:
        """Native currency of ``amount``."""
        return Currency(
            id=self.currency_id,
            code=self.currency_code,
            name=self.currency_name,
            symbol=self.currency_symbol,
            decimal_places=self.currency_decimal_places,
        )

    @property
    def foreign_currency(self) -> Currency | None:
        """Currency of ``foreign_amount`` when the journal has a second leg."""
        if self.foreign_currency_id is None:
            return None
        return Currency(
            id=self.foreign_currency_id,
            code=self.foreign_currency_code,
            name=self.foreign_currency_name or self.foreign_currency_code,
            symbol=self.foreign_currency_symbol or self.foreign_currency_code,
            decimal_places=(
                self.foreign_currency_decimal_places
                if self.foreign_currency_decimal_places is not None
                else self.currency_decimal_places
            ),
        )

    @property
    def has_foreign_leg(self) -> bool:
        return self.foreign_currency_id is not None

    def has_tag(self, tag_id: int) -> bool:
        return any(tag.id == tag_id for tag in self.tags)


__all__ = ["TagRef", "TransactionRecord", "TransactionType"]
