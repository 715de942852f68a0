"""Port for reading flat transaction records from the ledger."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ledger_reports.domain.models import TransactionRecord, TransactionType


@dataclass(frozen=True)
class TransactionQuery:
    """Filter applied by the ledger layer before records reach reporting.

    Empty tuples mean "no restriction".

    Attributes:
        start: Optional lower bound (inclusive) of the journal date.
        end: Optional upper bound (inclusive) of the journal date.
        types: Journal types to include.
        account_ids: Records must touch one of these accounts on either side.
        source_account_ids: Records must leave one of these accounts.
        destination_account_ids: Records must land in one of these accounts.
        exclude_source_account_ids: Records leaving these accounts are dropped.
        exclude_destination_account_ids: Records landing in these accounts
            are dropped.
        category_ids: Records must carry one of these categories.
        budget_ids: Records must carry one of these budgets.
        tag_ids: Records must carry one of these tags.
        currency_id: Records must have this native or foreign currency.
        without_category: Only records without a category.
        without_budget: Only records without a budget.
        without_tag: Only records without any tag.
    """

    start: datetime | None = None
    end: datetime | None = None
    types: tuple[TransactionType, ...] = ()
    account_ids: tuple[int, ...] = ()
    source_account_ids: tuple[int, ...] = ()
    destination_account_ids: tuple[int, ...] = ()
    exclude_source_account_ids: tuple[int, ...] = ()
    exclude_destination_account_ids: tuple[int, ...] = ()
    category_ids: tuple[int, ...] = ()
    budget_ids: tuple[int, ...] = ()
    tag_ids: tuple[int, ...] = ()
    currency_id: int | None = None
    without_category: bool = False
    without_budget: bool = False
    without_tag: bool = False


class TransactionQueryPort(Protocol):
    """Port returning transaction records already filtered by the ledger."""

    def fetch_transactions(self, query: TransactionQuery) -> list[TransactionRecord]:
        """Return records matching the query, ordered by date."""


__all__ = ["TransactionQuery", "TransactionQueryPort"]
