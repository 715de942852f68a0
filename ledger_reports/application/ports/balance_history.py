"""Port for account balance snapshots."""

from datetime import datetime
from typing import Protocol

from ledger_reports.domain.models import BalanceSnapshot


class BalanceHistoryPort(Protocol):
    """Port exposing materialized account balances over time."""

    def fetch_balance_snapshots(
        self,
        account_id: int,
        end: datetime,
    ) -> list[BalanceSnapshot]:
        """Return the account's balance after each day with activity.

        Snapshots dated before the requested range are included so that the
        balance at the start of the range is known.
        """


__all__ = ["BalanceHistoryPort"]
