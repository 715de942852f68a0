"""SQLAlchemy-backed balance history of a single account."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import text

from ledger_reports.application.ports.balance_history import BalanceHistoryPort
from ledger_reports.application.ports.currency_directory import (
    CurrencyDirectoryPort,
)
from ledger_reports.application.ports.database import DatabaseEnginePort
from ledger_reports.domain.models import BalanceSnapshot
from ledger_reports.domain.services.periods import end_of_day
from ledger_reports.utils.decimal_utils import ZERO, add_exact, coerce_decimal


class SqlAlchemyBalanceHistory(BalanceHistoryPort):
    """Running balance of an account, one snapshot per day with activity."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        currency_directory: CurrencyDirectoryPort,
    ) -> None:
        """Initialize the balance history.

        Args:
            db_port: Port providing access to the ledger engine.
            currency_directory: Port resolving currency metadata.
        """
        self._db_port = db_port
        self._currency_directory = currency_directory

    def fetch_balance_snapshots(
        self,
        account_id: int,
        end: datetime,
    ) -> list[BalanceSnapshot]:
        query = text(
            """
            SELECT DATE(tj.date) AS day,
                   t.transaction_currency_id AS currency_id,
                   SUM(t.amount) AS amount
            FROM transactions t
            JOIN transaction_journals tj ON tj.id = t.transaction_journal_id
            WHERE t.account_id = :account_id
              AND t.deleted_at IS NULL
              AND tj.deleted_at IS NULL
              AND tj.date <= :end_date
            GROUP BY DATE(tj.date), t.transaction_currency_id
            ORDER BY day, currency_id
            """
        )
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                query, {"account_id": account_id, "end_date": end}
            ).all()

        running: dict[int, Decimal] = {}
        snapshots: list[BalanceSnapshot] = []
        for row in rows:
            currency = self._currency_directory.find_by_id(row.currency_id)
            balance = add_exact(
                running.get(currency.id, ZERO), coerce_decimal(row.amount)
            )
            running[currency.id] = balance
            snapshots.append(
                BalanceSnapshot(
                    date=end_of_day(self._as_datetime(row.day)),
                    currency=currency,
                    balance=balance,
                )
            )
        return snapshots

    @staticmethod
    def _as_datetime(value) -> datetime:
        """Normalize a day value returned by the driver."""
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        return datetime.fromisoformat(str(value))


__all__ = ["SqlAlchemyBalanceHistory"]
