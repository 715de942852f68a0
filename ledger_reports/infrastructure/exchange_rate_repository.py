"""SQLAlchemy-backed source of stored exchange rates."""

from datetime import date
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ledger_reports.application.ports.database import DatabaseEnginePort
from ledger_reports.application.ports.exchange_rates import (
    ExchangeRateSourcePort,
)
from ledger_reports.domain.errors import RateLookupError
from ledger_reports.domain.models import Currency
from ledger_reports.utils.decimal_utils import coerce_decimal


class SqlAlchemyExchangeRateSource(ExchangeRateSourcePort):
    """Read the latest rate of a currency pair from ``currency_exchange_rates``."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the rate source.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    def fetch_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        on: date,
    ) -> Decimal | None:
        query = text(
            """
            SELECT rate
            FROM currency_exchange_rates
            WHERE from_currency_id = :from_id
              AND to_currency_id = :to_id
              AND date <= :on
              AND deleted_at IS NULL
            ORDER BY date DESC, id DESC
            LIMIT 1
            """
        )
        params = {"from_id": from_currency.id, "to_id": to_currency.id, "on": on}
        try:
            engine = self._db_port.get_ledger_engine()
            with engine.connect() as conn:
                row = conn.execute(query, params).first()
        except SQLAlchemyError as exc:
            raise RateLookupError(
                f"Failed to read exchange rate {from_currency.code}/"
                f"{to_currency.code} on {on}: {exc}"
            ) from exc
        if not row:
            return None
        return coerce_decimal(row.rate)


__all__ = ["SqlAlchemyExchangeRateSource"]
