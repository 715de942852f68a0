"""SQLAlchemy-backed currency directory."""

from sqlalchemy import text

from ledger_reports.application.ports.currency_directory import (
    CurrencyDirectoryPort,
)
from ledger_reports.application.ports.database import DatabaseEnginePort
from ledger_reports.domain.errors import DataIntegrityError, unknown_currency
from ledger_reports.domain.models import Currency

_CURRENCY_SQL = """
SELECT id, code, name, symbol, decimal_places
FROM transaction_currencies
WHERE deleted_at IS NULL AND {column} = :value
LIMIT 1
"""


class SqlAlchemyCurrencyDirectory(CurrencyDirectoryPort):
    """Currency lookup caching every currency it has resolved."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the directory.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port
        self._by_id: dict[int, Currency] = {}
        self._by_code: dict[str, Currency] = {}

    def find_by_id(self, currency_id: int) -> Currency:
        cached = self._by_id.get(currency_id)
        if cached is not None:
            return cached
        return self._load("id", currency_id)

    def find_by_code(self, code: str) -> Currency:
        normalized = code.strip().upper()
        cached = self._by_code.get(normalized)
        if cached is not None:
            return cached
        return self._load("code", normalized)

    def _load(self, column: str, value) -> Currency:
        query = text(_CURRENCY_SQL.format(column=column))
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"value": value}).first()
        if not row:
            raise DataIntegrityError(unknown_currency(value))
        currency = Currency(
            id=row.id,
            code=row.code,
            name=row.name,
            symbol=row.symbol,
            decimal_places=int(row.decimal_places),
        )
        self._by_id[currency.id] = currency
        self._by_code[currency.code] = currency
        return currency


__all__ = ["SqlAlchemyCurrencyDirectory"]
