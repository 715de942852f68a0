"""SQLAlchemy-backed repository returning flat transaction records."""

from datetime import datetime
from decimal import InvalidOperation

from sqlalchemy import bindparam, text

from ledger_reports.application.ports.database import DatabaseEnginePort
from ledger_reports.application.ports.ledger_repository import (
    TransactionQuery,
    TransactionQueryPort,
)
from ledger_reports.domain.errors import DataIntegrityError
from ledger_reports.domain.models import TagRef, TransactionRecord
from ledger_reports.utils.decimal_utils import coerce_decimal, to_plain_string

_BASE_SQL = """
SELECT tj.id AS journal_id,
       tj.transaction_group_id AS group_id,
       tj.date AS date,
       tj.description AS description,
       tt.type AS transaction_type,
       dest.amount AS amount,
       dest.foreign_amount AS foreign_amount,
       dest.native_amount AS pc_amount,
       c.id AS currency_id,
       c.code AS currency_code,
       c.name AS currency_name,
       c.symbol AS currency_symbol,
       c.decimal_places AS currency_decimal_places,
       fc.id AS foreign_currency_id,
       fc.code AS foreign_currency_code,
       fc.name AS foreign_currency_name,
       fc.symbol AS foreign_currency_symbol,
       fc.decimal_places AS foreign_currency_decimal_places,
       src.account_id AS source_account_id,
       sa.name AS source_account_name,
       dest.account_id AS destination_account_id,
       da.name AS destination_account_name,
       cat.id AS category_id,
       cat.name AS category_name,
       bud.id AS budget_id,
       bud.name AS budget_name
FROM transaction_journals tj
JOIN transaction_types tt ON tt.id = tj.transaction_type_id
JOIN transactions src
  ON src.transaction_journal_id = tj.id
 AND src.amount < 0
 AND src.deleted_at IS NULL
JOIN transactions dest
  ON dest.transaction_journal_id = tj.id
 AND dest.amount >= 0
 AND dest.deleted_at IS NULL
JOIN accounts sa ON sa.id = src.account_id
JOIN accounts da ON da.id = dest.account_id
JOIN transaction_currencies c ON c.id = dest.transaction_currency_id
LEFT JOIN transaction_currencies fc ON fc.id = dest.foreign_currency_id
LEFT JOIN category_transaction_journal ctj ON ctj.transaction_journal_id = tj.id
LEFT JOIN categories cat ON cat.id = ctj.category_id
LEFT JOIN budget_transaction_journal btj ON btj.transaction_journal_id = tj.id
LEFT JOIN budgets bud ON bud.id = btj.budget_id
WHERE tj.deleted_at IS NULL
"""

_TAGS_SQL = """
SELECT ttj.transaction_journal_id AS journal_id,
       t.id AS tag_id,
       t.tag AS tag_name
FROM tag_transaction_journal ttj
JOIN tags t ON t.id = ttj.tag_id
WHERE ttj.transaction_journal_id IN :journal_ids
ORDER BY ttj.transaction_journal_id, t.id
"""


class SqlAlchemyTransactionRepository(TransactionQueryPort):
    """Repository reading journals with their source and destination legs."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    def fetch_transactions(self, query: TransactionQuery) -> list[TransactionRecord]:
        statement, params = self._build_query(query)
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(statement, params).all()
            tags = self._fetch_tags(conn, [row.journal_id for row in rows])
        return [record_from_row(row, tags.get(row.journal_id, ())) for row in rows]

    @staticmethod
    def _fetch_tags(conn, journal_ids: list[int]) -> dict[int, tuple[TagRef, ...]]:
        if not journal_ids:
            return {}
        statement = text(_TAGS_SQL).bindparams(
            bindparam("journal_ids", expanding=True)
        )
        rows = conn.execute(statement, {"journal_ids": sorted(set(journal_ids))}).all()
        tags: dict[int, list[TagRef]] = {}
        for row in rows:
            tags.setdefault(row.journal_id, []).append(
                TagRef(id=row.tag_id, name=row.tag_name)
            )
        return {journal_id: tuple(items) for journal_id, items in tags.items()}

    @staticmethod
    def _build_query(query: TransactionQuery):
        sql = _BASE_SQL
        params: dict[str, object] = {}
        expanding: list[str] = []

        def add_in(column: str, name: str, values, negate: bool = False) -> None:
            nonlocal sql
            if not values:
                return
            operator = "NOT IN" if negate else "IN"
            sql += f" AND {column} {operator} :{name}"
            params[name] = list(values)
            expanding.append(name)

        if query.start is not None:
            sql += " AND tj.date >= :start_date"
            params["start_date"] = query.start
        if query.end is not None:
            sql += " AND tj.date <= :end_date"
            params["end_date"] = query.end
        add_in("tt.type", "types", [kind.value for kind in query.types])
        if query.account_ids:
            sql += (
                " AND (src.account_id IN :account_ids"
                " OR dest.account_id IN :account_ids)"
            )
            params["account_ids"] = list(query.account_ids)
            expanding.append("account_ids")
        add_in("src.account_id", "source_ids", query.source_account_ids)
        add_in("dest.account_id", "destination_ids", query.destination_account_ids)
        add_in(
            "src.account_id",
            "exclude_source_ids",
            query.exclude_source_account_ids,
            negate=True,
        )
        add_in(
            "dest.account_id",
            "exclude_destination_ids",
            query.exclude_destination_account_ids,
            negate=True,
        )
        add_in("cat.id", "category_ids", query.category_ids)
        add_in("bud.id", "budget_ids", query.budget_ids)
        if query.tag_ids:
            sql += (
                " AND EXISTS (SELECT 1 FROM tag_transaction_journal x"
                " WHERE x.transaction_journal_id = tj.id AND x.tag_id IN :tag_ids)"
            )
            params["tag_ids"] = list(query.tag_ids)
            expanding.append("tag_ids")
        if query.currency_id is not None:
            sql += (
                " AND (dest.transaction_currency_id = :currency_id"
                " OR dest.foreign_currency_id = :currency_id)"
            )
            params["currency_id"] = query.currency_id
        if query.without_category:
            sql += " AND cat.id IS NULL"
        if query.without_budget:
            sql += " AND bud.id IS NULL"
        if query.without_tag:
            sql += (
                " AND NOT EXISTS (SELECT 1 FROM tag_transaction_journal x"
                " WHERE x.transaction_journal_id = tj.id)"
            )
        sql += " ORDER BY tj.date, tj.id"

        statement = text(sql)
        if expanding:
            statement = statement.bindparams(
                *(bindparam(name, expanding=True) for name in expanding)
            )
        return statement, params


def _optional_id(value) -> int | None:
    """Return None for the ledger's "none" sentinel (0 or NULL)."""
    if value is None:
        return None
    value = int(value)
    return value or None


def _amount_text(value) -> str | None:
    if value is None:
        return None
    return to_plain_string(coerce_decimal(value).copy_abs())


def _as_datetime(value):
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def record_from_row(row, tags=()) -> TransactionRecord:
    """Build a transaction record from a query row.

    Args:
        row: Row exposing the columns selected by the ledger query.
        tags: Tags attached to the journal.

    Returns:
        TransactionRecord: Record with amounts as non-negative decimals.

    Raises:
        DataIntegrityError: When the row breaks the record contract.
    """
    try:
        foreign_currency_id = _optional_id(row.foreign_currency_id)
        foreign_amount = _amount_text(row.foreign_amount)
        if foreign_currency_id is None:
            foreign_amount = None
        return TransactionRecord(
            journal_id=row.journal_id,
            group_id=row.group_id,
            date=_as_datetime(row.date),
            amount=_amount_text(row.amount),
            transaction_type=row.transaction_type,
            currency_id=row.currency_id,
            currency_code=row.currency_code,
            currency_name=row.currency_name,
            currency_symbol=row.currency_symbol,
            currency_decimal_places=row.currency_decimal_places,
            source_account_id=row.source_account_id,
            source_account_name=row.source_account_name,
            destination_account_id=row.destination_account_id,
            destination_account_name=row.destination_account_name,
            foreign_amount=foreign_amount,
            foreign_currency_id=foreign_currency_id,
            foreign_currency_code=row.foreign_currency_code,
            foreign_currency_name=row.foreign_currency_name,
            foreign_currency_symbol=row.foreign_currency_symbol,
            foreign_currency_decimal_places=row.foreign_currency_decimal_places,
            primary_converted_amount=_amount_text(row.pc_amount),
            description=row.description or "",
            category_id=_optional_id(row.category_id),
            category_name=row.category_name,
            budget_id=_optional_id(row.budget_id),
            budget_name=row.budget_name,
            tags=tuple(tags),
        )
    except (AttributeError, TypeError, ValueError, InvalidOperation) as exc:
        raise DataIntegrityError(f"Malformed ledger row: {exc}") from exc


__all__ = ["SqlAlchemyTransactionRepository", "record_from_row"]
