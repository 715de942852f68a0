"""Composition root for wiring infrastructure adapters."""

from ledger_reports.application.ports.balance_history import BalanceHistoryPort
from ledger_reports.application.ports.currency_directory import (
    CurrencyDirectoryPort,
)
from ledger_reports.application.ports.database import DatabaseEnginePort
from ledger_reports.application.ports.exchange_rates import (
    ExchangeRateSourcePort,
)
from ledger_reports.application.ports.ledger_repository import (
    TransactionQueryPort,
)
from ledger_reports.application.use_cases import (
    AccountOperationsUseCase,
    BudgetOperationsUseCase,
    CategoryOperationsUseCase,
    ExchangeRateResolver,
    GetAccountChartsUseCase,
    GetAccountReportUseCase,
    GetInsightTotalsUseCase,
    TagOperationsUseCase,
)
from ledger_reports.domain.services import ConversionPolicy
from ledger_reports.infrastructure.balance_history_repository import (
    SqlAlchemyBalanceHistory,
)
from ledger_reports.infrastructure.currency_repository import (
    SqlAlchemyCurrencyDirectory,
)
from ledger_reports.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from ledger_reports.infrastructure.exchange_rate_repository import (
    SqlAlchemyExchangeRateSource,
)
from ledger_reports.infrastructure.ledger_repository import (
    SqlAlchemyTransactionRepository,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger
from ledger_reports.infrastructure.settings import ReportingSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_transaction_repository(
    db_port: DatabaseEnginePort | None = None,
) -> TransactionQueryPort:
    """Return the ledger transaction repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyTransactionRepository(resolved_db)


def build_currency_directory(
    db_port: DatabaseEnginePort | None = None,
) -> CurrencyDirectoryPort:
    """Return the caching currency directory."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyCurrencyDirectory(resolved_db)


def build_exchange_rate_source(
    db_port: DatabaseEnginePort | None = None,
) -> ExchangeRateSourcePort:
    """Return the stored exchange rate source."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyExchangeRateSource(resolved_db)


def build_balance_history(
    db_port: DatabaseEnginePort | None = None,
    currency_directory: CurrencyDirectoryPort | None = None,
) -> BalanceHistoryPort:
    """Return the account balance history adapter."""
    resolved_db = db_port or build_database_adapter()
    directory = currency_directory or build_currency_directory(resolved_db)
    return SqlAlchemyBalanceHistory(resolved_db, directory)


def build_rate_resolver(
    settings: ReportingSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
    currency_directory: CurrencyDirectoryPort | None = None,
) -> ExchangeRateResolver:
    """Return a fresh request-scoped exchange rate resolver."""
    resolved_settings = settings or ReportingSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    directory = currency_directory or build_currency_directory(resolved_db)
    return ExchangeRateResolver(
        build_exchange_rate_source(resolved_db),
        directory,
        logger=get_app_logger(),
        pivot_code=resolved_settings.pivot_currency,
    )


def build_conversion_policy(
    settings: ReportingSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
    currency_directory: CurrencyDirectoryPort | None = None,
    rate_resolver: ExchangeRateResolver | None = None,
) -> ConversionPolicy:
    """Return the conversion policy of a request.

    The primary currency is resolved through the currency directory, so an
    unknown ``PRIMARY_CURRENCY`` raises DataIntegrityError here.
    """
    resolved_settings = settings or ReportingSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    directory = currency_directory or build_currency_directory(resolved_db)
    resolver = rate_resolver or build_rate_resolver(
        resolved_settings, resolved_db, directory
    )
    return ConversionPolicy(
        primary_currency=directory.find_by_code(resolved_settings.primary_currency),
        convert_to_primary=resolved_settings.convert_to_primary,
        rate_resolver=resolver,
        logger=get_app_logger(),
    )


def build_account_operations(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> AccountOperationsUseCase:
    """Return the account operations façade."""
    return AccountOperationsUseCase(
        build_transaction_repository(db_port), policy, logger=get_app_logger()
    )


def build_category_operations(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> CategoryOperationsUseCase:
    """Return the category operations façade."""
    return CategoryOperationsUseCase(
        build_transaction_repository(db_port), policy, logger=get_app_logger()
    )


def build_budget_operations(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> BudgetOperationsUseCase:
    """Return the budget operations façade."""
    return BudgetOperationsUseCase(
        build_transaction_repository(db_port), policy, logger=get_app_logger()
    )


def build_tag_operations(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> TagOperationsUseCase:
    """Return the tag operations façade."""
    return TagOperationsUseCase(
        build_transaction_repository(db_port), policy, logger=get_app_logger()
    )


def build_insight_totals(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> GetInsightTotalsUseCase:
    """Return the insight totals use case."""
    return GetInsightTotalsUseCase(
        build_transaction_repository(db_port), policy, logger=get_app_logger()
    )


def build_account_report(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> GetAccountReportUseCase:
    """Return the account report use case."""
    return GetAccountReportUseCase(
        build_transaction_repository(db_port),
        build_currency_directory(db_port),
        policy,
        logger=get_app_logger(),
    )


def build_account_charts(
    policy: ConversionPolicy,
    db_port: DatabaseEnginePort | None = None,
) -> GetAccountChartsUseCase:
    """Return the account charts use case."""
    return GetAccountChartsUseCase(
        build_transaction_repository(db_port),
        build_balance_history(db_port),
        policy,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_transaction_repository",
    "build_currency_directory",
    "build_exchange_rate_source",
    "build_balance_history",
    "build_rate_resolver",
    "build_conversion_policy",
    "build_account_operations",
    "build_category_operations",
    "build_budget_operations",
    "build_tag_operations",
    "build_insight_totals",
    "build_account_report",
    "build_account_charts",
]
