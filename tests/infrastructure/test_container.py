"""Tests for composition root wiring."""

from unittest.mock import MagicMock

import pytest

from factories import EUR
from ledger_reports.application.use_cases import (
    ExchangeRateResolver,
    GetAccountChartsUseCase,
    GetAccountReportUseCase,
)
from ledger_reports.infrastructure import container
from ledger_reports.infrastructure.currency_repository import (
    SqlAlchemyCurrencyDirectory,
)
from ledger_reports.infrastructure.ledger_repository import (
    SqlAlchemyTransactionRepository,
)
from ledger_reports.infrastructure.settings import ReportingSettings


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch) -> None:
    """Keep builders from touching the log directory."""
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())


def test_build_transaction_repository_uses_given_port() -> None:
    """Repositories reuse the injected database port."""
    db_port = MagicMock()

    repository = container.build_transaction_repository(db_port=db_port)

    assert isinstance(repository, SqlAlchemyTransactionRepository)
    assert repository._db_port is db_port


def test_build_transaction_repository_defaults_adapter(monkeypatch) -> None:
    """Without a port the default database adapter is built."""
    db_port = MagicMock()
    monkeypatch.setattr(container, "build_database_adapter", lambda: db_port)

    repository = container.build_transaction_repository()

    assert repository._db_port is db_port


def test_build_conversion_policy_resolves_primary_currency() -> None:
    """The primary currency comes from the directory and settings."""
    directory = MagicMock()
    directory.find_by_code.return_value = EUR
    settings = ReportingSettings(primary_currency="EUR", convert_to_primary=True)

    policy = container.build_conversion_policy(
        settings, db_port=MagicMock(), currency_directory=directory
    )

    directory.find_by_code.assert_called_once_with("EUR")
    assert policy.primary_currency == EUR
    assert policy.convert_to_primary is True
    assert isinstance(policy.rate_resolver, ExchangeRateResolver)


def test_build_use_cases_share_database_port(native_policy) -> None:
    """Use case builders wire repositories onto one database port."""
    db_port = MagicMock()

    assert isinstance(
        container.build_account_report(native_policy, db_port),
        GetAccountReportUseCase,
    )
    assert isinstance(
        container.build_account_charts(native_policy, db_port),
        GetAccountChartsUseCase,
    )
    assert isinstance(
        container.build_currency_directory(db_port), SqlAlchemyCurrencyDirectory
    )
