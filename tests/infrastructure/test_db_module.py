"""Tests for the infrastructure.db module."""

import pytest

from ledger_reports.infrastructure import db as db_module


def test_get_env_var_reads_environment(monkeypatch):
    """_get_env_var should load .env and return the requested value."""
    loaded = []
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: loaded.append(1))
    monkeypatch.setenv("LEDGER_DB_URL", "postgresql://firefly")

    assert db_module._get_env_var("LEDGER_DB_URL") == "postgresql://firefly"
    assert loaded == [1]


def test_get_env_var_raises_when_missing(monkeypatch):
    """Missing or empty env vars should raise a RuntimeError."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("LEDGER_DB_URL", "")

    with pytest.raises(RuntimeError, match="LEDGER_DB_URL"):
        db_module._get_env_var("LEDGER_DB_URL")


def test_create_engine_passes_pool_configuration(monkeypatch):
    """_create_engine should configure QueuePool with health checks."""
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["db_url"] = db_url
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    engine = db_module._create_engine("mysql+pymysql://firefly")

    assert engine == "engine"
    assert captured["db_url"] == "mysql+pymysql://firefly"
    assert captured["kwargs"]["poolclass"] is db_module.QueuePool
    assert captured["kwargs"]["pool_size"] == 5
    assert captured["kwargs"]["max_overflow"] == 5
    assert captured["kwargs"]["pool_pre_ping"] is True
    assert "future" not in captured["kwargs"]


def test_get_ledger_engine_is_created_once(monkeypatch):
    """get_ledger_engine should memoize the created engine."""
    monkeypatch.setattr(db_module, "_ledger_engine", None)
    created = []

    def fake_create_engine(url, pool_size):
        created.append((url, pool_size))
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("LEDGER_DB_URL", "postgresql://firefly")
    monkeypatch.delenv("LEDGER_DB_POOL_SIZE", raising=False)

    engine_one = db_module.get_ledger_engine()
    engine_two = db_module.get_ledger_engine()

    assert engine_one is engine_two
    assert engine_one == "engine:postgresql://firefly"
    assert created == [("postgresql://firefly", db_module.DEFAULT_POOL_SIZE)]


def test_adapter_returns_ledger_engine(monkeypatch):
    """SqlAlchemyDatabaseEngineAdapter should proxy the module helper."""
    monkeypatch.setattr(db_module, "get_ledger_engine", lambda: "ledger_engine")

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter()

    assert adapter.get_ledger_engine() == "ledger_engine"


def test_pool_size_reads_environment(monkeypatch):
    """LEDGER_DB_POOL_SIZE overrides the default and must be positive."""
    monkeypatch.setenv("LEDGER_DB_POOL_SIZE", "12")
    assert db_module._pool_size() == 12

    monkeypatch.setenv("LEDGER_DB_POOL_SIZE", " ")
    assert db_module._pool_size() == db_module.DEFAULT_POOL_SIZE

    monkeypatch.setenv("LEDGER_DB_POOL_SIZE", "0")
    with pytest.raises(ValueError, match="LEDGER_DB_POOL_SIZE"):
        db_module._pool_size()
