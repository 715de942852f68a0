"""Application ports package."""

from .balance_history import BalanceHistoryPort
from .currency_directory import CurrencyDirectoryPort
from .database import DatabaseEnginePort
from .exchange_rates import ExchangeRateSourcePort
from .ledger_repository import TransactionQuery, TransactionQueryPort

__all__ = [
    "BalanceHistoryPort",
    "CurrencyDirectoryPort",
    "DatabaseEnginePort",
    "ExchangeRateSourcePort",
    "TransactionQuery",
    "TransactionQueryPort",
]
