"""Domain models package."""

from .buckets import CurrencyBucket, GroupKey
from .currency import Currency
from .reports import (
    AccountReport,
    AccountReportLine,
    CurrencyJournals,
    EntityJournals,
    InsightTotal,
    JournalLine,
    TransferFlow,
    TypeSums,
)
from .series import BalanceSnapshot, ChartDataset, PeriodAmount, PeriodSeries
from .transactions import TagRef, TransactionRecord, TransactionType

__all__ = [
    "AccountReport",
    "AccountReportLine",
    "BalanceSnapshot",
    "ChartDataset",
    "Currency",
    "CurrencyBucket",
    "CurrencyJournals",
    "EntityJournals",
    "GroupKey",
    "InsightTotal",
    "JournalLine",
    "PeriodAmount",
    "PeriodSeries",
    "TagRef",
    "TransactionRecord",
    "TransactionType",
    "TransferFlow",
    "TypeSums",
]
