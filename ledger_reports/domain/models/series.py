"""Domain models for period series and chart datasets."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from ledger_reports.domain.models.currency import Currency


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balance of an account in one currency, effective at ``date``."""

    date: datetime
    currency: Currency
    balance: Decimal


@dataclass(frozen=True)
class PeriodAmount:
    """Signed amount dated for flow bucketing."""

    date: datetime
    currency: Currency
    amount: Decimal
    primary_amount: Decimal | None = None


@dataclass
class PeriodSeries:
    """Fixed-step series for a single currency.

    ``entries`` and ``pc_entries`` map period labels to decimal strings that
    were rounded once, when the entry was emitted.
    """

    currency: Currency
    primary_currency: Currency
    label: str = ""
    entries: dict[str, str] = field(default_factory=dict)
    pc_entries: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "label": self.label,
            **self.currency.to_dict(),
            **self.primary_currency.to_dict("primary_currency"),
            "entries": dict(self.entries),
            "pc_entries": dict(self.pc_entries),
        }


@dataclass(frozen=True)
class ChartDataset:
    """Chart-ready dataset (one line or bar set per currency and label)."""

    label: str
    chart_type: str
    period: str
    start: datetime
    end: datetime
    series: PeriodSeries

    def to_dict(self) -> dict[str, object]:
        data = self.series.to_dict()
        data.update(
            {
                "label": self.label,
                "type": self.chart_type,
                "period": self.period,
                "start_date": self.start.isoformat(),
                "end_date": self.end.isoformat(),
            }
        )
        return data


__all__ = ["BalanceSnapshot", "ChartDataset", "PeriodAmount", "PeriodSeries"]
