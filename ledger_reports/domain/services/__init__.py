"""Domain services package."""

from .aggregation import (
    GroupKeyFn,
    TransactionAggregator,
    by_budget,
    by_category,
    by_currency,
    by_destination_account,
    by_source_account,
    by_tag,
    sort_buckets,
)
from .conversion import AmountLeg, ConversionPolicy, RateResolver
from .periods import (
    Step,
    add_period,
    calculate_step,
    end_of_period,
    period_boundaries,
    period_label,
    start_of_period,
)
from .series import EARNED, SPENT, PeriodSeriesBuilder
from .sign import SignMode

__all__ = [
    "AmountLeg",
    "ConversionPolicy",
    "RateResolver",
    "GroupKeyFn",
    "TransactionAggregator",
    "by_budget",
    "by_category",
    "by_currency",
    "by_destination_account",
    "by_source_account",
    "by_tag",
    "sort_buckets",
    "Step",
    "add_period",
    "calculate_step",
    "end_of_period",
    "period_boundaries",
    "period_label",
    "start_of_period",
    "EARNED",
    "SPENT",
    "PeriodSeriesBuilder",
    "SignMode",
]
