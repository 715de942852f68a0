"""Domain package for reporting rules and core models."""

from .errors import (
    DataIntegrityError,
    RateLookupError,
    ReportingError,
    UnsupportedStepError,
)
from .models import (
    Currency,
    CurrencyBucket,
    GroupKey,
    TransactionRecord,
    TransactionType,
)
from .services import (
    ConversionPolicy,
    PeriodSeriesBuilder,
    SignMode,
    Step,
    TransactionAggregator,
)

__all__ = [
    "DataIntegrityError",
    "RateLookupError",
    "ReportingError",
    "UnsupportedStepError",
    "Currency",
    "CurrencyBucket",
    "GroupKey",
    "TransactionRecord",
    "TransactionType",
    "ConversionPolicy",
    "PeriodSeriesBuilder",
    "SignMode",
    "Step",
    "TransactionAggregator",
]
