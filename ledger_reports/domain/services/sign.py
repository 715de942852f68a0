"""Sign conventions applied when grouping amounts."""

from decimal import Decimal
from enum import Enum

from ledger_reports.utils.decimal_utils import negative, positive


class SignMode(str, Enum):
    """Direction forced onto every grouped amount.

    Expenses are reported with ``NEGATIVE``, income with ``POSITIVE``.
    """

    POSITIVE = "positive"
    NEGATIVE = "negative"

    def apply(self, amount: Decimal) -> Decimal:
        if self is SignMode.POSITIVE:
            return positive(amount)
        return negative(amount)


__all__ = ["SignMode"]
