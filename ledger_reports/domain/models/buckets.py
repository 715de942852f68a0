"""Accumulators used while grouping transaction amounts."""

from dataclasses import dataclass, field
from decimal import Decimal

from ledger_reports.domain.models.currency import Currency
from ledger_reports.utils.decimal_utils import (
    ZERO,
    add_exact,
    round_to_places,
    to_display_float,
    to_plain_string,
)


@dataclass(frozen=True)
class GroupKey:
    """Bucket key: a currency, optionally composed with an entity.

    Attributes:
        currency_id: Attribution currency of the bucket.
        entity_id: Account, category, budget or tag id, if any.
        entity_name: Display name of the entity (not part of equality).
    """

    currency_id: int
    entity_id: int | None = None
    entity_name: str | None = field(default=None, compare=False)


@dataclass
class CurrencyBucket:
    """Running decimal sum for one bucket key.

    The currency metadata is captured when the bucket is created and is not
    updated by later contributions.
    """

    key: GroupKey
    currency: Currency
    sum: Decimal = ZERO
    count: int = 0

    @property
    def entity_id(self) -> int | None:
        return self.key.entity_id

    @property
    def entity_name(self) -> str | None:
        return self.key.entity_name

    def add(self, amount: Decimal) -> None:
        self.sum = add_exact(self.sum, amount)
        self.count += 1

    def rounded_sum(self) -> Decimal:
        """Return the sum rounded to the bucket currency's decimal places."""
        return round_to_places(self.sum, self.currency.decimal_places)

    def to_dict(self) -> dict[str, object]:
        """Return the output shape used by reporting façades.

        ``sum_float`` is derived once from the exact sum and is display-only.
        """
        data: dict[str, object] = {
            "sum": to_plain_string(self.sum),
            "sum_float": to_display_float(self.sum),
            **self.currency.to_dict(),
        }
        if self.key.entity_id is not None:
            data["id"] = self.key.entity_id
            data["name"] = self.key.entity_name
        return data


__all__ = ["CurrencyBucket", "GroupKey"]
