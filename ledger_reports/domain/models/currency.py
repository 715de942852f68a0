"""Domain models for currencies."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Currency:
    """Currency metadata.

    Attributes:
        id: Ledger identifier of the currency.
        code: ISO code (e.g., EUR).
        name: Display name.
        symbol: Display symbol.
        decimal_places: Number of decimals used when presenting amounts.
    """

    id: int
    code: str
    name: str
    symbol: str
    decimal_places: int = 2

    def to_dict(self, prefix: str = "currency") -> dict[str, object]:
        """Return the currency metadata with prefixed keys."""
        return {
            f"{prefix}_id": self.id,
            f"{prefix}_code": self.code,
            f"{prefix}_name": self.name,
            f"{prefix}_symbol": self.symbol,
            f"{prefix}_decimal_places": self.decimal_places,
        }


__all__ = ["Currency"]
