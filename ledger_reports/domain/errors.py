"""Domain error types for reporting and aggregation."""


class ReportingError(Exception):
    """Base class for reporting errors."""


class DataIntegrityError(ReportingError):
    """Upstream data breaks the record contract.

    Raised for missing required fields, inconsistent foreign legs or
    currencies that cannot be resolved. Never recovered inside the engine.
    """


class RateLookupError(ReportingError):
    """No exchange rate could be produced for a currency pair and date."""


class UnsupportedStepError(ReportingError, ValueError):
    """Unknown period step identifier."""


def missing_field(field: str, journal_id) -> str:
    """Return message for a record missing a required field."""
    return f"Transaction record {journal_id} is missing required field '{field}'"


def missing_rate(from_code: str, to_code: str, on) -> str:
    """Return message for a missing exchange rate."""
    return f"No exchange rate from {from_code} to {to_code} on {on}"


def unknown_currency(identifier) -> str:
    """Return message for a currency the directory does not know."""
    return f"Unknown currency: {identifier}"


__all__ = [
    "DataIntegrityError",
    "RateLookupError",
    "ReportingError",
    "UnsupportedStepError",
    "missing_field",
    "missing_rate",
    "unknown_currency",
]
