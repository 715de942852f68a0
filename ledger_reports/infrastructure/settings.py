"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from datetime import datetime
import os

import dotenv

from ledger_reports.domain.constants import (
    DEFAULT_PIVOT_CURRENCY,
    DEFAULT_PRIMARY_CURRENCY,
)
from ledger_reports.infrastructure.logging.logger import get_app_logger

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ReportingSettings:
    """Settings for a reporting request.

    Attributes:
        primary_currency: ISO code of the primary currency.
        convert_to_primary: Whether amounts are converted into it.
        pivot_currency: ISO code used for cross exchange rates.
        start_date: Optional default first day of reports.
        end_date: Optional default last day of reports.
        account_ids: Default asset accounts of reports.
    """

    primary_currency: str = DEFAULT_PRIMARY_CURRENCY
    convert_to_primary: bool = False
    pivot_currency: str = DEFAULT_PIVOT_CURRENCY
    start_date: datetime | None = None
    end_date: datetime | None = None
    account_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> "ReportingSettings":
        """Build settings from environment variables (and ``.env``).

        Returns:
            ReportingSettings: Settings sourced from environment variables.

        Raises:
            ValueError: When a date or an account id cannot be parsed.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        primary = os.getenv("PRIMARY_CURRENCY", DEFAULT_PRIMARY_CURRENCY)
        pivot = os.getenv("RATE_PIVOT_CURRENCY", DEFAULT_PIVOT_CURRENCY)
        convert = os.getenv("CONVERT_TO_PRIMARY", "false").strip().lower()
        settings = cls(
            primary_currency=primary.strip().upper(),
            convert_to_primary=convert in _TRUE_VALUES,
            pivot_currency=pivot.strip().upper(),
            start_date=cls._parse_date(os.getenv("REPORT_START_DATE")),
            end_date=cls._parse_date(os.getenv("REPORT_END_DATE")),
            account_ids=cls._parse_ids(os.getenv("REPORT_ACCOUNT_IDS")),
        )
        if (
            settings.start_date is not None
            and settings.end_date is not None
            and settings.start_date > settings.end_date
        ):
            logger.warning(
                "REPORT_START_DATE is after REPORT_END_DATE, reports will be empty"
            )
        return settings

    @staticmethod
    def _parse_date(raw: str | None) -> datetime | None:
        """Parse an ISO date, returning None when unset.

        Args:
            raw: Raw environment value.

        Returns:
            datetime | None: Parsed date at midnight.
        """
        if not raw or not raw.strip():
            return None
        return datetime.fromisoformat(raw.strip())

    @staticmethod
    def _parse_ids(raw: str | None) -> tuple[int, ...]:
        if not raw:
            return ()
        return tuple(int(part) for part in raw.split(",") if part.strip())


__all__ = ["ReportingSettings"]
