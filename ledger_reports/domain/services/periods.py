"""Period navigation for fixed-step series."""

from datetime import datetime
from enum import Enum

from dateutil.relativedelta import MO, relativedelta

from ledger_reports.domain.errors import UnsupportedStepError


class Step(str, Enum):
    """Supported period lengths, identified by their range code."""

    DAY = "1D"
    WEEK = "1W"
    MONTH = "1M"
    QUARTER = "3M"
    HALF_YEAR = "6M"
    YEAR = "1Y"

    @classmethod
    def parse(cls, value) -> "Step":
        """Return the step for a range code or a step name.

        Args:
            value: Step, range code ("1M") or name ("month", "half_year").

        Returns:
            Step: Matching step.

        Raises:
            UnsupportedStepError: When the value is not a known step.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(text.upper())
        except ValueError:
            pass
        try:
            return cls[text.upper().replace("-", "_")]
        except KeyError as exc:
            raise UnsupportedStepError(f"Unsupported period step: {value}") from exc


_DELTAS = {
    Step.DAY: relativedelta(days=1),
    Step.WEEK: relativedelta(weeks=1),
    Step.MONTH: relativedelta(months=1),
    Step.QUARTER: relativedelta(months=3),
    Step.HALF_YEAR: relativedelta(months=6),
    Step.YEAR: relativedelta(years=1),
}


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_period(moment: datetime, step: Step) -> datetime:
    """Return the first instant of the period containing ``moment``."""
    step = Step.parse(step)
    day = start_of_day(moment)
    if step is Step.DAY:
        return day
    if step is Step.WEEK:
        return day + relativedelta(weekday=MO(-1))
    if step is Step.MONTH:
        return day.replace(day=1)
    if step is Step.QUARTER:
        return day.replace(month=((day.month - 1) // 3) * 3 + 1, day=1)
    if step is Step.HALF_YEAR:
        return day.replace(month=1 if day.month <= 6 else 7, day=1)
    return day.replace(month=1, day=1)


def end_of_period(moment: datetime, step: Step) -> datetime:
    """Return the last instant of the period containing ``moment``."""
    step = Step.parse(step)
    following = start_of_period(moment, step) + _DELTAS[step]
    return following - relativedelta(microseconds=1)


def add_period(moment: datetime, step: Step, periods: int = 1) -> datetime:
    """Move ``moment`` forward by a number of periods."""
    step = Step.parse(step)
    return moment + _DELTAS[step] * periods


def period_label(moment: datetime, step: Step) -> str:
    """Return the label of the period containing ``moment``.

    Labels sort chronologically: ``2024-01-05``, ``2024-W01``, ``2024-01``,
    ``2024-Q1``, ``2024-H1`` and ``2024``.
    """
    step = Step.parse(step)
    if step is Step.DAY:
        return moment.strftime("%Y-%m-%d")
    if step is Step.WEEK:
        iso_year, iso_week, _ = moment.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if step is Step.MONTH:
        return moment.strftime("%Y-%m")
    if step is Step.QUARTER:
        return f"{moment.year}-Q{(moment.month - 1) // 3 + 1}"
    if step is Step.HALF_YEAR:
        return f"{moment.year}-H{1 if moment.month <= 6 else 2}"
    return str(moment.year)


def period_boundaries(start: datetime, end: datetime, step: Step) -> list[datetime]:
    """Return the end-of-period instants between ``start`` and ``end``.

    ``start`` is widened to the start of its day and ``end`` to the end of
    its day. The last period is included even when ``end`` falls inside it;
    its boundary is then ``end`` itself.

    Args:
        start: First day of the range.
        end: Last day of the range.
        step: Period length.

    Returns:
        list[datetime]: Ordered boundaries, empty when ``start > end``.
    """
    step = Step.parse(step)
    if start > end:
        return []
    current = start_of_day(start)
    last = end_of_day(end)
    boundaries = []
    while current <= last:
        boundaries.append(min(end_of_period(current, step), last))
        current = add_period(start_of_period(current, step), step)
    return boundaries


def calculate_step(start: datetime, end: datetime) -> Step:
    """Pick a step that keeps long ranges readable."""
    delta = relativedelta(end, start)
    months = abs(delta.years * 12 + delta.months)
    step = Step.DAY
    if months > 3:
        step = Step.WEEK
    if months > 24:
        step = Step.MONTH
    if months > 100:
        step = Step.YEAR
    return step


__all__ = [
    "Step",
    "add_period",
    "calculate_step",
    "end_of_day",
    "end_of_period",
    "period_boundaries",
    "period_label",
    "start_of_day",
    "start_of_period",
]
