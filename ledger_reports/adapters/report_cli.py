"""CLI adapter printing currency sums and the income/expense chart.

The report covers ``REPORT_START_DATE`` to ``REPORT_END_DATE`` (defaulting
to the current month) for the asset accounts listed in
``REPORT_ACCOUNT_IDS``.
"""

from datetime import datetime

from ledger_reports.infrastructure.container import (
    build_account_charts,
    build_account_operations,
    build_conversion_policy,
    build_currency_directory,
    build_database_adapter,
    build_rate_resolver,
)
from ledger_reports.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from ledger_reports.infrastructure.settings import ReportingSettings


def _resolve_range(
    settings: ReportingSettings,
    today: datetime,
) -> tuple[datetime, datetime]:
    """Return the configured range, defaulting to the month of ``today``."""
    start = settings.start_date or datetime(today.year, today.month, 1)
    end = settings.end_date or today
    return start, end


def _format_sum_row(row: dict[str, object]) -> str:
    """Format one sum row for display."""
    return f"  {row['currency_code']}: {row['sum']}"


def main(step: str | None = None) -> None:
    """Print expense and income sums, then the income/expense chart.

    Args:
        step: Optional period step (``1D``, ``1W``, ``1M``...). Picked from
            the range length when omitted.
    """
    logger = get_app_logger()
    settings = ReportingSettings.from_env()
    get_usage_logger().info(
        f"report_cli run: {len(settings.account_ids)} accounts, step={step}"
    )
    if not settings.account_ids:
        logger.warning("REPORT_ACCOUNT_IDS is empty, nothing to report.")
        return

    start, end = _resolve_range(settings, datetime.now())
    db_adapter = build_database_adapter()
    directory = build_currency_directory(db_adapter)
    resolver = build_rate_resolver(settings, db_adapter, directory)
    policy = build_conversion_policy(settings, db_adapter, directory, resolver)
    operations = build_account_operations(policy, db_adapter)
    charts = build_account_charts(policy, db_adapter)

    expenses = operations.sum_expenses(start, end, settings.account_ids)
    income = operations.sum_income(start, end, settings.account_ids)
    datasets = charts.income_expense_chart(
        start,
        end,
        settings.account_ids,
        step=step,
    )

    print(
        f"Report {start.date()} to {end.date()} "
        f"(primary={policy.primary_currency.code}, "
        f"convert={policy.convert_to_primary})"
    )
    print("Expenses:")
    for row in expenses:
        print(_format_sum_row(row))
    print("Income:")
    for row in income:
        print(_format_sum_row(row))
    for dataset in datasets:
        series = dataset.series
        print(f"{dataset.label} ({series.currency.code}, {dataset.period}):")
        for label, amount in series.entries.items():
            converted = series.pc_entries.get(label)
            suffix = (
                f" ({converted} {series.primary_currency.code})"
                if converted is not None
                else ""
            )
            print(f"  {label}: {amount}{suffix}")

    resolver.summarize()


if __name__ == "__main__":  # pragma: no cover
    main()
