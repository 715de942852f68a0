"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from datetime import date, datetime
import importlib

import streamlit as st
import altair as alt

from ledger_reports.domain.models import ChartDataset
from ledger_reports.infrastructure.container import (
    build_account_charts,
    build_conversion_policy,
    build_currency_directory,
    build_database_adapter,
    build_rate_resolver,
)
from ledger_reports.infrastructure.logging.logger import get_usage_logger
from ledger_reports.infrastructure.settings import ReportingSettings

_STEPS = ["auto", "1D", "1W", "1M", "3M", "6M", "1Y"]


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that numpy and pandas expose what Altair needs.

    Returns:
        tuple[bool, str | None]: ``(True, None)`` when charts can render,
        otherwise ``(False, message)``.
    """
    try:
        numpy = importlib.import_module("numpy")
        pandas = importlib.import_module("pandas")
    except ImportError as exc:
        return False, f"Charts need numpy and pandas: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "numpy is installed but incomplete (missing ndarray)."
    if not hasattr(pandas, "Timestamp"):
        return False, "pandas is installed but incomplete (missing Timestamp)."
    return True, None


def _fetch_charts(
    start: date,
    end: date,
    account_ids: tuple[int, ...],
    step: str | None,
) -> tuple[list[ChartDataset], list[dict[str, object]]]:
    """Fetch income/expense datasets and top expense accounts."""
    settings = ReportingSettings.from_env()
    db_adapter = build_database_adapter()
    directory = build_currency_directory(db_adapter)
    resolver = build_rate_resolver(settings, db_adapter, directory)
    policy = build_conversion_policy(settings, db_adapter, directory, resolver)
    charts = build_account_charts(policy, db_adapter)
    start_at = datetime(start.year, start.month, start.day)
    end_at = datetime(end.year, end.month, end.day)
    datasets = charts.income_expense_chart(start_at, end_at, account_ids, step)
    top_accounts = charts.top_accounts_chart(start_at, end_at, account_ids)
    resolver.summarize()
    return datasets, top_accounts


@st.cache_data(show_spinner=False)
def _load_charts(
    start: date,
    end: date,
    account_ids: tuple[int, ...],
    step: str | None,
    schema_version: int = 1,
) -> tuple[list[ChartDataset], list[dict[str, object]]]:
    """Cached wrapper around _fetch_charts for Streamlit sessions."""
    _ = schema_version
    return _fetch_charts(start, end, account_ids, step)


def _series_rows(
    datasets: Sequence[ChartDataset],
    use_primary: bool,
) -> list[dict[str, str | float]]:
    """Flatten datasets into Altair-ready rows.

    Args:
        datasets: Income/expense datasets.
        use_primary: Plot the converted entries instead of native ones.

    Returns:
        list[dict[str, str | float]]: One row per dataset and period.
    """
    rows: list[dict[str, str | float]] = []
    for dataset in datasets:
        series = dataset.series
        entries = series.pc_entries if use_primary else series.entries
        code = series.primary_currency.code if use_primary else series.currency.code
        for period, amount in entries.items():
            rows.append(
                {
                    "period": period,
                    "series": f"{dataset.label} ({series.currency.code})",
                    "amount": float(amount),
                    "amount_label": f"{amount} {code}",
                }
            )
    return rows


def _render_income_expense_chart(
    datasets: Sequence[ChartDataset],
    use_primary: bool,
) -> None:
    """Render earned and spent lines per currency."""
    rows = _series_rows(datasets, use_primary)
    st.subheader("Income vs. expenses")
    if not rows:
        st.info("No transactions in the selected range.")
        return
    chart = alt.Chart(alt.Data(values=rows)).mark_line(point=True).encode(
        x=alt.X("period:N", sort=None, title=None),
        y=alt.Y("amount:Q", title=None),
        color=alt.Color("series:N", legend=alt.Legend(orient="bottom")),
        tooltip=[
            alt.Tooltip("series:N"),
            alt.Tooltip("period:N"),
            alt.Tooltip("amount_label:N"),
        ],
    )
    st.altair_chart(chart, width="stretch")


def _render_top_accounts(rows: Sequence[dict[str, object]]) -> None:
    """Render the largest expense accounts as a bar chart."""
    st.subheader("Top expense accounts")
    if not rows:
        st.info("No expenses in the selected range.")
        return
    data = [
        {
            "account": f"{row['name']} ({row['currency_code']})",
            "amount": row["sum_float"],
            "amount_label": f"{row['sum']} {row['currency_code']}",
        }
        for row in rows
    ]
    chart = alt.Chart(alt.Data(values=data)).mark_bar().encode(
        x=alt.X("amount:Q", title=None),
        y=alt.Y("account:N", sort=None, title=None),
        tooltip=[alt.Tooltip("account:N"), alt.Tooltip("amount_label:N")],
    )
    st.altair_chart(chart, width="stretch")


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Ledger Reports", layout="wide")
    st.title("Ledger Reports")

    settings = ReportingSettings.from_env()
    if not settings.account_ids:
        st.warning("Set REPORT_ACCOUNT_IDS to the asset accounts to report on.")
        return

    today = date.today()
    default_start = (
        settings.start_date.date()
        if settings.start_date
        else date(today.year, 1, 1)
    )
    default_end = settings.end_date.date() if settings.end_date else today
    start = st.sidebar.date_input("Start", value=default_start)
    end = st.sidebar.date_input("End", value=default_end)
    step = st.sidebar.selectbox("Step", _STEPS, index=0)
    use_primary = st.sidebar.checkbox(
        f"Show in {settings.primary_currency}",
        value=settings.convert_to_primary,
        disabled=not settings.convert_to_primary,
    )
    if start > end:
        st.warning("The start date is after the end date.")
        return

    ok, message = _check_altair_dependencies()
    if not ok:
        st.error(message)
        return

    datasets, top_accounts = _load_charts(
        start,
        end,
        settings.account_ids,
        None if step == "auto" else step,
        schema_version=1,
    )
    get_usage_logger().info(
        f"Dashboard load: {start} to {end}, step={step}, "
        f"{len(settings.account_ids)} accounts"
    )
    st.caption(
        f"{len(datasets)} datasets for {len(settings.account_ids)} accounts"
    )
    left, right = st.columns(2)
    with left:
        _render_income_expense_chart(datasets, use_primary)
    with right:
        _render_top_accounts(top_accounts)


if __name__ == "__main__":  # pragma: no cover
    main()
