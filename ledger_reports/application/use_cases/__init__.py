"""Application use cases package."""

from .account_operations import AccountOperationsUseCase
from .budget_operations import BudgetOperationsUseCase
from .category_operations import CategoryOperationsUseCase
from .exchange_rate_converter import ExchangeRateResolver
from .get_account_charts import GetAccountChartsUseCase
from .get_account_report import GetAccountReportUseCase
from .get_insight_totals import GetInsightTotalsUseCase
from .tag_operations import TagOperationsUseCase

__all__ = [
    "AccountOperationsUseCase",
    "BudgetOperationsUseCase",
    "CategoryOperationsUseCase",
    "ExchangeRateResolver",
    "GetAccountChartsUseCase",
    "GetAccountReportUseCase",
    "GetInsightTotalsUseCase",
    "TagOperationsUseCase",
]
