from .aggregator import aggregate
from .analytics import build_category_analytics
from .cashflow import build_period_cashflow
from .models import (
    ExpenseRow,
    FinanceAnalyticsRow,
    FinancePeriodRow,
    GigExpenseRow,
    IncomeRow,
    PeriodNavigation,
    PeriodStats,
    ProjectedRow,
    TaxRow,
    TipRow,
)
from .policy import TaxPolicy
from .service import FinanceService

__all__ = [
    "FinanceService",
    "TaxPolicy",
    "aggregate",
    "build_category_analytics",
    "build_period_cashflow",
    "PeriodStats",
    "PeriodNavigation",
    "IncomeRow",
    "TipRow",
    "GigExpenseRow",
    "ExpenseRow",
    "TaxRow",
    "ProjectedRow",
    "FinancePeriodRow",
    "FinanceAnalyticsRow",
]
