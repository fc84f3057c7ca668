from dataclasses import dataclass
from datetime import date
from typing import List

from core.services.finance.models import FinanceAnalyticsRow, FinancePeriodRow, PeriodStats


@dataclass
class PeriodReportContext:
    stats: PeriodStats
    by_category: List[FinanceAnalyticsRow]
    cashflow: List[FinancePeriodRow]
    generated_on: date
