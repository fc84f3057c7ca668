from __future__ import annotations

from datetime import date
from decimal import Decimal

from core.domain.enums import PeriodMode
from core.domain.money import ZERO, quantize_money
from core.services.finance.models import FinancePeriodRow, PeriodStats
from core.services.period import iter_periods


def build_period_cashflow(stats: PeriodStats) -> list[FinancePeriodRow]:
    """Monthly buckets tiling the period: taxable income, deductions and tax."""
    months = list(iter_periods(PeriodMode.MONTHLY, stats.period.start, stats.period.end))
    buckets: dict[date, dict[str, Decimal]] = {
        month.start: {"income": ZERO, "deductions": ZERO, "tax": ZERO} for month in months
    }

    def bucket_for(day: date) -> dict[str, Decimal]:
        return buckets[date(day.year, day.month, 1)]

    for row in stats.income_rows:
        bucket_for(row.start_date)["income"] += row.taxable
    for row in stats.tax_rows:
        bucket_for(row.day)["tax"] += row.tax
    for row in stats.gig_expense_rows:
        bucket_for(row.day)["deductions"] += row.total
    for row in stats.expense_rows:
        bucket_for(row.day)["deductions"] += row.net

    out: list[FinancePeriodRow] = []
    for month in months:
        bucket = buckets[month.start]
        out.append(
            FinancePeriodRow(
                period_key=f"{month.start.year}-{month.start.month:02d}",
                period_start=month.start,
                period_end=month.end,
                taxable_income=quantize_money(bucket["income"]),
                deductions=quantize_money(bucket["deductions"]),
                estimated_tax=quantize_money(bucket["tax"]),
            )
        )
    return out


__all__ = ["build_period_cashflow"]
