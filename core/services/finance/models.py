from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from core.domain.enums import CalculationMode, GigStatus
from core.domain.period import PeriodRange


@dataclass(frozen=True)
class IncomeRow:
    gig_id: int
    event_name: str
    client_name: str
    start_date: date
    end_date: date
    is_multi_day: bool
    mode: CalculationMode
    received: Decimal
    reimbursed: Decimal
    tips: Decimal
    taxable: Decimal
    over_reimbursed: bool = False


@dataclass(frozen=True)
class TipRow:
    gig_id: int
    event_name: str
    day: date
    amount: Decimal


@dataclass(frozen=True)
class GigExpenseRow:
    gig_id: int
    event_name: str
    day: date
    status: GigStatus
    parking: Decimal
    other: Decimal
    miles: int
    mileage_deduction: Decimal
    total: Decimal
    other_superseded: bool = False
    over_reimbursed: bool = False


@dataclass(frozen=True)
class ExpenseRow:
    expense_id: int
    day: date
    category: str
    merchant: Optional[str]
    business_purpose: str
    amount: Decimal
    reimbursed: Decimal
    net: Decimal
    gig_id: Optional[int] = None
    over_reimbursed: bool = False


@dataclass(frozen=True)
class TaxRow:
    gig_id: int
    event_name: str
    day: date
    taxable: Decimal
    rate: Decimal
    rate_overridden: bool
    tax: Decimal


@dataclass(frozen=True)
class ProjectedRow:
    gig_id: int
    event_name: str
    day: date
    status: GigStatus
    amount: Decimal


@dataclass(frozen=True)
class PeriodStats:
    period: PeriodRange
    actual_earnings: Decimal
    projected_earnings: Decimal
    total_tips: Decimal
    total_expenses: Decimal
    estimated_tax: Decimal
    completed_gigs: int
    upcoming_gigs: int
    total_gigs: int
    total_received: Decimal = Decimal("0.00")
    gig_deductions: Decimal = Decimal("0.00")
    standalone_expenses: Decimal = Decimal("0.00")
    mileage_deduction: Decimal = Decimal("0.00")
    total_miles: int = 0
    income_rows: list[IncomeRow] = field(default_factory=list)
    projected_rows: list[ProjectedRow] = field(default_factory=list)
    tip_rows: list[TipRow] = field(default_factory=list)
    gig_expense_rows: list[GigExpenseRow] = field(default_factory=list)
    expense_rows: list[ExpenseRow] = field(default_factory=list)
    tax_rows: list[TaxRow] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def net_income(self) -> Decimal:
        return self.actual_earnings - self.total_expenses


@dataclass(frozen=True)
class FinanceAnalyticsRow:
    dimension: str
    key: str
    label: str
    amount: Decimal
    reimbursed: Decimal
    net: Decimal
    count: int


@dataclass(frozen=True)
class FinancePeriodRow:
    period_key: str
    period_start: date
    period_end: date
    taxable_income: Decimal
    deductions: Decimal
    estimated_tax: Decimal


@dataclass(frozen=True)
class PeriodNavigation:
    current: PeriodRange
    previous: PeriodRange
    next: PeriodRange
    previous_anchor: date
    next_anchor: date


__all__ = [
    "IncomeRow",
    "TipRow",
    "GigExpenseRow",
    "ExpenseRow",
    "TaxRow",
    "ProjectedRow",
    "PeriodStats",
    "FinanceAnalyticsRow",
    "FinancePeriodRow",
    "PeriodNavigation",
]
