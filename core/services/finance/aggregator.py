from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from core.domain.expense import ExpenseRecord
from core.domain.gig import ConsolidatedGig
from core.domain.money import ZERO, quantize_money
from core.domain.period import PeriodRange
from core.services.finance.contributions import build_expense_row, build_gig_contribution
from core.services.finance.models import (
    ExpenseRow,
    GigExpenseRow,
    IncomeRow,
    PeriodStats,
    ProjectedRow,
    TaxRow,
    TipRow,
)
from core.services.finance.policy import TaxPolicy

logger = logging.getLogger(__name__)


def aggregate(
    consolidated: Iterable[ConsolidatedGig],
    expenses: Iterable[ExpenseRecord],
    period: PeriodRange,
    default_tax_rate: object = None,
    *,
    policy: Optional[TaxPolicy] = None,
) -> PeriodStats:
    """
    Derive a period's earnings, deductions and estimated tax.

    Pure over its inputs: every call re-parses the stored strings and rounds
    once at the end, so repeated calls on unchanged data are identical.
    Data problems are logged and noted, never raised.
    """
    policy = policy or TaxPolicy()
    default_rate = policy.default_rate(default_tax_rate)
    all_expenses = list(expenses)
    # itemized expenses linked to a gig replace its embedded "other" amount;
    # undated ones are never counted, so they must not replace it either
    linked_gig_ids = frozenset(
        e.gig_id for e in all_expenses if e.gig_id is not None and e.parsed_date() is not None
    )

    in_period = [gig for gig in consolidated if period.contains(gig.start_date)]

    income_rows: list[IncomeRow] = []
    tip_rows: list[TipRow] = []
    tax_rows: list[TaxRow] = []
    gig_expense_rows: list[GigExpenseRow] = []
    projected_rows: list[ProjectedRow] = []
    notes: list[str] = []

    completed = 0
    upcoming = 0
    total_miles = 0
    for gig in in_period:
        contribution = build_gig_contribution(
            gig=gig,
            default_rate=default_rate,
            policy=policy,
            linked_gig_ids=linked_gig_ids,
        )
        gig_expense_rows.append(contribution.expense)
        projected_rows.append(contribution.projected)
        total_miles += contribution.expense.miles
        if contribution.expense.over_reimbursed:
            notes.append(f"{gig.event_name} ({gig.start_date.isoformat()}): parking or other expense over-reimbursed.")

        if contribution.income is not None:
            completed += 1
            income_rows.append(contribution.income)
            if contribution.income.tips > ZERO:
                tip_rows.append(
                    TipRow(
                        gig_id=gig.id,
                        event_name=gig.event_name,
                        day=gig.start_date,
                        amount=contribution.income.tips,
                    )
                )
            if contribution.income.over_reimbursed:
                notes.append(
                    f"{gig.event_name} ({gig.start_date.isoformat()}): reimbursements exceed total received; "
                    "taxable income counted as tips only."
                )
        else:
            upcoming += 1
        if contribution.tax is not None:
            tax_rows.append(contribution.tax)

    expense_rows: list[ExpenseRow] = []
    for expense in all_expenses:
        row = build_expense_row(expense)
        if row is None or not period.contains(row.day):
            continue
        expense_rows.append(row)
        if row.over_reimbursed:
            notes.append(f"Expense {row.expense_id} ({row.category}): reimbursed above its amount; counted as 0.")

    income_rows.sort(key=lambda r: (r.start_date, r.gig_id))
    expense_rows.sort(key=lambda r: (r.day, r.expense_id))

    gig_deductions = _sum(row.total for row in gig_expense_rows)
    standalone = _sum(row.net for row in expense_rows)
    stats = PeriodStats(
        period=period,
        actual_earnings=quantize_money(_sum(row.taxable for row in income_rows)),
        projected_earnings=quantize_money(_sum(row.amount for row in projected_rows)),
        total_tips=quantize_money(_sum(row.tips for row in income_rows)),
        total_expenses=quantize_money(gig_deductions + standalone),
        estimated_tax=quantize_money(_sum(row.tax for row in tax_rows)),
        completed_gigs=completed,
        upcoming_gigs=upcoming,
        total_gigs=len(in_period),
        total_received=quantize_money(_sum(row.received for row in income_rows)),
        gig_deductions=quantize_money(gig_deductions),
        standalone_expenses=quantize_money(standalone),
        mileage_deduction=quantize_money(_sum(row.mileage_deduction for row in gig_expense_rows)),
        total_miles=total_miles,
        income_rows=income_rows,
        projected_rows=projected_rows,
        tip_rows=tip_rows,
        gig_expense_rows=gig_expense_rows,
        expense_rows=expense_rows,
        tax_rows=tax_rows,
        notes=notes,
    )
    logger.debug(
        "Aggregated %s: %s gigs, %s expenses, earnings=%s",
        period.label,
        stats.total_gigs,
        len(expense_rows),
        stats.actual_earnings,
    )
    return stats


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


__all__ = ["aggregate"]
