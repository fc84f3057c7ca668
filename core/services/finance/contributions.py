from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.domain.expense import ExpenseRecord
from core.domain.gig import ConsolidatedGig
from core.domain.money import ZERO, parse_amount
from core.domain.payment import CapturedPayment, NetAmount, resolve_legacy_payment, resolve_payment
from core.services.finance.models import (
    ExpenseRow,
    GigExpenseRow,
    IncomeRow,
    ProjectedRow,
    TaxRow,
)
from core.services.finance.policy import TaxPolicy, clamp_miles, tax_on

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GigContribution:
    """Everything one consolidated gig adds to a period's statistics, unrounded."""

    gig: ConsolidatedGig
    income: Optional[IncomeRow]
    tax: Optional[TaxRow]
    expense: GigExpenseRow
    projected: ProjectedRow


def build_income_row(gig: ConsolidatedGig) -> IncomeRow:
    payment = resolve_payment(gig.primary)
    taxable = payment.taxable
    if isinstance(payment, CapturedPayment):
        reimbursed = payment.reimbursed_parking + payment.reimbursed_other
    else:
        reimbursed = ZERO
    if taxable.over_reimbursed:
        logger.warning(
            "Gig %s reimbursements exceed total received; taxable income clamped to tips",
            gig.id,
        )
    return IncomeRow(
        gig_id=gig.id,
        event_name=gig.event_name,
        client_name=gig.client_name,
        start_date=gig.start_date,
        end_date=gig.end_date,
        is_multi_day=gig.is_multi_day,
        mode=payment.mode,
        received=payment.received,
        reimbursed=reimbursed,
        tips=payment.tips,
        taxable=taxable.value,
        over_reimbursed=taxable.over_reimbursed,
    )


def build_tax_row(
    *,
    gig: ConsolidatedGig,
    taxable: Decimal,
    default_rate: Decimal,
    policy: TaxPolicy,
) -> TaxRow:
    rate, overridden = policy.gig_rate(gig.tax_percentage, default_rate)
    return TaxRow(
        gig_id=gig.id,
        event_name=gig.event_name,
        day=gig.start_date,
        taxable=taxable,
        rate=rate,
        rate_overridden=overridden,
        tax=tax_on(taxable, rate),
    )


def build_gig_expense_row(
    *,
    gig: ConsolidatedGig,
    policy: TaxPolicy,
    other_superseded: bool,
) -> GigExpenseRow:
    record = gig.primary
    payment = resolve_payment(record)
    parking = payment.parking_deduction
    other = ZERO if other_superseded else payment.other_deduction

    over_reimbursed = False
    if isinstance(payment, CapturedPayment):
        # gross spent is kept on the legacy fields for older readers
        spent_parking = parse_amount(record.parking_expense)
        spent_other = parse_amount(record.other_expenses)
        if record.parking_expense is not None and NetAmount.of(spent_parking, payment.reimbursed_parking).over_reimbursed:
            over_reimbursed = True
        if record.other_expenses is not None and NetAmount.of(spent_other, payment.reimbursed_other).over_reimbursed:
            over_reimbursed = True

    miles = clamp_miles(record.mileage)
    mileage_deduction = policy.mileage_deduction(miles)
    return GigExpenseRow(
        gig_id=gig.id,
        event_name=gig.event_name,
        day=gig.start_date,
        status=gig.status,
        parking=parking,
        other=other,
        miles=miles,
        mileage_deduction=mileage_deduction,
        total=parking + other + mileage_deduction,
        other_superseded=other_superseded,
        over_reimbursed=over_reimbursed,
    )


def build_projected_row(gig: ConsolidatedGig) -> ProjectedRow:
    legacy = resolve_legacy_payment(gig.primary)
    if gig.is_completed:
        amount = legacy.pay + legacy.tips
    else:
        amount = parse_amount(gig.expected_pay) + legacy.tips
    return ProjectedRow(
        gig_id=gig.id,
        event_name=gig.event_name,
        day=gig.start_date,
        status=gig.status,
        amount=amount,
    )


def build_gig_contribution(
    *,
    gig: ConsolidatedGig,
    default_rate: Decimal,
    policy: TaxPolicy,
    linked_gig_ids: frozenset[int],
) -> GigContribution:
    other_superseded = any(record_id in linked_gig_ids for record_id in gig.record_ids)
    income: Optional[IncomeRow] = None
    tax: Optional[TaxRow] = None
    if gig.is_completed:
        income = build_income_row(gig)
        tax = build_tax_row(gig=gig, taxable=income.taxable, default_rate=default_rate, policy=policy)
    return GigContribution(
        gig=gig,
        income=income,
        tax=tax,
        expense=build_gig_expense_row(gig=gig, policy=policy, other_superseded=other_superseded),
        projected=build_projected_row(gig),
    )


def build_expense_row(expense: ExpenseRecord) -> Optional[ExpenseRow]:
    day = expense.parsed_date()
    if day is None:
        logger.warning("Expense %s has malformed date %r; skipped", expense.id, expense.date)
        return None
    amount = parse_amount(expense.amount)
    reimbursed = parse_amount(expense.reimbursed_amount)
    net = NetAmount.of(amount, reimbursed)
    if net.over_reimbursed:
        logger.warning("Expense %s reimbursed above its amount; net deduction is 0", expense.id)
    return ExpenseRow(
        expense_id=expense.id,
        day=day,
        category=expense.category,
        merchant=expense.merchant,
        business_purpose=expense.business_purpose,
        amount=amount,
        reimbursed=reimbursed,
        net=net.value,
        gig_id=expense.gig_id,
        over_reimbursed=net.over_reimbursed,
    )


__all__ = [
    "GigContribution",
    "build_income_row",
    "build_tax_row",
    "build_gig_expense_row",
    "build_projected_row",
    "build_gig_contribution",
    "build_expense_row",
]
