from __future__ import annotations

from core.domain.expense import ExpenseRecord
from core.domain.gig import GigRecord
from core.domain.user import UserProfile
from infra.db.models import ExpenseORM, GigORM, UserProfileORM


def gig_to_orm(gig: GigRecord) -> GigORM:
    return GigORM(
        # 0 / None lets the database assign the id
        id=gig.id or None,
        user_id=gig.user_id,
        event_name=gig.event_name,
        client_name=gig.client_name,
        gig_type=gig.gig_type,
        date=gig.date,
        status=gig.status,
        expected_pay=gig.expected_pay,
        actual_pay=gig.actual_pay,
        tips=gig.tips,
        parking_expense=gig.parking_expense,
        other_expenses=gig.other_expenses,
        total_received=gig.total_received,
        reimbursed_parking=gig.reimbursed_parking,
        reimbursed_other=gig.reimbursed_other,
        unreimbursed_parking=gig.unreimbursed_parking,
        unreimbursed_other=gig.unreimbursed_other,
        mileage=gig.mileage,
        tax_percentage=gig.tax_percentage,
        payment_method=gig.payment_method,
        gig_address=gig.gig_address,
        starting_address=gig.starting_address,
        got_paid_date=gig.got_paid_date,
    )


def gig_from_orm(obj: GigORM) -> GigRecord:
    return GigRecord(
        id=obj.id,
        user_id=obj.user_id,
        event_name=obj.event_name,
        client_name=obj.client_name or "",
        gig_type=obj.gig_type or "",
        date=obj.date,
        status=obj.status,
        expected_pay=obj.expected_pay,
        actual_pay=obj.actual_pay,
        tips=obj.tips,
        parking_expense=obj.parking_expense,
        other_expenses=obj.other_expenses,
        total_received=obj.total_received,
        reimbursed_parking=obj.reimbursed_parking,
        reimbursed_other=obj.reimbursed_other,
        unreimbursed_parking=obj.unreimbursed_parking,
        unreimbursed_other=obj.unreimbursed_other,
        mileage=obj.mileage,
        tax_percentage=obj.tax_percentage,
        payment_method=obj.payment_method,
        gig_address=obj.gig_address,
        starting_address=obj.starting_address,
        got_paid_date=obj.got_paid_date,
    )


def expense_to_orm(expense: ExpenseRecord) -> ExpenseORM:
    return ExpenseORM(
        id=expense.id or None,
        user_id=expense.user_id,
        date=expense.date,
        amount=expense.amount,
        category=expense.category,
        business_purpose=expense.business_purpose,
        merchant=expense.merchant,
        reimbursed_amount=expense.reimbursed_amount,
        gig_id=expense.gig_id,
    )


def expense_from_orm(obj: ExpenseORM) -> ExpenseRecord:
    return ExpenseRecord(
        id=obj.id,
        user_id=obj.user_id,
        date=obj.date,
        amount=obj.amount,
        category=obj.category,
        business_purpose=obj.business_purpose or "",
        merchant=obj.merchant,
        reimbursed_amount=obj.reimbursed_amount,
        gig_id=obj.gig_id,
    )


def profile_to_orm(profile: UserProfile) -> UserProfileORM:
    return UserProfileORM(
        id=profile.id,
        default_tax_percentage=profile.default_tax_percentage,
        home_address=profile.home_address,
    )


def profile_from_orm(obj: UserProfileORM) -> UserProfile:
    return UserProfile(
        id=obj.id,
        default_tax_percentage=obj.default_tax_percentage,
        home_address=obj.home_address,
    )


__all__ = [
    "gig_to_orm",
    "gig_from_orm",
    "expense_to_orm",
    "expense_from_orm",
    "profile_to_orm",
    "profile_from_orm",
]
