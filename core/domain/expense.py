from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.gig import parse_iso_day

BUSINESS_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Promo & Marketing",
    "Car (besides mileage)",
    "Platform or Payment Fees",
    "Hired Help",
    "Big Gear or Equipment",
    "Insurance (other than health)",
    "Legal and Professional Services",
    "Office Expenses",
    "Rent or Lease (equipment or business property)",
    "Gear Repairs and Maintenance",
    "Supplies",
    "Work Travel",
    "Work Meals (50% deductible)",
    "Utilities",
    "Appearance / Wardrobe (for performers/models)",
    "Other Expenses",
)

DEFAULT_EXPENSE_CATEGORY = "Other Expenses"


@dataclass(frozen=True)
class ExpenseRecord:
    """A standalone business expense, optionally linked to a gig."""

    id: int
    date: str
    amount: str
    category: str = DEFAULT_EXPENSE_CATEGORY
    business_purpose: str = ""
    merchant: Optional[str] = None
    reimbursed_amount: Optional[str] = "0"
    gig_id: Optional[int] = None
    user_id: Optional[int] = None

    def parsed_date(self) -> Optional[date]:
        return parse_iso_day(self.date)


__all__ = ["ExpenseRecord", "BUSINESS_EXPENSE_CATEGORIES", "DEFAULT_EXPENSE_CATEGORY"]
