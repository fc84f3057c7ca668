from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from core.domain.enums import CaptureStep
from core.domain.expense import DEFAULT_EXPENSE_CATEGORY
from core.domain.money import ZERO
from core.domain.payment import NetAmount


@dataclass(frozen=True)
class OtherExpenseLine:
    """One itemized out-of-pocket cost; ``reimbursed`` never exceeds ``spent``."""

    spent: Decimal
    reimbursed: Decimal = ZERO
    category: str = DEFAULT_EXPENSE_CATEGORY
    description: str = ""

    @property
    def unreimbursed(self) -> Decimal:
        return NetAmount.of(self.spent, self.reimbursed).value


@dataclass
class PaymentCaptureState:
    step: CaptureStep = CaptureStep.TOTAL_PAYMENT
    total_received: Decimal = ZERO

    mileage: int = 0
    start_address: str = ""
    end_address: str = ""
    round_trip: bool = False
    per_day: bool = False
    calculating: bool = False
    mileage_error: Optional[str] = None

    parking_spent: Decimal = ZERO
    parking_reimbursed: Decimal = ZERO
    other_expenses: list[OtherExpenseLine] = field(default_factory=list)

    tax_rate: int = 0
    payment_method: Optional[str] = None

    confirmed: bool = False
    finalized: bool = False

    @property
    def unreimbursed_parking(self) -> Decimal:
        return NetAmount.of(self.parking_spent, self.parking_reimbursed).value

    @property
    def other_spent(self) -> Decimal:
        return sum((line.spent for line in self.other_expenses), ZERO)

    @property
    def other_reimbursed(self) -> Decimal:
        return sum((line.reimbursed for line in self.other_expenses), ZERO)

    @property
    def unreimbursed_other(self) -> Decimal:
        return sum((line.unreimbursed for line in self.other_expenses), ZERO)


@dataclass(frozen=True)
class CapturePreview:
    """Figures shown on the review step, rounded to cents."""

    total_received: Decimal
    tips: Decimal
    reimbursed_total: Decimal
    # total received less reimbursements, before tips
    net_received: Decimal
    taxable_income: Decimal
    over_reimbursed: bool
    unreimbursed_parking: Decimal
    unreimbursed_other: Decimal
    mileage: int
    mileage_deduction: Decimal
    business_deductions: Decimal
    tax_rate: int
    estimated_tax: Decimal


__all__ = ["OtherExpenseLine", "PaymentCaptureState", "CapturePreview"]
