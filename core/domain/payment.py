from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from core.domain.enums import CalculationMode
from core.domain.gig import GigRecord
from core.domain.money import ZERO, parse_amount


@dataclass(frozen=True)
class NetAmount:
    """A subtraction result clamped at zero, remembering whether it went under."""

    value: Decimal
    over_reimbursed: bool = False

    @staticmethod
    def of(spent: Decimal, reimbursed: Decimal) -> "NetAmount":
        net = spent - reimbursed
        if net < ZERO:
            return NetAmount(ZERO, True)
        return NetAmount(net, False)


@dataclass(frozen=True)
class LegacyPayment:
    pay: Decimal
    tips: Decimal
    parking: Decimal
    other: Decimal

    mode = CalculationMode.LEGACY

    @property
    def taxable(self) -> NetAmount:
        return NetAmount(self.pay + self.tips)

    @property
    def received(self) -> Decimal:
        return self.pay + self.tips

    @property
    def parking_deduction(self) -> Decimal:
        return self.parking

    @property
    def other_deduction(self) -> Decimal:
        return self.other


@dataclass(frozen=True)
class CapturedPayment:
    total_received: Decimal
    tips: Decimal
    reimbursed_parking: Decimal
    reimbursed_other: Decimal
    unreimbursed_parking: Decimal
    unreimbursed_other: Decimal

    mode = CalculationMode.CAPTURED

    @property
    def taxable(self) -> NetAmount:
        net = NetAmount.of(self.total_received, self.reimbursed_parking + self.reimbursed_other)
        return NetAmount(net.value + self.tips, net.over_reimbursed)

    @property
    def received(self) -> Decimal:
        return self.total_received + self.tips

    @property
    def parking_deduction(self) -> Decimal:
        return self.unreimbursed_parking

    @property
    def other_deduction(self) -> Decimal:
        return self.unreimbursed_other


Payment = Union[LegacyPayment, CapturedPayment]


def resolve_legacy_payment(record: GigRecord) -> LegacyPayment:
    """Legacy single-amount reading: actual pay, falling back to expected pay."""
    has_actual = bool(str(record.actual_pay or "").strip())
    pay = parse_amount(record.actual_pay) if has_actual else parse_amount(record.expected_pay)
    return LegacyPayment(
        pay=pay,
        tips=parse_amount(record.tips),
        parking=parse_amount(record.parking_expense),
        other=parse_amount(record.other_expenses),
    )


def resolve_payment(record: GigRecord) -> Payment:
    """Pick the calculation mode once per record."""
    total_received = parse_amount(record.total_received)
    if total_received > ZERO:
        return CapturedPayment(
            total_received=total_received,
            tips=parse_amount(record.tips),
            reimbursed_parking=parse_amount(record.reimbursed_parking),
            reimbursed_other=parse_amount(record.reimbursed_other),
            unreimbursed_parking=parse_amount(record.unreimbursed_parking),
            unreimbursed_other=parse_amount(record.unreimbursed_other),
        )
    return resolve_legacy_payment(record)


__all__ = [
    "NetAmount",
    "LegacyPayment",
    "CapturedPayment",
    "Payment",
    "resolve_payment",
    "resolve_legacy_payment",
]
