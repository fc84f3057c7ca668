from core.domain.distance import DistanceRequest, DistanceResult
from core.domain.enums import CalculationMode, CaptureStep, GigStatus, PeriodMode, StepDirection
from core.domain.expense import BUSINESS_EXPENSE_CATEGORIES, DEFAULT_EXPENSE_CATEGORY, ExpenseRecord
from core.domain.gig import PATCHABLE_GIG_FIELDS, ConsolidatedGig, GigRecord, parse_iso_day
from core.domain.money import parse_amount, parse_rate, quantize_money, money_str
from core.domain.payment import (
    CapturedPayment,
    LegacyPayment,
    NetAmount,
    Payment,
    resolve_legacy_payment,
    resolve_payment,
)
from core.domain.period import PeriodRange
from core.domain.user import UserProfile

__all__ = [
    "GigStatus",
    "PeriodMode",
    "StepDirection",
    "CalculationMode",
    "CaptureStep",
    "GigRecord",
    "ConsolidatedGig",
    "PATCHABLE_GIG_FIELDS",
    "parse_iso_day",
    "ExpenseRecord",
    "BUSINESS_EXPENSE_CATEGORIES",
    "DEFAULT_EXPENSE_CATEGORY",
    "UserProfile",
    "PeriodRange",
    "parse_amount",
    "parse_rate",
    "quantize_money",
    "money_str",
    "NetAmount",
    "LegacyPayment",
    "CapturedPayment",
    "Payment",
    "resolve_payment",
    "resolve_legacy_payment",
    "DistanceRequest",
    "DistanceResult",
]
