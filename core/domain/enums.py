from __future__ import annotations

from enum import Enum, IntEnum


class GigStatus(str, Enum):
    UPCOMING = "upcoming"
    PENDING_PAYMENT = "pending_payment"
    COMPLETED = "completed"


class PeriodMode(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class StepDirection(str, Enum):
    PREV = "prev"
    NEXT = "next"


class CalculationMode(str, Enum):
    LEGACY = "legacy"
    CAPTURED = "captured"


class CaptureStep(IntEnum):
    TOTAL_PAYMENT = 1
    MILEAGE = 2
    PARKING = 3
    OTHER_EXPENSES = 4
    TAX_RATE = 5
    REVIEW = 6


__all__ = ["GigStatus", "PeriodMode", "StepDirection", "CalculationMode", "CaptureStep"]
