from __future__ import annotations

from calendar import monthrange
from datetime import date
from typing import Iterator

from core.domain.enums import PeriodMode, StepDirection
from core.domain.period import PeriodRange
from core.exceptions import ValidationError

# IRS estimated-tax income periods (not calendar quarters): first and last month.
IRS_QUARTER_MONTHS: dict[int, tuple[int, int]] = {
    1: (1, 3),
    2: (4, 5),
    3: (6, 8),
    4: (9, 12),
}

# Payment due dates as (month, day, year offset) for each quarter's income.
_IRS_DUE_DATES: dict[int, tuple[int, int, int]] = {
    1: (4, 15, 0),
    2: (6, 15, 0),
    3: (9, 15, 0),
    4: (1, 15, 1),
}


def normalize_mode(value: PeriodMode | str) -> PeriodMode:
    if isinstance(value, PeriodMode):
        return value
    token = (value or "").strip().lower()
    aliases = {"month": "monthly", "quarter": "quarterly", "year": "annual", "yearly": "annual"}
    try:
        return PeriodMode(aliases.get(token, token))
    except ValueError:
        raise ValidationError(f"Unsupported period mode: {value!r}", code="PERIOD_MODE_INVALID") from None


def normalize_direction(value: StepDirection | str) -> StepDirection:
    if isinstance(value, StepDirection):
        return value
    try:
        return StepDirection((value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unsupported step direction: {value!r}", code="STEP_DIRECTION_INVALID") from None


def irs_quarter(anchor: date) -> int:
    month = anchor.month
    if month <= 3:
        return 1
    if month <= 5:
        return 2
    if month <= 8:
        return 3
    return 4


def quarter_range(year: int, quarter: int) -> tuple[date, date]:
    if quarter not in IRS_QUARTER_MONTHS:
        raise ValidationError(f"Quarter must be 1-4, got {quarter}.", code="QUARTER_INVALID")
    first_month, last_month = IRS_QUARTER_MONTHS[quarter]
    return date(year, first_month, 1), date(year, last_month, monthrange(year, last_month)[1])


def estimated_tax_due_date(year: int, quarter: int) -> date:
    if quarter not in _IRS_DUE_DATES:
        raise ValidationError(f"Quarter must be 1-4, got {quarter}.", code="QUARTER_INVALID")
    month, day, offset = _IRS_DUE_DATES[quarter]
    return date(year + offset, month, day)


def resolve(mode: PeriodMode | str, anchor: date) -> PeriodRange:
    period_mode = normalize_mode(mode)
    if period_mode == PeriodMode.MONTHLY:
        last_day = monthrange(anchor.year, anchor.month)[1]
        return PeriodRange(
            start=date(anchor.year, anchor.month, 1),
            end=date(anchor.year, anchor.month, last_day),
            label=anchor.strftime("%B %Y"),
            mode=period_mode,
        )
    if period_mode == PeriodMode.QUARTERLY:
        quarter = irs_quarter(anchor)
        start, end = quarter_range(anchor.year, quarter)
        return PeriodRange(start=start, end=end, label=f"Q{quarter} {anchor.year}", mode=period_mode)
    return PeriodRange(
        start=date(anchor.year, 1, 1),
        end=date(anchor.year, 12, 31),
        label=str(anchor.year),
        mode=period_mode,
    )


def _shift_months(anchor: date, months: int) -> date:
    index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(anchor.day, monthrange(year, month)[1])
    return date(year, month, day)


def step(mode: PeriodMode | str, anchor: date, direction: StepDirection | str) -> date:
    """Anchor date of the adjacent period."""
    period_mode = normalize_mode(mode)
    delta = 1 if normalize_direction(direction) == StepDirection.NEXT else -1

    if period_mode == PeriodMode.MONTHLY:
        return _shift_months(anchor, delta)
    if period_mode == PeriodMode.ANNUAL:
        year = anchor.year + delta
        return date(year, anchor.month, min(anchor.day, monthrange(year, anchor.month)[1]))

    quarter = irs_quarter(anchor)
    year = anchor.year
    target = quarter + delta
    if target > 4:
        target, year = 1, year + 1
    elif target < 1:
        target, year = 4, year - 1
    first_month = IRS_QUARTER_MONTHS[target][0]
    # keep the day where the target month allows it, as the dashboard's date stepping does
    return date(year, first_month, min(anchor.day, monthrange(year, first_month)[1]))


def iter_periods(mode: PeriodMode | str, start: date, end: date) -> Iterator[PeriodRange]:
    """Consecutive ranges covering ``start``..``end``."""
    period_mode = normalize_mode(mode)
    anchor = start
    while True:
        current = resolve(period_mode, anchor)
        yield current
        if current.end >= end:
            return
        anchor = step(period_mode, current.start, StepDirection.NEXT)


__all__ = [
    "IRS_QUARTER_MONTHS",
    "normalize_mode",
    "normalize_direction",
    "irs_quarter",
    "quarter_range",
    "estimated_tax_due_date",
    "resolve",
    "step",
    "iter_periods",
]
