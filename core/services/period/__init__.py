from .resolver import (
    IRS_QUARTER_MONTHS,
    estimated_tax_due_date,
    irs_quarter,
    iter_periods,
    normalize_direction,
    normalize_mode,
    quarter_range,
    resolve,
    step,
)

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
