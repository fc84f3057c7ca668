from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from core.domain.money import ZERO, parse_rate

logger = logging.getLogger(__name__)

DEFAULT_MILEAGE_RATE = Decimal("0.70")
DEFAULT_FALLBACK_TAX_RATE = 23
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TaxPolicy:
    """Rates used by the aggregator and the payment capture preview."""

    mileage_rate: Decimal = DEFAULT_MILEAGE_RATE
    fallback_tax_rate: int = DEFAULT_FALLBACK_TAX_RATE

    def default_rate(self, default_tax_rate: object) -> Decimal:
        parsed = parse_rate(default_tax_rate)
        # a missing or zero profile default falls back, unlike a per-gig override
        if parsed is None or parsed == ZERO:
            return Decimal(self.fallback_tax_rate)
        return clamp_rate(parsed)

    def gig_rate(self, tax_percentage: object, default_rate: Decimal) -> tuple[Decimal, bool]:
        """Rate for one gig and whether it came from a per-gig override (0 included)."""
        parsed = parse_rate(tax_percentage)
        if parsed is None:
            return default_rate, False
        return clamp_rate(parsed), True

    def mileage_deduction(self, miles: object) -> Decimal:
        return Decimal(clamp_miles(miles)) * self.mileage_rate


def clamp_rate(rate: Decimal) -> Decimal:
    if rate < ZERO:
        logger.warning("Negative tax rate %s clamped to 0", rate)
        return ZERO
    if rate > _HUNDRED:
        logger.warning("Tax rate %s above 100 clamped", rate)
        return _HUNDRED
    return rate


def clamp_miles(miles: object) -> int:
    try:
        value = int(miles or 0)
    except (TypeError, ValueError):
        logger.debug("Unparseable mileage %r read as 0", miles)
        return 0
    return max(0, value)


def tax_on(amount: Decimal, rate: Decimal) -> Decimal:
    return amount * rate / _HUNDRED


__all__ = [
    "TaxPolicy",
    "DEFAULT_MILEAGE_RATE",
    "DEFAULT_FALLBACK_TAX_RATE",
    "clamp_rate",
    "clamp_miles",
    "tax_on",
]
