from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def parse_amount(value: object) -> Decimal:
    """
    Parse a stored decimal-as-string amount.

    Missing, blank, non-numeric, non-finite and negative inputs all read as 0;
    stored money is never trusted to be well formed.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        parsed = value
    else:
        text = str(value).strip().replace(",", "").lstrip("$")
        if not text:
            return ZERO
        try:
            parsed = Decimal(text)
        except (InvalidOperation, ValueError):
            logger.debug("Unparseable amount %r read as 0", value)
            return ZERO
    if not parsed.is_finite():
        logger.debug("Non-finite amount %r read as 0", value)
        return ZERO
    if parsed < ZERO:
        logger.debug("Negative amount %r read as 0", value)
        return ZERO
    return parsed


def parse_rate(value: object) -> Decimal | None:
    """Parse a percentage; ``None`` when absent so 0 stays a valid override."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value: object) -> str:
    """Normalized two-decimal string for persistence, e.g. ``"600.00"``."""
    return str(quantize_money(parse_amount(value)))


__all__ = ["ZERO", "CENT", "parse_amount", "parse_rate", "quantize_money", "money_str"]
