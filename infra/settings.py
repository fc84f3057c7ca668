# infra/settings.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from core.exceptions import ValidationError
from core.services.consolidation import DEFAULT_WINDOW_DAYS
from core.services.finance.policy import DEFAULT_FALLBACK_TAX_RATE, DEFAULT_MILEAGE_RATE, TaxPolicy
from infra.path import default_db_path

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class EngineSettings:
    database_url: str
    mileage_rate: Decimal = DEFAULT_MILEAGE_RATE
    default_tax_rate: int = DEFAULT_FALLBACK_TAX_RATE
    multi_day_window_days: int = DEFAULT_WINDOW_DAYS
    google_maps_api_key: Optional[str] = None
    distance_timeout_seconds: float = DEFAULT_DISTANCE_TIMEOUT_SECONDS

    def tax_policy(self) -> TaxPolicy:
        return TaxPolicy(mileage_rate=self.mileage_rate, fallback_tax_rate=self.default_tax_rate)


def _text(env: Mapping[str, str], key: str) -> str:
    return (env.get(key) or "").strip()


def _decimal(env: Mapping[str, str], key: str, default: Decimal) -> Decimal:
    raw = _text(env, key)
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"{key} must be a decimal number, got {raw!r}.", code="SETTINGS_INVALID") from None
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{key} must be a non-negative number, got {raw!r}.", code="SETTINGS_INVALID")
    return value


def _int(env: Mapping[str, str], key: str, default: int, *, minimum: int = 0, maximum: int | None = None) -> int:
    raw = _text(env, key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{key} must be an integer, got {raw!r}.", code="SETTINGS_INVALID") from None
    if value < minimum or (maximum is not None and value > maximum):
        raise ValidationError(f"{key} is out of range: {value}.", code="SETTINGS_INVALID")
    return value


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _text(env, key)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{key} must be a number, got {raw!r}.", code="SETTINGS_INVALID") from None
    if value <= 0:
        raise ValidationError(f"{key} must be positive, got {raw!r}.", code="SETTINGS_INVALID")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> EngineSettings:
    """Read ``GIG_*`` environment variables; unset values keep their defaults."""
    env = os.environ if env is None else env
    database_url = _text(env, "GIG_DATABASE_URL") or f"sqlite:///{default_db_path().as_posix()}"
    settings = EngineSettings(
        database_url=database_url,
        mileage_rate=_decimal(env, "GIG_MILEAGE_RATE", DEFAULT_MILEAGE_RATE),
        default_tax_rate=_int(env, "GIG_DEFAULT_TAX_RATE", DEFAULT_FALLBACK_TAX_RATE, maximum=100),
        multi_day_window_days=_int(env, "GIG_MULTI_DAY_WINDOW_DAYS", DEFAULT_WINDOW_DAYS, minimum=1),
        google_maps_api_key=_text(env, "GOOGLE_MAPS_API_KEY") or None,
        distance_timeout_seconds=_float(env, "GIG_DISTANCE_TIMEOUT", DEFAULT_DISTANCE_TIMEOUT_SECONDS),
    )
    if settings.google_maps_api_key is None:
        logger.info("GOOGLE_MAPS_API_KEY not set; mileage must be entered manually")
    return settings


__all__ = ["EngineSettings", "load_settings", "DEFAULT_DISTANCE_TIMEOUT_SECONDS"]
