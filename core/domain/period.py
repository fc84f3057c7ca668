from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.domain.enums import PeriodMode


@dataclass(frozen=True)
class PeriodRange:
    """Inclusive reporting window resolved from a mode and an anchor date."""

    start: date
    end: date
    label: str
    mode: PeriodMode = PeriodMode.MONTHLY

    def contains(self, day: date | None) -> bool:
        if day is None:
            return False
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


__all__ = ["PeriodRange"]
