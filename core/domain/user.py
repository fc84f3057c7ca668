from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class UserProfile:
    id: int
    default_tax_percentage: Optional[int] = None
    home_address: Optional[str] = None

    def effective_tax_rate(self, fallback: int) -> int:
        # 0 is not a usable profile default; the original profile form treats it as unset
        if self.default_tax_percentage:
            return int(self.default_tax_percentage)
        return int(fallback)


__all__ = ["UserProfile"]
