from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class DistanceRequest:
    start_address: str
    end_address: str
    round_trip: bool = False


@dataclass(frozen=True)
class DistanceResult:
    status: str
    distance_miles: Optional[float] = None
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS and self.distance_miles is not None

    @staticmethod
    def success(distance_miles: float, *, from_cache: bool = False) -> "DistanceResult":
        return DistanceResult(status=STATUS_SUCCESS, distance_miles=float(distance_miles), from_cache=from_cache)

    @staticmethod
    def failure(error: str) -> "DistanceResult":
        return DistanceResult(status=STATUS_ERROR, error=error)


__all__ = ["DistanceRequest", "DistanceResult", "STATUS_SUCCESS", "STATUS_ERROR"]
