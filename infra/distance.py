# infra/distance.py
from __future__ import annotations

import json
import logging
import time
from threading import Lock
from typing import Callable, Optional
from urllib.error import URLError
from urllib.parse import urlencode
from urllib.request import urlopen

from core.domain.distance import DistanceRequest, DistanceResult
from core.interfaces import DistanceCalculator

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
CACHE_TTL_SECONDS = 24 * 60 * 60
METERS_PER_MILE = 1609.344


class HttpDistanceCalculator(DistanceCalculator):
    """
    Driving distance from the Google Distance Matrix API.

    One-way distances are cached in memory for a day per origin/destination
    pair; round trips double the cached value. Every failure is returned as
    an error result so callers can fall back to manual entry.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        timeout: float = 10.0,
        base_url: str = DISTANCE_MATRIX_URL,
        cache_ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._timeout = timeout
        self._base_url = base_url
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[tuple[str, str], tuple[float, float]] = {}
        self._lock = Lock()

    def distance(self, request: DistanceRequest) -> DistanceResult:
        origin = (request.start_address or "").strip()
        destination = (request.end_address or "").strip()
        if not origin or not destination:
            return DistanceResult.failure("Start and end addresses are required.")
        if not self._api_key:
            return DistanceResult.failure("Distance service is not configured.")

        key = (origin.lower(), destination.lower())
        cached = self._cached(key)
        if cached is not None:
            return DistanceResult.success(_trip(cached, request.round_trip), from_cache=True)

        try:
            payload = self._fetch(origin, destination)
        except (URLError, TimeoutError, OSError) as exc:
            logger.warning("Distance lookup failed: %s", exc)
            return DistanceResult.failure("Distance service is unavailable.")
        except ValueError as exc:
            logger.warning("Distance service returned an unreadable response: %s", exc)
            return DistanceResult.failure("Distance service returned an unreadable response.")

        one_way, error = _parse_one_way_miles(payload)
        if one_way is None:
            logger.info("No route between the given addresses: %s", error)
            return DistanceResult.failure(error or "Could not calculate distance.")

        with self._lock:
            self._cache[key] = (self._clock(), one_way)
        return DistanceResult.success(_trip(one_way, request.round_trip))

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _cached(self, key: tuple[str, str]) -> Optional[float]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            stored_at, miles = entry
            if self._clock() - stored_at > self._cache_ttl:
                del self._cache[key]
                return None
            return miles

    def _fetch(self, origin: str, destination: str) -> dict:
        query = urlencode(
            {
                "origins": origin,
                "destinations": destination,
                "units": "imperial",
                "key": self._api_key,
            }
        )
        with urlopen(f"{self._base_url}?{query}", timeout=self._timeout) as response:  # noqa: S310
            payload = json.loads(response.read().decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("response must be a JSON object")
        return payload


def _trip(one_way: float, round_trip: bool) -> float:
    return one_way * 2 if round_trip else one_way


def _parse_one_way_miles(payload: dict) -> tuple[Optional[float], Optional[str]]:
    status = str(payload.get("status") or "")
    if status != "OK":
        return None, payload.get("error_message") or f"Distance service error: {status or 'unknown'}"
    try:
        element = payload["rows"][0]["elements"][0]
    except (KeyError, IndexError, TypeError):
        return None, "Could not calculate distance."
    if element.get("status") != "OK":
        return None, "Could not find a route between these addresses."
    try:
        meters = float(element["distance"]["value"])
    except (KeyError, TypeError, ValueError):
        return None, "Could not calculate distance."
    return meters / METERS_PER_MILE, None


__all__ = ["HttpDistanceCalculator", "DISTANCE_MATRIX_URL", "CACHE_TTL_SECONDS", "METERS_PER_MILE"]
