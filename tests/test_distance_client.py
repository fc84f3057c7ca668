from __future__ import annotations

import json
from urllib.error import URLError
from urllib.parse import parse_qs, urlparse

import pytest

import infra.distance as distance_mod
from core.domain import DistanceRequest
from infra.distance import METERS_PER_MILE, HttpDistanceCalculator


class _Response:
    def __init__(self, payload) -> None:
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


def _ok_payload(miles: float) -> dict:
    return {
        "status": "OK",
        "rows": [{"elements": [{"status": "OK", "distance": {"text": f"{miles} mi", "value": miles * METERS_PER_MILE}}]}],
    }


@pytest.fixture
def fake_urlopen(monkeypatch):
    calls: list[dict] = []
    responses: list[object] = []

    def _urlopen(url, timeout=None):
        calls.append({"url": url, "timeout": timeout})
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return _Response(item)

    monkeypatch.setattr(distance_mod, "urlopen", _urlopen)
    return calls, responses


def test_one_way_distance_in_miles_with_imperial_query(fake_urlopen):
    calls, responses = fake_urlopen
    responses.append(_ok_payload(12.4))
    calc = HttpDistanceCalculator("maps-key", timeout=3.5)

    result = calc.distance(DistanceRequest("9 Home St", "1 Arena Way"))

    assert result.ok
    assert result.distance_miles == pytest.approx(12.4)
    query = parse_qs(urlparse(calls[0]["url"]).query)
    assert query["origins"] == ["9 Home St"]
    assert query["destinations"] == ["1 Arena Way"]
    assert query["units"] == ["imperial"]
    assert calls[0]["timeout"] == 3.5


def test_round_trip_doubles_and_reuses_cache(fake_urlopen):
    calls, responses = fake_urlopen
    responses.append(_ok_payload(10))
    calc = HttpDistanceCalculator("maps-key")

    first = calc.distance(DistanceRequest("A St", "B Ave"))
    second = calc.distance(DistanceRequest("a st", "b ave", round_trip=True))

    assert first.distance_miles == pytest.approx(10)
    assert second.distance_miles == pytest.approx(20)
    assert second.from_cache is True
    assert len(calls) == 1


def test_cache_expires_after_ttl(fake_urlopen):
    calls, responses = fake_urlopen
    responses.extend([_ok_payload(10), _ok_payload(11)])
    now = [1000.0]
    calc = HttpDistanceCalculator("maps-key", clock=lambda: now[0])

    calc.distance(DistanceRequest("A St", "B Ave"))
    now[0] += 24 * 60 * 60 + 1
    result = calc.distance(DistanceRequest("A St", "B Ave"))

    assert result.distance_miles == pytest.approx(11)
    assert len(calls) == 2


def test_unresolved_address_is_an_error_result(fake_urlopen):
    _, responses = fake_urlopen
    responses.append({"status": "OK", "rows": [{"elements": [{"status": "NOT_FOUND"}]}]})

    result = HttpDistanceCalculator("maps-key").distance(DistanceRequest("???", "1 Arena Way"))

    assert not result.ok
    assert result.status == "error"
    assert "route" in result.error


def test_api_error_status_is_reported(fake_urlopen):
    _, responses = fake_urlopen
    responses.append({"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."})

    result = HttpDistanceCalculator("maps-key").distance(DistanceRequest("A St", "B Ave"))

    assert result.error == "The provided API key is invalid."


def test_network_failure_and_timeout_never_raise(fake_urlopen):
    _, responses = fake_urlopen
    responses.extend([URLError("unreachable"), TimeoutError("slow")])
    calc = HttpDistanceCalculator("maps-key")

    assert calc.distance(DistanceRequest("A St", "B Ave")).error == "Distance service is unavailable."
    assert calc.distance(DistanceRequest("A St", "B Ave")).error == "Distance service is unavailable."


def test_missing_key_or_address_short_circuits(fake_urlopen):
    calls, _ = fake_urlopen

    assert not HttpDistanceCalculator(None).distance(DistanceRequest("A St", "B Ave")).ok
    assert not HttpDistanceCalculator("maps-key").distance(DistanceRequest("", "B Ave")).ok
    assert calls == []
