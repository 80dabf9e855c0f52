import asyncio

import httpx
import pytest

from factorynear.core.geo import Coordinate
from factorynear.domain.errors import LocationPermissionDenied, LocationTimeout, LocationUnavailable
from factorynear.location.sources import HttpLocationSource, PositionOptions


URL = "https://geo.example.test/json"


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", URL)
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(str(code), request=request, response=response)


def _patch(monkeypatch, handler):
    calls: list[float] = []

    async def fake_get_json_async(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        calls.append(timeout_seconds)
        return handler()

    monkeypatch.setattr("factorynear.location.sources.get_json_async", fake_get_json_async)
    return calls


def test_http_source_parses_fix_and_caches_it(monkeypatch):
    calls = _patch(monkeypatch, lambda: {"latitude": "14.1", "longitude": 101.4, "accuracy": 5000})
    source = HttpLocationSource(URL, http_timeout_seconds=15)
    options = PositionOptions(timeout_seconds=10, max_cache_age_seconds=300)

    fix = asyncio.run(source.get_current_position(options))
    again = asyncio.run(source.get_current_position(options))

    assert fix.coordinate == Coordinate(latitude=14.1, longitude=101.4)
    assert fix.accuracy_m == 5000.0
    assert again is fix
    assert calls == [10.0]


def test_http_source_refetches_when_cache_age_is_zero(monkeypatch):
    calls = _patch(monkeypatch, lambda: {"lat": 14.0, "lon": 101.0})
    source = HttpLocationSource(URL)
    options = PositionOptions(max_cache_age_seconds=0)

    monkeypatch.setattr("factorynear.location.sources.time.time", lambda: 1000.0)
    asyncio.run(source.get_current_position(options))
    monkeypatch.setattr("factorynear.location.sources.time.time", lambda: 1000.5)
    asyncio.run(source.get_current_position(options))

    assert len(calls) == 2


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (_status_error(403), LocationPermissionDenied),
        (_status_error(401), LocationPermissionDenied),
        (_status_error(503), LocationUnavailable),
        (httpx.ReadTimeout("slow"), LocationTimeout),
        (httpx.ConnectError("offline"), LocationUnavailable),
        (ValueError("not json"), LocationUnavailable),
    ],
)
def test_http_source_maps_failures_to_typed_errors(monkeypatch, error, expected):
    def handler():
        raise error

    _patch(monkeypatch, handler)
    with pytest.raises(expected):
        asyncio.run(HttpLocationSource(URL).get_current_position(PositionOptions()))


def test_http_source_rejects_payload_without_coordinates(monkeypatch):
    _patch(monkeypatch, lambda: {"city": "Prachin Buri"})
    with pytest.raises(LocationUnavailable):
        asyncio.run(HttpLocationSource(URL).get_current_position(PositionOptions()))
