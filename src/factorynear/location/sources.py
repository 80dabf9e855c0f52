"""
Device location sources.

A source answers one question ("where is the user?") with either a `PositionFix`
or a typed `LocationError`. The resolver owns the timeout and the fallback; a
source only has to report what went wrong.

Implementations:
- `StaticLocationSource`: a fixed fix (CLI demos, tests).
- `HttpLocationSource`: an IP-geolocation JSON endpoint (e.g. `https://ipapi.co/json/`).
  IP lookups have no notion of "high accuracy", so that option is accepted and ignored.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from factorynear.config.settings import Settings
from factorynear.core.geo import Coordinate
from factorynear.core.http import get_json_async
from factorynear.domain.errors import LocationPermissionDenied, LocationTimeout, LocationUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionOptions:
    high_accuracy: bool = True
    timeout_seconds: float = 10
    max_cache_age_seconds: float = 300

    @classmethod
    def from_settings(cls, settings: Settings) -> "PositionOptions":
        loc = settings.location
        return cls(
            high_accuracy=loc.high_accuracy,
            timeout_seconds=float(loc.timeout_seconds),
            max_cache_age_seconds=float(loc.max_cache_age_seconds),
        )


@dataclass(frozen=True)
class PositionFix:
    coordinate: Coordinate
    accuracy_m: float | None = None
    timestamp: float = 0.0


class LocationSource(Protocol):
    async def get_current_position(self, options: PositionOptions) -> PositionFix: ...


class StaticLocationSource:
    def __init__(self, coordinate: Coordinate, *, accuracy_m: float | None = None):
        self._fix = PositionFix(coordinate=coordinate, accuracy_m=accuracy_m)

    async def get_current_position(self, options: PositionOptions) -> PositionFix:
        return PositionFix(coordinate=self._fix.coordinate, accuracy_m=self._fix.accuracy_m, timestamp=time.time())


def _first_float(payload: dict[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    return None


class HttpLocationSource:
    """IP-geolocation lookup; reuses its last fix while it is younger than `max_cache_age_seconds`."""

    def __init__(self, url: str, *, http_timeout_seconds: float = 15):
        self._url = url
        self._http_timeout_seconds = float(http_timeout_seconds)
        self._last_fix: PositionFix | None = None

    async def get_current_position(self, options: PositionOptions) -> PositionFix:
        now = time.time()
        if self._last_fix is not None and now - self._last_fix.timestamp <= options.max_cache_age_seconds:
            return self._last_fix

        timeout = min(self._http_timeout_seconds, float(options.timeout_seconds))
        try:
            payload = await get_json_async(self._url, timeout_seconds=timeout)
        except httpx.TimeoutException as exc:
            raise LocationTimeout(str(exc)) from exc
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code in {401, 403}:
                raise LocationPermissionDenied(str(exc)) from exc
            raise LocationUnavailable(str(exc)) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise LocationUnavailable(str(exc)) from exc

        if not isinstance(payload, dict):
            raise LocationUnavailable("location payload is not an object")
        lat = _first_float(payload, ("latitude", "lat"))
        lon = _first_float(payload, ("longitude", "lon", "lng"))
        if lat is None or lon is None:
            raise LocationUnavailable("location payload has no latitude/longitude")

        fix = PositionFix(
            coordinate=Coordinate(latitude=lat, longitude=lon),
            accuracy_m=_first_float(payload, ("accuracy", "accuracy_m")),
            timestamp=now,
        )
        self._last_fix = fix
        return fix


def build_location_source(settings: Settings) -> LocationSource | None:
    """Return the configured source, or None when the environment has none (unsupported)."""
    url = settings.location.source_url
    if not url:
        return None
    return HttpLocationSource(url, http_timeout_seconds=settings.app.http_timeout_seconds)
