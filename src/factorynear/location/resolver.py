from __future__ import annotations

# The location resolver guarantees the session always ends up with a working coordinate.
#
# Lifecycle:
#   idle -> requesting -> resolved | fallback      (once per resolver, no retry)
#   any  -> manual_override                       (whenever manual input parses)
#
# Automatic and manual resolution both replace the whole state, so whichever one
# completes last wins; nothing reads-modifies-writes the current value.

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from factorynear.config.settings import Settings
from factorynear.core.geo import Coordinate
from factorynear.domain.errors import LocationError, LocationErrorKind
from factorynear.domain.models import LocationIdle, LocationState
from factorynear.location.sources import LocationSource, PositionOptions, build_location_source
from factorynear.location.state import (
    FALLBACK_COORDINATE,
    apply_manual_override,
    begin_request,
    fall_back,
    resolve_fix,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[LocationState], None]


class LocationResolver:
    def __init__(
        self,
        source: LocationSource | None,
        *,
        options: PositionOptions = PositionOptions(),
        fallback: Coordinate = FALLBACK_COORDINATE,
    ):
        self._source = source
        self._options = options
        self._fallback = fallback
        self._state: LocationState = LocationIdle()
        self._requested = False
        self._listeners: list[StateListener] = []

    @classmethod
    def from_settings(cls, settings: Settings, *, source: LocationSource | None = None) -> "LocationResolver":
        fb = settings.location.fallback
        return cls(
            source if source is not None else build_location_source(settings),
            options=PositionOptions.from_settings(settings),
            fallback=Coordinate(latitude=fb.latitude, longitude=fb.longitude),
        )

    @property
    def state(self) -> LocationState:
        return self._state

    @property
    def coordinate(self) -> Coordinate | None:
        return self._state.coordinate

    def subscribe(self, listener: StateListener) -> None:
        """Call `listener` with every new state (status changes are observable)."""
        self._listeners.append(listener)

    def _set(self, state: LocationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _fall_back(self, kind: LocationErrorKind) -> None:
        self._set(fall_back(self._state, kind, coordinate=self._fallback))
        logger.info(
            "Using fallback location (%.4f, %.4f) after %s",
            self._fallback.latitude,
            self._fallback.longitude,
            kind,
        )

    async def resolve(self) -> LocationState:
        """Request the device location once; later calls return the current state."""
        if self._requested:
            return self._state
        self._requested = True
        self._set(begin_request(self._state))

        if self._source is None:
            logger.info("No location source available")
            self._fall_back("unsupported")
            return self._state

        logger.info("Requesting user location (timeout=%ss)", self._options.timeout_seconds)
        try:
            fix = await asyncio.wait_for(
                self._source.get_current_position(self._options),
                timeout=self._options.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.info("Location request timed out")
            self._fall_back("timeout")
        except LocationError as exc:
            logger.info("Location request failed (%s): %s", exc.kind, exc)
            self._fall_back(exc.kind)
        except Exception as exc:
            logger.warning("Unexpected location error: %s", exc, exc_info=True)
            self._fall_back("unknown")
        else:
            self._set(resolve_fix(self._state, fix))
            logger.info(
                "Location obtained: %.4f, %.4f (accuracy=%s)",
                fix.coordinate.latitude,
                fix.coordinate.longitude,
                fix.accuracy_m,
            )
        return self._state

    def override(self, latitude_text: Any, longitude_text: Any) -> bool:
        """Adopt a manual coordinate; returns False (and changes nothing) if input does not parse."""
        new_state = apply_manual_override(self._state, latitude_text, longitude_text)
        if new_state is self._state:
            return False
        self._set(new_state)
        logger.info("Manual location set: %.4f, %.4f", new_state.coordinate.latitude, new_state.coordinate.longitude)
        return True
