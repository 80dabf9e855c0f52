"""
Location state transitions (pure reducers).

Each function takes the current `LocationState` and returns the next one; none of
them performs I/O. `LocationResolver` drives them from the async device request
and from manual input.
"""

from __future__ import annotations

import math
from typing import Any

from factorynear.core.geo import Coordinate
from factorynear.domain.errors import LocationErrorKind, ManualInputParseFailure
from factorynear.domain.models import (
    LocationFallback,
    LocationManualOverride,
    LocationRequesting,
    LocationResolved,
    LocationState,
)
from factorynear.location.sources import PositionFix

# Regional center of the dataset (Prachinburi city center).
FALLBACK_COORDINATE = Coordinate(latitude=14.0504, longitude=101.3678)

FALLBACK_MESSAGES: dict[LocationErrorKind, str] = {
    "unsupported": "เบราว์เซอร์ไม่รองรับการระบุตำแหน่ง",
    "permission_denied": "การเข้าถึงตำแหน่งถูกปฏิเสธ กรุณาอนุญาตในการตั้งค่าเบราว์เซอร์",
    "position_unavailable": "ไม่สามารถระบุตำแหน่งได้ในขณะนี้",
    "timeout": "หมดเวลาในการระบุตำแหน่ง",
    "unknown": "เกิดข้อผิดพลาดในการระบุตำแหน่ง",
}


def begin_request(state: LocationState) -> LocationState:
    # A coordinate set before the request started stays usable while loading.
    return LocationRequesting(coordinate=state.coordinate)


def resolve_fix(state: LocationState, fix: PositionFix) -> LocationState:
    # A fix replaces whatever came before; `state` is kept for the reducer signature.
    return LocationResolved(coordinate=fix.coordinate, accuracy_m=fix.accuracy_m)


def fall_back(
    state: LocationState,
    kind: LocationErrorKind,
    *,
    coordinate: Coordinate = FALLBACK_COORDINATE,
) -> LocationState:
    message = FALLBACK_MESSAGES.get(kind, FALLBACK_MESSAGES["unknown"])
    return LocationFallback(coordinate=coordinate, error_kind=kind, message=message)


def _parse_float(value: Any) -> float:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ManualInputParseFailure(f"not a number: {value!r}") from exc
    if not math.isfinite(number):
        raise ManualInputParseFailure(f"not a finite number: {value!r}")
    return number


def parse_manual_coordinate(latitude_text: Any, longitude_text: Any) -> Coordinate:
    """Parse two free-text fields. No range check is applied."""
    return Coordinate(latitude=_parse_float(latitude_text), longitude=_parse_float(longitude_text))


def apply_manual_override(state: LocationState, latitude_text: Any, longitude_text: Any) -> LocationState:
    """Adopt the manual coordinate, or return `state` unchanged if either field does not parse."""
    try:
        coordinate = parse_manual_coordinate(latitude_text, longitude_text)
    except ManualInputParseFailure:
        return state
    return LocationManualOverride(coordinate=coordinate)
