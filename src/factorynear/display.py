"""
Small display formatting helpers.

Used by the CLI to print compact facility lines and the location status.
"""

from __future__ import annotations

from factorynear.domain.models import FacilityView, FilterResult, LocationState


def format_distance(distance_km: float) -> str:
    """Render meters below 1 km, otherwise kilometers with one decimal."""
    if distance_km < 1:
        return f"{distance_km * 1000:.0f} ม."
    return f"{distance_km:.1f} กม."


def one_line_summary(view: FacilityView) -> str:
    """Render a compact single-line summary for a facility view."""
    f = view.facility
    parts = [f.name or f.id, f"[{f.category}]"]
    if f.district:
        parts.append(f.district)
    if view.is_high_risk:
        parts.append("HIGH-RISK")
    if view.distance_km is not None:
        parts.append(format_distance(view.distance_km))
    return " | ".join(parts)


def location_status(state: LocationState) -> str:
    if state.is_loading:
        return "กำลังระบุตำแหน่ง..."
    if state.error_message:
        return state.error_message
    if state.coordinate is not None:
        return f"📍 {state.coordinate.latitude:.4f}, {state.coordinate.longitude:.4f}"
    return "ไม่พบตำแหน่ง"


def truncation_note(result: FilterResult) -> str | None:
    if not result.is_truncated:
        return None
    return f"แสดงเพียง {len(result.items)} รายการแรก จาก {result.total_count} รายการ"
