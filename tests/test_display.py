from factorynear.core.geo import Coordinate
from factorynear.display import format_distance, location_status, one_line_summary, truncation_note
from factorynear.domain.models import (
    FacilityRecord,
    FacilityView,
    FilterResult,
    LocationFallback,
    LocationIdle,
    LocationResolved,
)


def test_format_distance_switches_units_at_one_kilometer():
    assert format_distance(0.85) == "850 ม."
    assert format_distance(10.787) == "10.8 กม."


def test_location_status_lines():
    coord = Coordinate(latitude=14.05041, longitude=101.36779)
    assert location_status(LocationIdle()) == "กำลังระบุตำแหน่ง..."
    assert location_status(LocationResolved(coordinate=coord)) == "📍 14.0504, 101.3678"
    fallback = LocationFallback(coordinate=coord, error_kind="timeout", message="หมดเวลาในการระบุตำแหน่ง")
    assert location_status(fallback) == "หมดเวลาในการระบุตำแหน่ง"


def test_summary_and_truncation_note():
    record = FacilityRecord(
        id="R-1", name="Rice Mill", category="10100", district="A", location=Coordinate(14.0, 101.0)
    )
    view = FacilityView(facility=record, is_high_risk=True, distance_km=1.26)
    assert one_line_summary(view) == "Rice Mill | [10100] | A | HIGH-RISK | 1.3 กม."

    assert truncation_note(FilterResult(items=[record], total_count=1)) is None
    assert truncation_note(FilterResult(items=[record], total_count=7, display_cap=1)) == (
        "แสดงเพียง 1 รายการแรก จาก 7 รายการ"
    )
