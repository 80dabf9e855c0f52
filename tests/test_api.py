from starlette.testclient import TestClient

from factorynear.api.app import app
from factorynear.core.geo import Coordinate
from factorynear.domain.models import FacilityRecord
from factorynear.filtering.engine import FilterOptions
from factorynear.location.resolver import LocationResolver
from factorynear.location.sources import StaticLocationSource
from factorynear.session.controller import SessionController


USER = Coordinate(latitude=14.0504, longitude=101.3678)


def _dataset() -> tuple[FacilityRecord, ...]:
    near = [
        FacilityRecord(id=f"n{i:02d}", name=f"Mill {i}", category="10100", district="A", location=USER)
        for i in range(22)
    ]
    far = FacilityRecord(
        id="far",
        name="Kabin Auto Parts",
        category="06400",
        district="B",
        location=Coordinate(latitude=13.9712, longitude=101.7201),
    )
    return tuple(near) + (far,)


def _patch_controller(monkeypatch) -> SessionController:
    # Patch the cached controller factory so API tests stay offline.
    import factorynear.api.routes as routes

    controller = SessionController(
        dataset=_dataset(),
        resolver=LocationResolver(StaticLocationSource(USER, accuracy_m=30.0)),
        options=FilterOptions(),
    )
    monkeypatch.setattr(routes, "_controller", lambda: controller)
    return controller


def test_startup_resolves_location_once(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        resp = c.get("/api/location")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "resolved"
    assert data["coordinate"] == {"latitude": 14.0504, "longitude": 101.3678}


def test_facilities_endpoint_caps_and_counts(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        resp = c.get("/api/facilities")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_count"] == 23
    assert data["display_cap"] == 20
    assert len(data["items"]) == 20
    assert data["items"][0]["facility"]["id"] == "n00"
    assert data["items"][0]["is_high_risk"] is True
    assert data["items"][0]["distance_km"] == 0.0


def test_facilities_endpoint_applies_query_criteria(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        radius = c.get("/api/facilities", params={"radius_only": "true"}).json()
        by_category = c.get("/api/facilities", params=[("category", "06400"), ("category", "99999")]).json()
        by_search = c.get("/api/facilities", params={"search": "kabin"}).json()

    assert radius["total_count"] == 22
    assert [i["facility"]["id"] for i in by_category["items"]] == ["far"]
    assert by_search["total_count"] == 1


def test_manual_location_endpoint(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        bad = c.post("/api/location/manual", json={"latitude": "abc", "longitude": "101.3678"}).json()
        good = c.post("/api/location/manual", json={"latitude": "13.9712", "longitude": "101.7201"}).json()
        radius = c.get("/api/facilities", params={"radius_only": "true"}).json()

    assert bad["applied"] is False
    assert bad["location"]["status"] == "resolved"
    assert good["applied"] is True
    assert good["location"]["status"] == "manual_override"
    assert [i["facility"]["id"] for i in radius["items"]] == ["far"]


def test_meta_endpoint(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        data = c.get("/api/meta").json()
    assert data["facility_count"] == 23
    assert data["categories"] == ["06400", "10100"]
    assert data["districts"] == ["A", "B"]
    assert data["risk_criteria"]
    assert data["display_cap"] == 20


def test_health_endpoint(monkeypatch):
    _patch_controller(monkeypatch)
    with TestClient(app) as c:
        data = c.get("/api/health").json()
    assert data == {"status": "ok", "dataset_available": True}
