"""
API routes.

Endpoints:
- GET  `/api/facilities`: filtered, capped facility list around the working location.
- GET  `/api/location`: current location state (status, coordinate, error message).
- POST `/api/location/manual`: manual location override (ignored if unparsable).
- GET  `/api/meta`: dataset summary + high-risk criteria (filter option lists).
- GET  `/api/health`
"""

from __future__ import annotations

from functools import lru_cache
from fastapi import APIRouter, Query
from pydantic import BaseModel

from factorynear.config.settings import get_settings
from factorynear.domain.models import FacilityView, FilterCriteria, LocationState
from factorynear.session.controller import SessionController

router = APIRouter()


@lru_cache
def _controller() -> SessionController:
    return SessionController.from_settings(get_settings())


class ManualLocationRequest(BaseModel):
    """Free-text manual input; both fields must parse as finite floats to take effect."""

    latitude: str
    longitude: str


class FacilitiesResponse(BaseModel):
    items: list[FacilityView]
    total_count: int
    display_cap: int
    location: LocationState


@router.get("/api/health")
def get_health() -> dict:
    controller = _controller()
    return {"status": "ok", "dataset_available": controller.dataset is not None}


@router.get("/api/facilities", response_model=FacilitiesResponse)
def get_facilities(
    search: str = "",
    category: list[str] | None = Query(default=None),
    district: list[str] | None = Query(default=None),
    radius_only: bool = False,
    high_risk_only: bool = False,
) -> FacilitiesResponse:
    """Run one filter pass with the given criteria."""
    controller = _controller()
    criteria = FilterCriteria(
        search_text=search,
        categories=frozenset(category or []),
        districts=frozenset(district or []),
        radius_only=radius_only,
        high_risk_only=high_risk_only,
    )
    result = controller.filter(criteria)
    return FacilitiesResponse(
        items=controller.views(result),
        total_count=result.total_count,
        display_cap=result.display_cap,
        location=controller.location,
    )


@router.get("/api/location")
def get_location() -> dict:
    return _controller().location.model_dump(mode="json")


@router.post("/api/location/manual")
def post_manual_location(body: ManualLocationRequest) -> dict:
    controller = _controller()
    applied = controller.set_manual_location(body.latitude, body.longitude)
    return {"applied": applied, "location": controller.location.model_dump(mode="json")}


@router.get("/api/meta")
def get_meta() -> dict:
    settings = get_settings()
    meta = _controller().catalog_meta().model_dump(mode="json")
    meta["risk_criteria"] = settings.risk.criteria
    meta["display_cap"] = settings.filtering.display_cap
    meta["radius_km"] = settings.filtering.radius_km
    return meta
