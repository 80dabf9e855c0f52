"""
Session state (one explicit, serializable record) and its reducers.

Everything the UI used to keep in scattered mutable fields (working location,
filter selections, selected facility) lives in `SessionState`. Reducers are
plain functions `state -> new state`, so each transition can be tested alone.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from factorynear.domain.models import FilterCriteria, LocationIdle, LocationState


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: LocationState = Field(default_factory=LocationIdle)
    filters: FilterCriteria = Field(default_factory=FilterCriteria)
    selected_id: str | None = None


def _with_filters(state: SessionState, **changes) -> SessionState:
    return state.model_copy(update={"filters": state.filters.model_copy(update=changes)})


def set_search_text(state: SessionState, text: str) -> SessionState:
    return _with_filters(state, search_text=text)


def set_categories(state: SessionState, codes: Iterable[str]) -> SessionState:
    return _with_filters(state, categories=frozenset(codes))


def set_districts(state: SessionState, districts: Iterable[str]) -> SessionState:
    return _with_filters(state, districts=frozenset(districts))


def toggle_radius_only(state: SessionState) -> SessionState:
    return _with_filters(state, radius_only=not state.filters.radius_only)


def toggle_high_risk_only(state: SessionState) -> SessionState:
    return _with_filters(state, high_risk_only=not state.filters.high_risk_only)


def clear_filters(state: SessionState) -> SessionState:
    return state.model_copy(update={"filters": FilterCriteria()})


def select_facility(state: SessionState, facility_id: str | None) -> SessionState:
    return state.model_copy(update={"selected_id": facility_id})


def with_location(state: SessionState, location: LocationState) -> SessionState:
    return state.model_copy(update={"location": location})
