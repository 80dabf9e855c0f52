from __future__ import annotations

# The session controller is the single owner of `SessionState`.
# It wires together:
# - the dataset snapshot (loaded once; None while unavailable)
# - the location resolver (publishes every location change into the state)
# - the filter engine (memoized on dataset/criteria/location)
#
# Presentation code (CLI, API) reads from here and never mutates state directly.

import logging
from collections.abc import Callable, Sequence
from typing import Any

from factorynear.catalog.loader import build_catalog_meta, load_dataset
from factorynear.config.settings import Settings, get_settings
from factorynear.core.geo import haversine_km
from factorynear.domain.models import (
    CatalogMeta,
    FacilityRecord,
    FacilityView,
    FilterCriteria,
    FilterResult,
    LocationState,
)
from factorynear.features.risk import is_high_risk
from factorynear.filtering.engine import FilterMemo, FilterOptions
from factorynear.location.resolver import LocationResolver
from factorynear.location.sources import LocationSource
from factorynear.session.state import SessionState, with_location

logger = logging.getLogger(__name__)

Reducer = Callable[..., SessionState]


class SessionController:
    def __init__(
        self,
        *,
        dataset: Sequence[FacilityRecord] | None,
        resolver: LocationResolver,
        options: FilterOptions = FilterOptions(),
    ):
        self._dataset = dataset
        self._resolver = resolver
        self._options = options
        self._memo = FilterMemo(options)
        self._state = SessionState(location=resolver.state)
        resolver.subscribe(self._on_location)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        source: LocationSource | None = None,
        dataset: Sequence[FacilityRecord] | None = None,
    ) -> "SessionController":
        """Build a controller; loads the configured dataset unless one is passed in."""
        settings = settings or get_settings()
        if dataset is None:
            dataset = load_dataset(settings)
        return cls(
            dataset=dataset,
            resolver=LocationResolver.from_settings(settings, source=source),
            options=FilterOptions.from_settings(settings),
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def dataset(self) -> Sequence[FacilityRecord] | None:
        return self._dataset

    @property
    def location(self) -> LocationState:
        return self._state.location

    @property
    def options(self) -> FilterOptions:
        return self._options

    def _on_location(self, location: LocationState) -> None:
        self._state = with_location(self._state, location)

    async def start(self) -> SessionState:
        """Run the one-shot location resolution."""
        await self._resolver.resolve()
        return self._state

    def set_manual_location(self, latitude_text: Any, longitude_text: Any) -> bool:
        return self._resolver.override(latitude_text, longitude_text)

    def dispatch(self, reducer: Reducer, *args: Any) -> SessionState:
        """Apply a reducer from `factorynear.session.state` to the owned state."""
        self._state = reducer(self._state, *args)
        return self._state

    def filter(self, criteria: FilterCriteria | None = None) -> FilterResult:
        """Filter with `criteria` (defaults to the session's own filters)."""
        return self._memo(
            self._dataset,
            criteria if criteria is not None else self._state.filters,
            self._state.location.coordinate,
        )

    def views(self, result: FilterResult) -> list[FacilityView]:
        """Attach risk flag and great-circle distance (display metric) to each item."""
        origin = self._state.location.coordinate
        return [
            FacilityView(
                facility=r,
                is_high_risk=is_high_risk(r.category, codes=self._options.risk_codes),
                distance_km=haversine_km(origin, r.location) if origin is not None else None,
            )
            for r in result.items
        ]

    @property
    def selected_facility(self) -> FacilityRecord | None:
        selected = self._state.selected_id
        if selected is None:
            return None
        return next((r for r in self._dataset or () if r.id == selected), None)

    def catalog_meta(self) -> CatalogMeta:
        return build_catalog_meta(tuple(self._dataset) if self._dataset is not None else None)
