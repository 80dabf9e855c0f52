from __future__ import annotations

# The filter engine narrows a facility dataset for display.
#
# Contract:
# - Pure: output depends only on (dataset, criteria, location) at call time.
# - Predicates are conjunctive; they run cheapest-first but order never changes the result set.
# - Dataset order is kept; only the returned sequence is capped.
# - An unavailable dataset (None) yields an empty result, never an error.

from collections.abc import Sequence
from dataclasses import dataclass

from factorynear.config.settings import Settings
from factorynear.core.geo import KM_PER_DEGREE, Coordinate, planar_distance_km
from factorynear.domain.models import FacilityRecord, FilterCriteria, FilterResult
from factorynear.features.risk import HIGH_RISK_CATEGORY_CODES, is_high_risk, risk_code_set

DISPLAY_CAP = 20
RADIUS_KM = 10.0


@dataclass(frozen=True)
class FilterOptions:
    """Numeric knobs of the filter pass (see `filtering` in defaults.yaml)."""

    radius_km: float = RADIUS_KM
    km_per_degree: float = KM_PER_DEGREE
    display_cap: int = DISPLAY_CAP
    risk_codes: frozenset[str] = HIGH_RISK_CATEGORY_CODES

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilterOptions":
        f = settings.filtering
        return cls(
            radius_km=float(f.radius_km),
            km_per_degree=float(f.km_per_degree),
            display_cap=int(f.display_cap),
            risk_codes=risk_code_set(settings.risk.category_codes),
        )


def _matches_search(record: FacilityRecord, term: str) -> bool:
    # `term` is already lower-cased by the caller.
    return term in record.name.lower() or term in record.owner.lower() or term in record.business.lower()


def _within_radius(record: FacilityRecord, location: Coordinate, options: FilterOptions) -> bool:
    distance = planar_distance_km(location, record.location, km_per_degree=options.km_per_degree)
    return distance <= options.radius_km


def matches(
    record: FacilityRecord,
    criteria: FilterCriteria,
    location: Coordinate | None,
    options: FilterOptions = FilterOptions(),
) -> bool:
    """Return True if `record` passes every active predicate."""
    if criteria.search_text:
        if not _matches_search(record, criteria.search_text.lower()):
            return False
    if criteria.categories and record.category not in criteria.categories:
        return False
    if criteria.districts and record.district not in criteria.districts:
        return False
    if criteria.high_risk_only and not is_high_risk(record.category, codes=options.risk_codes):
        return False
    # Without a working coordinate the radius predicate passes instead of excluding everything.
    if criteria.radius_only and location is not None:
        if not _within_radius(record, location, options):
            return False
    return True


def filter_facilities(
    dataset: Sequence[FacilityRecord] | None,
    criteria: FilterCriteria,
    location: Coordinate | None,
    *,
    options: FilterOptions = FilterOptions(),
) -> FilterResult:
    """Filter `dataset` by `criteria` around `location` and cap the returned sequence."""
    if not dataset:
        return FilterResult(items=[], total_count=0, display_cap=options.display_cap)

    matched = [r for r in dataset if matches(r, criteria, location, options)]
    return FilterResult(
        items=matched[: options.display_cap],
        total_count=len(matched),
        display_cap=options.display_cap,
    )


class FilterMemo:
    """Single-entry memo: re-filter only when dataset, criteria or location changed.

    The dataset is compared by identity (a snapshot is replaced, never mutated);
    criteria and location are compared by value.
    """

    def __init__(self, options: FilterOptions = FilterOptions()):
        self._options = options
        self._dataset: Sequence[FacilityRecord] | None = None
        self._key: tuple[FilterCriteria, Coordinate | None] | None = None
        self._result: FilterResult | None = None
        self.misses = 0

    def __call__(
        self,
        dataset: Sequence[FacilityRecord] | None,
        criteria: FilterCriteria,
        location: Coordinate | None,
    ) -> FilterResult:
        key = (criteria, location)
        if self._result is not None and dataset is self._dataset and key == self._key:
            return self._result
        self.misses += 1
        self._result = filter_facilities(dataset, criteria, location, options=self._options)
        self._dataset = dataset
        self._key = key
        return self._result
