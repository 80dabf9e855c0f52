"""
Facility dataset loader.

The dataset is a GeoJSON FeatureCollection (default: `data/factories.geojson`) with
one `Point` feature per factory. Geometry is ordered `[longitude, latitude]`; we
normalize it into a `Coordinate` here so nothing downstream ever sees the raw pair.
Properties use the source's native (Thai) labels and are validated into
`FacilityRecord` via its field aliases.

Loading never crashes the app: a failed read/fetch is logged and the dataset is
reported as unavailable (`None`), which the filter engine treats as empty.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from factorynear.config.settings import Settings
from factorynear.core.env import resolve_project_path
from factorynear.core.geo import Coordinate
from factorynear.core.http import get_json
from factorynear.domain.errors import DatasetFetchFailure
from factorynear.domain.models import CatalogMeta, FacilityRecord

logger = logging.getLogger(__name__)


def _parse_feature(feature: Any) -> FacilityRecord:
    if not isinstance(feature, dict):
        raise ValueError("feature is not an object")
    geometry = feature.get("geometry") or {}
    if not isinstance(geometry, dict):
        raise ValueError("geometry is not an object")
    if geometry.get("type") != "Point":
        raise ValueError(f"unsupported geometry type: {geometry.get('type')!r}")
    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise ValueError("Point geometry needs [longitude, latitude]")
    properties = feature.get("properties") or {}
    if not isinstance(properties, dict):
        raise ValueError("properties is not an object")
    properties = dict(properties)
    properties["location"] = Coordinate.from_lon_lat(coords)
    return FacilityRecord.model_validate(properties)


def parse_feature_collection(payload: Any) -> tuple[FacilityRecord, ...]:
    """Validate a FeatureCollection payload into facility records.

    Invalid features are skipped; a repeated registration id keeps its first occurrence.
    """
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise DatasetFetchFailure("dataset is not a GeoJSON FeatureCollection")
    features = payload.get("features")
    if not isinstance(features, list):
        raise DatasetFetchFailure("FeatureCollection has no features list")

    records: list[FacilityRecord] = []
    seen: set[str] = set()
    skipped = 0
    for index, feature in enumerate(features):
        try:
            record = _parse_feature(feature)
        except (ValidationError, ValueError, TypeError) as exc:
            skipped += 1
            logger.warning("Skipping feature #%d: %s", index, str(exc).splitlines()[0])
            continue
        if record.id in seen:
            skipped += 1
            logger.warning("Skipping duplicate registration id %s (feature #%d)", record.id, index)
            continue
        seen.add(record.id)
        records.append(record)

    if skipped:
        logger.info("Dataset parsed with %d feature(s) skipped", skipped)
    return tuple(records)


def load_facilities(path: str | Path) -> tuple[FacilityRecord, ...]:
    """Load and validate a facility GeoJSON file."""
    resolved = resolve_project_path(path)
    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise DatasetFetchFailure(f"cannot read dataset {resolved}: {exc}") from exc
    return parse_feature_collection(payload)


def fetch_facilities(url: str, *, timeout_seconds: float = 15) -> tuple[FacilityRecord, ...]:
    """Fetch and validate a facility GeoJSON document over HTTP."""
    try:
        payload = get_json(url, timeout_seconds=timeout_seconds)
    except (httpx.HTTPError, ValueError) as exc:
        raise DatasetFetchFailure(f"cannot fetch dataset {url}: {exc}") from exc
    return parse_feature_collection(payload)


def load_dataset(settings: Settings, *, path: str | Path | None = None) -> tuple[FacilityRecord, ...] | None:
    """Load the configured dataset once; returns None (unavailable) on failure."""
    source = str(path or settings.dataset.url or settings.dataset.path)
    try:
        if path is None and settings.dataset.url:
            records = fetch_facilities(settings.dataset.url, timeout_seconds=settings.app.http_timeout_seconds)
        else:
            records = load_facilities(path or settings.dataset.path)
    except DatasetFetchFailure as exc:
        logger.error("Error loading factories from %s: %s", source, exc)
        return None
    logger.info("Loaded %d factories from %s", len(records), source)
    return records


def build_catalog_meta(dataset: tuple[FacilityRecord, ...] | None) -> CatalogMeta:
    """Summarize distinct categories/districts (for filter option lists)."""
    category_counts: dict[str, int] = {}
    district_counts: dict[str, int] = {}
    for r in dataset or ():
        if r.category:
            category_counts[r.category] = category_counts.get(r.category, 0) + 1
        if r.district:
            district_counts[r.district] = district_counts.get(r.district, 0) + 1

    return CatalogMeta(
        facility_count=len(dataset or ()),
        categories=sorted(category_counts),
        districts=sorted(district_counts),
        category_counts=dict(sorted(category_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
        district_counts=dict(sorted(district_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
    )
