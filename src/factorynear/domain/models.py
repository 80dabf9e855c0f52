"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- dataset entities (`FacilityRecord`)
- filter input (`FilterCriteria`) and output (`FilterResult`, `FacilityView`)
- the location lifecycle (`LocationState` variants)

Facility records accept both the transliterated field names and the native
(Thai) property labels used by the source GeoJSON, so the loader can validate a
feature's properties bag directly.
"""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from factorynear.core.geo import Coordinate
from factorynear.domain.errors import LocationErrorKind

logger = logging.getLogger(__name__)


def _alias(name: str, native: str) -> AliasChoices:
    return AliasChoices(name, native)


class FacilityRecord(BaseModel):
    """One factory from the dataset snapshot."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, validation_alias=_alias("id", "เลขทะเบียน"))
    name: str = Field("", validation_alias=_alias("name", "ชื่อโรงงาน"))
    owner: str = Field("", validation_alias=_alias("owner", "ผู้ประกอบก"))
    business: str = Field("", validation_alias=_alias("business", "ประกอบกิจก"))
    investment: float | None = Field(None, validation_alias=_alias("investment", "การลงทุน"))
    employees: int | None = Field(None, validation_alias=_alias("employees", "จำนวนคน"))
    horsepower: float | None = Field(None, validation_alias=_alias("horsepower", "hp"))
    kilowatts: float | None = Field(None, validation_alias=_alias("kilowatts", "kw"))
    category: str = Field("", validation_alias=_alias("category", "ประเภท"))
    district: str = Field("", validation_alias=_alias("district", "อำเภอ"))
    address: str = Field("", validation_alias=_alias("address", "ที่ตั้ง"))
    phone: str | None = Field(None, validation_alias=_alias("phone", "โทรศัพท์"))
    location: Coordinate

    @field_validator("id", "name", "owner", "business", "category", "district", "address", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("phone", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("investment", "employees", "horsepower", "kilowatts", mode="before")
    @classmethod
    def _numeric(cls, value: Any, info: ValidationInfo) -> Any:
        # Source figures are strings such as "1,200,000", "" or "ไม่ระบุ" for unknown.
        if isinstance(value, str):
            text = value.replace(",", "").strip()
            if not text or text == "-":
                return None
            try:
                number = float(text)
            except ValueError:
                number = math.nan
            if not math.isfinite(number):
                logger.warning("Unparseable %s value %r treated as unknown", info.field_name, value)
                return None
            if info.field_name == "employees":
                return int(number)
            return number
        return value

    @field_validator("location")
    @classmethod
    def _check_bounds(cls, value: Coordinate) -> Coordinate:
        if not -90 <= value.latitude <= 90:
            raise ValueError(f"latitude out of range: {value.latitude}")
        if not -180 <= value.longitude <= 180:
            raise ValueError(f"longitude out of range: {value.longitude}")
        return value


class FilterCriteria(BaseModel):
    """Immutable snapshot of the user's filter selections."""

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    categories: frozenset[str] = frozenset()
    districts: frozenset[str] = frozenset()
    radius_only: bool = False
    high_risk_only: bool = False


class FilterResult(BaseModel):
    """Matches in dataset order, truncated to `display_cap` (`total_count` is untruncated)."""

    items: list[FacilityRecord] = Field(default_factory=list)
    total_count: int = Field(0, ge=0)
    display_cap: int = Field(20, ge=1)

    @property
    def is_truncated(self) -> bool:
        return self.total_count > len(self.items)


class FacilityView(BaseModel):
    """A filtered record enriched for display."""

    facility: FacilityRecord
    is_high_risk: bool
    distance_km: float | None = None


class CatalogMeta(BaseModel):
    """Dataset summary that drives the filter option lists."""

    facility_count: int
    categories: list[str]
    districts: list[str]
    category_counts: dict[str, int] = Field(default_factory=dict)
    district_counts: dict[str, int] = Field(default_factory=dict)


class _LocationStateBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate | None = None

    @property
    def is_loading(self) -> bool:
        return False

    @property
    def error_message(self) -> str | None:
        return None


class LocationIdle(_LocationStateBase):
    status: Literal["idle"] = "idle"

    @property
    def is_loading(self) -> bool:
        return True


class LocationRequesting(_LocationStateBase):
    status: Literal["requesting"] = "requesting"

    @property
    def is_loading(self) -> bool:
        return True


class LocationResolved(_LocationStateBase):
    status: Literal["resolved"] = "resolved"
    coordinate: Coordinate
    accuracy_m: float | None = None


class LocationFallback(_LocationStateBase):
    status: Literal["fallback"] = "fallback"
    coordinate: Coordinate
    error_kind: LocationErrorKind
    message: str

    @property
    def error_message(self) -> str | None:
        return self.message


class LocationManualOverride(_LocationStateBase):
    status: Literal["manual_override"] = "manual_override"
    coordinate: Coordinate


LocationState = Annotated[
    Union[LocationIdle, LocationRequesting, LocationResolved, LocationFallback, LocationManualOverride],
    Field(discriminator="status"),
]
