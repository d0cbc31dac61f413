"""Pydantic models for scraped menu records."""

import math
from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from dining_menus.domain.errors import ValidationError
from dining_menus.domain.nutrients import NUTRIENT_FIELDS

GRAM_UNIT = "g"
_GRAM_ALIASES = {"g", "gram", "grams"}


class ServingUnitRecord(BaseModel):
    """Serving unit payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    grams: float = Field(gt=0, allow_inf_nan=False, strict=True)


class FoodRecord(BaseModel):
    """Scraped food payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    serving_size: float = Field(gt=0, allow_inf_nan=False, strict=True)
    serving_units: list[ServingUnitRecord] = Field(default_factory=list)
    macro_percentage_error_estimate: float = Field(
        ge=0, le=100, allow_inf_nan=False, strict=True
    )
    macro_information_source: str = Field(min_length=1)
    macros: dict[str, Any] = Field(default_factory=dict)

    @field_validator("serving_units")
    @classmethod
    def _unique_units(cls, units: list[ServingUnitRecord]) -> list[ServingUnitRecord]:
        seen: set[str] = set()
        for unit in units:
            key = unit.name.lower()
            if key in seen:
                raise ValueError(f"duplicate serving unit '{unit.name}'")
            seen.add(key)
        if seen.isdisjoint(_GRAM_ALIASES):
            units = [ServingUnitRecord(name=GRAM_UNIT, grams=1.0), *units]
        return units

    @field_validator("macros")
    @classmethod
    def _canonical_macros(cls, macros: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for name in NUTRIENT_FIELDS:
            value = macros.get(name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ValueError(f"{name} must be a number")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number")
            cleaned[name] = float(value)
        return cleaned


class LocationRecord(BaseModel):
    """Embedded location payload for records that may create a location."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    description: str | None = None
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False, strict=True)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False, strict=True)


class MenuRecord(BaseModel):
    """Scraped menu payload.

    ``location`` is either a full location object or the name of a location
    that must already exist; the name form is stored in ``location_name``.
    Naive timestamps are read as UTC.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    location: LocationRecord | None = None
    location_name: str | None = None
    start_time: datetime
    end_time: datetime
    foods: list[FoodRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _split_location(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("location"), str):
            data = dict(data)
            data["location_name"] = data.pop("location")
        return data

    @field_validator("location_name")
    @classmethod
    def _non_empty_name(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise ValueError("location name must not be empty")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_validator("end_time")
    @classmethod
    def _end_not_before_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        start = info.data.get("start_time")
        if start is not None and value < start:
            raise ValueError("end_time must not be before start_time")
        return value

    @model_validator(mode="after")
    def _require_location(self) -> "MenuRecord":
        if self.location is None and self.location_name is None:
            raise ValueError("location is required")
        return self

    @property
    def canonical_location_name(self) -> str:
        """Name of the location this menu belongs to."""
        if self.location is not None:
            return self.location.name
        return str(self.location_name)

    @property
    def label(self) -> str:
        """Human readable identity used in logs and batch reports."""
        return (
            f"{self.name} @ {self.canonical_location_name} "
            f"[{self.start_time.isoformat()} - {self.end_time.isoformat()}]"
        )


def parse_menu_record(raw: object) -> MenuRecord:
    """Validate a scraped record, raising ``ValidationError`` on the first problem."""
    if isinstance(raw, MenuRecord):
        return raw
    try:
        return MenuRecord.model_validate(raw)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "record"
        constraint = str(error["msg"]).removeprefix("Value error, ")
        raise ValidationError(field, constraint) from exc
