"""Domain models for menus and the foods served on them."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ServingUnit:
    """A convenience unit for a food and its weight in grams."""

    name: str
    grams: float


@dataclass(frozen=True)
class NewFood:
    """Food row ready to be inserted."""

    name: str
    brand: str
    serving_size: float
    serving_units: list[ServingUnit]
    macro_percentage_error_estimate: float
    information_source_id: UUID
    nutrient_profile_id: UUID
    embedding: list[float]


@dataclass(frozen=True)
class NewMenu:
    """Menu row ready to be inserted."""

    name: str
    location_id: UUID
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class MenuSummary:
    """Menu header without its foods."""

    id: UUID
    name: str
    location_id: UUID
    location_name: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class FoodDetail:
    """Food with its nutrient values and information source."""

    id: UUID
    name: str
    brand: str
    serving_size: float
    serving_units: list[ServingUnit]
    macro_percentage_error_estimate: float
    information_source: str
    nutrients: dict[str, float]


@dataclass(frozen=True)
class MenuWithFoods:
    """Menu with full food detail."""

    menu: MenuSummary
    foods: list[FoodDetail]


@dataclass(frozen=True)
class MenuWithFoodsAndDistance:
    """Menu with full food detail and its location's distance from a point."""

    menu: MenuSummary
    foods: list[FoodDetail]
    distance_km: float


def windows_overlap(
    existing_start: datetime,
    existing_end: datetime,
    start: datetime,
    end: datetime,
) -> bool:
    """Return True when two closed time intervals intersect.

    Touching boundaries count as overlap, so a menu ending at 10:00 and one
    starting at 10:00 are considered the same menu.
    """
    return existing_end >= start and existing_start <= end
