"""Row conversion helpers shared by the Supabase adapters."""

from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError

from dining_menus.domain.errors import ConflictError, StorageError
from dining_menus.domain.locations import Location
from dining_menus.domain.menus import (
    FoodDetail,
    MenuSummary,
    NewFood,
    NewMenu,
    ServingUnit,
)
from dining_menus.domain.nutrients import NUTRIENT_FIELDS
from dining_menus.domain.sources import InformationSource

UNIQUE_VIOLATION = "23505"

LOCATION_COLUMNS = "id, name, latitude, longitude"
SOURCE_COLUMNS = "id, name, description, error_confidence_description"
MENU_COLUMNS = "id, name, location_id, start_time, end_time, locations!inner(name)"
MENU_FOOD_COLUMNS = (
    "menu_id, foods(id, name, brand, serving_size, serving_units, "
    "macro_percentage_error_estimate, information_sources(name), "
    "nutrient_profiles(*))"
)


def translate_api_error(
    exc: APIError, *, entity: str, key: str, action: str
) -> ConflictError | StorageError:
    """Map a PostgREST error to a conflict or a storage failure."""
    if exc.code == UNIQUE_VIOLATION:
        return ConflictError(entity, key)
    return StorageError(f"Failed to {action}: {exc.message or exc}")


def location_row(
    location_id: UUID, name: str, latitude: float, longitude: float
) -> dict[str, object]:
    return {
        "id": str(location_id),
        "name": name,
        "latitude": latitude,
        "longitude": longitude,
    }


def parse_location(row: dict[str, object]) -> Location:
    return Location(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        latitude=float(row.get("latitude", 0.0)),
        longitude=float(row.get("longitude", 0.0)),
    )


def source_row(
    source_id: UUID,
    name: str,
    description: str | None,
    error_confidence_description: str | None,
) -> dict[str, object]:
    return {
        "id": str(source_id),
        "name": name,
        "description": description,
        "error_confidence_description": error_confidence_description,
    }


def parse_source(row: dict[str, object]) -> InformationSource:
    return InformationSource(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        description=row.get("description"),
        error_confidence_description=row.get("error_confidence_description"),
    )


def food_row(food_id: UUID, food: NewFood) -> dict[str, object]:
    return {
        "id": str(food_id),
        "name": food.name,
        "brand": food.brand,
        "serving_size": food.serving_size,
        "serving_units": [
            {"name": unit.name, "grams": unit.grams} for unit in food.serving_units
        ],
        "macro_percentage_error_estimate": food.macro_percentage_error_estimate,
        "information_source_id": str(food.information_source_id),
        "nutrient_profile_id": str(food.nutrient_profile_id),
        "macro_embedding": food.embedding,
    }


def menu_row(menu_id: UUID, menu: NewMenu) -> dict[str, object]:
    return {
        "id": str(menu_id),
        "name": menu.name,
        "location_id": str(menu.location_id),
        "start_time": menu.start_time.isoformat(),
        "end_time": menu.end_time.isoformat(),
    }


def parse_menu_summary(row: dict[str, object]) -> MenuSummary:
    location = row.get("locations") or {}
    return MenuSummary(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        location_id=UUID(str(row["location_id"])),
        location_name=str(location.get("name", "")),
        start_time=datetime.fromisoformat(str(row["start_time"])),
        end_time=datetime.fromisoformat(str(row["end_time"])),
    )


def parse_food_detail(row: dict[str, object]) -> FoodDetail:
    source = row.get("information_sources") or {}
    profile = row.get("nutrient_profiles") or {}
    return FoodDetail(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        brand=str(row.get("brand", "")),
        serving_size=float(row.get("serving_size", 0.0)),
        serving_units=[
            ServingUnit(name=str(unit["name"]), grams=float(unit["grams"]))
            for unit in row.get("serving_units") or []
        ],
        macro_percentage_error_estimate=float(
            row.get("macro_percentage_error_estimate", 0.0)
        ),
        information_source=str(source.get("name", "")),
        nutrients={name: float(profile.get(name) or 0.0) for name in NUTRIENT_FIELDS},
    )
