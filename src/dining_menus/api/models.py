"""Request models and response serializers for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from dining_menus.domain.errors import IngestionError, StorageError
from dining_menus.domain.ingestion import BatchResult
from dining_menus.domain.locations import Location, NearbyLocation
from dining_menus.domain.menus import (
    FoodDetail,
    MenuSummary,
    MenuWithFoods,
    MenuWithFoodsAndDistance,
)


class BatchRequest(BaseModel):
    """Scraped menu records submitted for ingestion."""

    records: list[dict[str, Any]] = Field(default_factory=list)
    skip_existing: bool = False


def error_payload(error: Exception) -> dict[str, object]:
    payload: dict[str, object] = {"type": type(error).__name__, "message": str(error)}
    if isinstance(error, StorageError):
        payload["step"] = error.step
        payload["food"] = error.food_name
    elif not isinstance(error, IngestionError):
        payload["type"] = "StorageError"
    return payload


def location_payload(location: Location | NearbyLocation) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(location.id),
        "name": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
    }
    if isinstance(location, NearbyLocation):
        payload["distance_km"] = round(location.distance_km, 4)
    return payload


def menu_payload(menu: MenuSummary) -> dict[str, object]:
    return {
        "id": str(menu.id),
        "name": menu.name,
        "location_id": str(menu.location_id),
        "location": menu.location_name,
        "start_time": menu.start_time.isoformat(),
        "end_time": menu.end_time.isoformat(),
    }


def food_payload(food: FoodDetail) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "brand": food.brand,
        "serving_size": food.serving_size,
        "serving_units": [
            {"name": unit.name, "grams": unit.grams} for unit in food.serving_units
        ],
        "macro_percentage_error_estimate": food.macro_percentage_error_estimate,
        "macro_information_source": food.information_source,
        "macros": dict(food.nutrients),
    }


def menu_with_foods_payload(
    item: MenuWithFoods | MenuWithFoodsAndDistance,
) -> dict[str, object]:
    payload = menu_payload(item.menu)
    payload["foods"] = [food_payload(food) for food in item.foods]
    if isinstance(item, MenuWithFoodsAndDistance):
        payload["distance_km"] = round(item.distance_km, 4)
    return payload


def batch_payload(result: BatchResult) -> dict[str, object]:
    return {
        "succeeded": [str(menu_id) for menu_id in result.succeeded],
        "skipped": [
            {
                "index": skip.index,
                "label": skip.label,
                "existing_menu_ids": [
                    str(menu_id) for menu_id in skip.existing_menu_ids
                ],
            }
            for skip in result.skipped
        ],
        "failed": [
            {
                "index": failure.index,
                "label": failure.label,
                "error": error_payload(failure.error),
            }
            for failure in result.failed
        ],
    }
