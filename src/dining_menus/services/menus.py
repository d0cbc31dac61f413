"""Menu existence checks and read queries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from dining_menus.domain.errors import ValidationError
from dining_menus.domain.menus import (
    FoodDetail,
    MenuSummary,
    MenuWithFoods,
    MenuWithFoodsAndDistance,
)
from dining_menus.services.ingestion import MenuStore
from dining_menus.services.locations import LocationService


class MenuReadRepository(Protocol):
    """Read-side persistence interface for menus.

    Every window query uses the inclusive overlap rule
    ``menu.end_time >= start AND menu.start_time <= end`` and returns menus
    newest first.
    """

    def list_menus_by_location_name(
        self, location_name: str, start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return menus at locations with this name overlapping the window."""

    def list_menus_by_location_ids(
        self, location_ids: list[UUID], start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return menus at any of the locations overlapping the window."""

    def list_foods_for_menus(
        self, menu_ids: list[UUID]
    ) -> dict[UUID, list[FoodDetail]]:
        """Return foods keyed by menu id."""


@dataclass
class MenuQueryService:
    """Answers duplicate checks and menu lookups."""

    repository: MenuReadRepository
    location_service: LocationService

    def menus_in_window(
        self, location_name: str, start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return menus at a named location that overlap the window."""
        start, end = _normalize_window(start, end)
        return self.repository.list_menus_by_location_name(location_name, start, end)

    def exists(self, location_name: str, start: datetime, end: datetime) -> bool:
        """Return True when a menu overlapping the window exists at the location."""
        return bool(self.menus_in_window(location_name, start, end))

    def menus_at_location(
        self, location_id: UUID, start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return menus at one canonical location that overlap the window."""
        start, end = _normalize_window(start, end)
        return self.repository.list_menus_by_location_ids([location_id], start, end)

    def exists_at_location(
        self, location_id: UUID, start: datetime, end: datetime
    ) -> bool:
        """Return True when the canonical location has an overlapping menu."""
        return bool(self.menus_at_location(location_id, start, end))

    def menus_with_foods(
        self, location_name: str, start: datetime, end: datetime
    ) -> list[MenuWithFoods]:
        """Return overlapping menus at a named location with their foods."""
        menus = self.menus_in_window(location_name, start, end)
        foods = self.repository.list_foods_for_menus([menu.id for menu in menus])
        return [
            MenuWithFoods(menu=menu, foods=foods.get(menu.id, [])) for menu in menus
        ]

    def menus_near(  # noqa: PLR0913
        self,
        latitude: float,
        longitude: float,
        start: datetime,
        end: datetime,
        max_distance_km: float = 10.0,
    ) -> list[MenuWithFoodsAndDistance]:
        """Return overlapping menus near a point, closest location first."""
        start, end = _normalize_window(start, end)
        nearby = self.location_service.find_all_locations_near(
            latitude, longitude, max_distance_km
        )
        if not nearby:
            return []
        distances = {location.id: location.distance_km for location in nearby}
        menus = self.repository.list_menus_by_location_ids(
            list(distances), start, end
        )
        foods = self.repository.list_foods_for_menus([menu.id for menu in menus])
        results = [
            MenuWithFoodsAndDistance(
                menu=menu,
                foods=foods.get(menu.id, []),
                distance_km=distances[menu.location_id],
            )
            for menu in menus
        ]
        return sorted(results, key=lambda item: item.distance_km)


def _normalize_window(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    start = _as_utc(start)
    end = _as_utc(end)
    if end < start:
        raise ValidationError("end_time", "end_time must not be before start_time")
    return start, end


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class MenuRepository(MenuReadRepository, MenuStore, Protocol):
    """Menu persistence serving both queries and ingestion transactions."""
