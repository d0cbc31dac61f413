"""Supabase repository for menus and their foods."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from dining_menus.adapters.supabase_rows import (
    MENU_COLUMNS,
    MENU_FOOD_COLUMNS,
    parse_food_detail,
    parse_menu_summary,
)
from dining_menus.adapters.supabase_transaction import SupabaseIngestionTransaction
from dining_menus.domain.menus import FoodDetail, MenuSummary
from dining_menus.services.locations import MATCH_RADIUS_KM
from dining_menus.services.menus import MenuRepository


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase implementation for menu reads and ingestion transactions."""

    client: Client
    match_radius_km: float = MATCH_RADIUS_KM

    def list_menus_by_location_name(
        self, location_name: str, start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return overlapping menus at locations with this name, newest first."""
        response = (
            self.client.table("menus")
            .select(MENU_COLUMNS)
            .eq("locations.name", location_name)
            .gte("end_time", start.isoformat())
            .lte("start_time", end.isoformat())
            .order("start_time", desc=True)
            .execute()
        )
        return [parse_menu_summary(row) for row in response.data or []]

    def list_menus_by_location_ids(
        self, location_ids: list[UUID], start: datetime, end: datetime
    ) -> list[MenuSummary]:
        """Return overlapping menus at any of the locations, newest first."""
        if not location_ids:
            return []
        response = (
            self.client.table("menus")
            .select(MENU_COLUMNS)
            .in_("location_id", [str(location_id) for location_id in location_ids])
            .gte("end_time", start.isoformat())
            .lte("start_time", end.isoformat())
            .order("start_time", desc=True)
            .execute()
        )
        return [parse_menu_summary(row) for row in response.data or []]

    def list_foods_for_menus(
        self, menu_ids: list[UUID]
    ) -> dict[UUID, list[FoodDetail]]:
        """Return foods keyed by menu id."""
        if not menu_ids:
            return {}
        response = (
            self.client.table("menu_foods")
            .select(MENU_FOOD_COLUMNS)
            .in_("menu_id", [str(menu_id) for menu_id in menu_ids])
            .execute()
        )
        foods: dict[UUID, list[FoodDetail]] = {}
        for row in response.data or []:
            food = row.get("foods")
            if not food:
                continue
            foods.setdefault(UUID(str(row["menu_id"])), []).append(
                parse_food_detail(food)
            )
        return foods

    @contextmanager
    def transaction(self) -> Iterator[SupabaseIngestionTransaction]:
        """Stage writes and commit them together when the block succeeds."""
        transaction = SupabaseIngestionTransaction(self.client, self.match_radius_km)
        try:
            yield transaction
        except BaseException:
            transaction.rollback()
            raise
        transaction.commit()
