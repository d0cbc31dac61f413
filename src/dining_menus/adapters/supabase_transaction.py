"""Staged Supabase writes committed through a single database function."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from postgrest.exceptions import APIError
from supabase import Client

from dining_menus.adapters.supabase_location_repository import (
    SupabaseLocationRepository,
)
from dining_menus.adapters.supabase_rows import (
    food_row,
    location_row,
    menu_row,
    parse_location,
    parse_source,
    source_row,
    translate_api_error,
)
from dining_menus.adapters.supabase_source_repository import SupabaseSourceRepository
from dining_menus.domain.errors import StorageError
from dining_menus.domain.locations import Location
from dining_menus.domain.menus import NewFood, NewMenu
from dining_menus.domain.sources import InformationSource
from dining_menus.services.ingestion import IngestionTransaction
from dining_menus.services.locations import MATCH_RADIUS_KM

_logger = logging.getLogger(__name__)

# Insert order used by the ingest_menu_rows database function.
STAGED_TABLES = (
    "locations",
    "information_sources",
    "nutrient_profiles",
    "foods",
    "menus",
    "menu_foods",
)


def _empty_stage() -> dict[str, list[dict[str, object]]]:
    return {table: [] for table in STAGED_TABLES}


@dataclass
class SupabaseIngestionTransaction(IngestionTransaction):
    """Collects rows with client-generated ids and writes them in one call.

    PostgREST requests each run in their own transaction, so nothing is
    written until ``commit``. Reads see committed rows followed by rows
    staged in this transaction.
    """

    client: Client
    match_radius_km: float = MATCH_RADIUS_KM
    staged: dict[str, list[dict[str, object]]] = field(
        default_factory=_empty_stage, init=False
    )
    _links: set[tuple[UUID, UUID]] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self._locations = SupabaseLocationRepository(self.client, self.match_radius_km)
        self._sources = SupabaseSourceRepository(self.client)

    def list_locations_by_name(self, name: str) -> list[Location]:
        committed = self._locations.list_locations_by_name(name)
        staged = [
            parse_location(row)
            for row in self.staged["locations"]
            if row["name"] == name
        ]
        return committed + staged

    def insert_location(self, name: str, latitude: float, longitude: float) -> UUID:
        location_id = uuid4()
        self.staged["locations"].append(
            location_row(location_id, name, latitude, longitude)
        )
        return location_id

    def get_source_by_name(self, name: str) -> InformationSource | None:
        for row in self.staged["information_sources"]:
            if row["name"] == name:
                return parse_source(row)
        return self._sources.get_source_by_name(name)

    def insert_source(
        self,
        name: str,
        description: str | None,
        error_confidence_description: str | None,
    ) -> UUID:
        source_id = uuid4()
        self.staged["information_sources"].append(
            source_row(source_id, name, description, error_confidence_description)
        )
        return source_id

    def insert_nutrient_profile(self, nutrients: Mapping[str, float]) -> UUID:
        profile_id = uuid4()
        self.staged["nutrient_profiles"].append({"id": str(profile_id), **nutrients})
        return profile_id

    def insert_food(self, food: NewFood) -> UUID:
        food_id = uuid4()
        self.staged["foods"].append(food_row(food_id, food))
        return food_id

    def insert_menu(self, menu: NewMenu) -> UUID:
        menu_id = uuid4()
        self.staged["menus"].append(menu_row(menu_id, menu))
        return menu_id

    def link_food(self, menu_id: UUID, food_id: UUID) -> None:
        if (menu_id, food_id) in self._links:
            raise StorageError(f"food {food_id} is already linked to menu {menu_id}")
        self._links.add((menu_id, food_id))
        self.staged["menu_foods"].append(
            {"menu_id": str(menu_id), "food_id": str(food_id)}
        )

    def commit(self) -> None:
        """Write every staged row in one database transaction."""
        if not any(self.staged.values()):
            return
        counts = {table: len(rows) for table, rows in self.staged.items() if rows}
        try:
            self.client.rpc(
                "ingest_menu_rows",
                {"payload": {**self.staged, "match_radius_km": self.match_radius_km}},
            ).execute()
        except APIError as exc:
            raise translate_api_error(
                exc,
                entity="row",
                key=str(exc.details or exc.message),
                action="commit menu rows",
            ) from exc
        finally:
            self.rollback()
        _logger.debug("Committed staged rows: %s", counts)

    def rollback(self) -> None:
        """Discard staged rows."""
        self.staged = _empty_stage()
        self._links.clear()
