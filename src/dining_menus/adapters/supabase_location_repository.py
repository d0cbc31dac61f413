"""Supabase repository for dining locations."""

from dataclasses import dataclass
from uuid import UUID, uuid4

from postgrest.exceptions import APIError
from supabase import Client

from dining_menus.adapters.supabase_rows import (
    LOCATION_COLUMNS,
    location_row,
    parse_location,
    translate_api_error,
)
from dining_menus.domain.locations import BoundingBox, Location
from dining_menus.services.locations import MATCH_RADIUS_KM, LocationRepository

# Supabase caps a response at 1000 rows by default.
PAGE_SIZE = 1000


@dataclass
class SupabaseLocationRepository(LocationRepository):
    """Supabase implementation for location persistence."""

    client: Client
    match_radius_km: float = MATCH_RADIUS_KM
    page_size: int = PAGE_SIZE

    def list_locations_by_name(self, name: str) -> list[Location]:
        """Return locations with this name, oldest first."""
        response = (
            self.client.table("locations")
            .select(LOCATION_COLUMNS)
            .eq("name", name)
            .order("created_at", desc=False)
            .order("id", desc=False)
            .execute()
        )
        return [parse_location(row) for row in response.data or []]

    def list_locations_in_box(self, box: BoundingBox) -> list[Location]:
        """Return every location inside the box, paging past the row cap."""
        locations: list[Location] = []
        offset = 0
        while True:
            response = (
                self.client.table("locations")
                .select(LOCATION_COLUMNS)
                .gte("latitude", box.min_latitude)
                .lte("latitude", box.max_latitude)
                .gte("longitude", box.min_longitude)
                .lte("longitude", box.max_longitude)
                .order("id", desc=False)
                .range(offset, offset + self.page_size - 1)
                .execute()
            )
            rows = response.data or []
            locations.extend(parse_location(row) for row in rows)
            if len(rows) < self.page_size:
                return locations
            offset += self.page_size

    def get_location(self, location_id: UUID) -> Location | None:
        """Return a location by id, if present."""
        response = (
            self.client.table("locations")
            .select(LOCATION_COLUMNS)
            .eq("id", str(location_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_location(response.data[0])

    def list_locations(self) -> list[Location]:
        """Return all locations."""
        response = (
            self.client.table("locations")
            .select(LOCATION_COLUMNS)
            .order("created_at", desc=False)
            .execute()
        )
        return [parse_location(row) for row in response.data or []]

    def insert_location(self, name: str, latitude: float, longitude: float) -> UUID:
        """Insert a location through the locked proximity check."""
        location_id = uuid4()
        try:
            self.client.rpc(
                "ingest_menu_rows",
                {
                    "payload": {
                        "locations": [
                            location_row(location_id, name, latitude, longitude)
                        ],
                        "match_radius_km": self.match_radius_km,
                    }
                },
            ).execute()
        except APIError as exc:
            raise translate_api_error(
                exc, entity="location", key=name, action="create location"
            ) from exc
        return location_id
