"""Location canonicalization and proximity queries."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from dining_menus.domain.errors import ConflictError, ValidationError
from dining_menus.domain.locations import BoundingBox, Location, NearbyLocation

EARTH_RADIUS_KM = 6371.0
MATCH_RADIUS_KM = 0.1
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0
# Absorbs float rounding so points on the radius stay inside the box.
_BOX_MARGIN_DEGREES = 1e-9

_logger = logging.getLogger(__name__)


class LocationWriter(Protocol):
    """Minimal persistence interface needed to resolve a location."""

    def list_locations_by_name(self, name: str) -> list[Location]:
        """Return locations with exactly this name in storage order."""

    def insert_location(self, name: str, latitude: float, longitude: float) -> UUID:
        """Insert a location and return its id."""


class LocationRepository(LocationWriter, Protocol):
    """Persistence interface for locations."""

    def list_locations_in_box(self, box: BoundingBox) -> list[Location]:
        """Return every location inside the box, bounds inclusive."""

    def get_location(self, location_id: UUID) -> Location | None:
        """Return a location by id, if present."""

    def list_locations(self) -> list[Location]:
        """Return all locations."""


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Reject coordinates outside of the valid degree ranges."""
    if not _in_range(latitude, MAX_LATITUDE):
        raise ValidationError("latitude", "must be between -90 and 90")
    if not _in_range(longitude, MAX_LONGITUDE):
        raise ValidationError("longitude", "must be between -180 and 180")


def _in_range(value: object, bound: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return -bound <= value <= bound


@dataclass
class LocationService:
    """Resolves scraped locations to canonical rows and answers proximity queries."""

    repository: LocationRepository
    match_radius_km: float = MATCH_RADIUS_KM

    def match_location(
        self,
        name: str,
        latitude: float,
        longitude: float,
        repository: LocationWriter | None = None,
    ) -> Location | None:
        """Return the canonical location for a sighting without creating one."""
        validate_coordinates(latitude, longitude)
        source = repository or self.repository
        for candidate in source.list_locations_by_name(name):
            distance = haversine_km(
                candidate.latitude, candidate.longitude, latitude, longitude
            )
            if distance < self.match_radius_km:
                return candidate
        return None

    def resolve_location(
        self,
        name: str,
        latitude: float,
        longitude: float,
        repository: LocationWriter | None = None,
    ) -> UUID:
        """Return the id of the matching location, creating it when unseen.

        Passing a transaction handle as ``repository`` defers the conflict to
        its commit. Without one, an insert that loses a race is re-resolved to
        the row that won.
        """
        target = repository or self.repository
        existing = self.match_location(name, latitude, longitude, target)
        if existing is not None:
            return existing.id
        try:
            location_id = target.insert_location(name, latitude, longitude)
        except ConflictError:
            if repository is not None:
                raise
            winner = self.match_location(name, latitude, longitude)
            if winner is None:
                raise
            _logger.warning(
                "Location insert conflicted, using existing: name=%s id=%s",
                name,
                winner.id,
            )
            return winner.id
        _logger.info(
            "Created location: name=%s lat=%s lon=%s", name, latitude, longitude
        )
        return location_id

    def find_nearest_locations_by_name(
        self,
        name: str,
        latitude: float,
        longitude: float,
        max_distance_km: float = 50.0,
    ) -> list[NearbyLocation]:
        """Return same-named locations within the radius, nearest first."""
        validate_coordinates(latitude, longitude)
        return _within_radius(
            self.repository.list_locations_by_name(name),
            latitude,
            longitude,
            max_distance_km,
        )

    def find_all_locations_near(
        self,
        latitude: float,
        longitude: float,
        max_distance_km: float = 10.0,
    ) -> list[NearbyLocation]:
        """Return locations of any name within the radius, nearest first.

        Candidates come from boxes that contain the whole radius, so nothing
        in range is dropped. Each one is then re-checked with the haversine
        distance to discard the box corners.
        """
        validate_coordinates(latitude, longitude)
        candidates: dict[UUID, Location] = {}
        for box in bounding_boxes(latitude, longitude, max_distance_km):
            for location in self.repository.list_locations_in_box(box):
                candidates.setdefault(location.id, location)
        return _within_radius(
            list(candidates.values()), latitude, longitude, max_distance_km
        )

    def get_location(self, location_id: UUID) -> Location | None:
        """Return a location by id."""
        return self.repository.get_location(location_id)

    def get_location_by_name(self, name: str) -> Location | None:
        """Return the first location stored under a name."""
        locations = self.repository.list_locations_by_name(name)
        return locations[0] if locations else None

    def list_locations(self) -> list[Location]:
        """Return all stored locations."""
        return self.repository.list_locations()


def _within_radius(
    locations: list[Location],
    latitude: float,
    longitude: float,
    max_distance_km: float,
) -> list[NearbyLocation]:
    nearby: list[NearbyLocation] = []
    for location in locations:
        distance = haversine_km(
            location.latitude, location.longitude, latitude, longitude
        )
        if distance <= max_distance_km:
            nearby.append(
                NearbyLocation(
                    id=location.id,
                    name=location.name,
                    latitude=location.latitude,
                    longitude=location.longitude,
                    distance_km=distance,
                )
            )
    return sorted(nearby, key=lambda item: item.distance_km)


def bounding_boxes(
    latitude: float, longitude: float, radius_km: float
) -> list[BoundingBox]:
    """Return boxes that together contain every point within ``radius_km``.

    The longitude half-width is ``asin(sin(d) / cos(lat))`` for an angular
    radius ``d``, which is the widest a spherical cap gets. A cap that reaches
    a pole spans every longitude. A box that crosses the antimeridian is
    split into two.
    """
    angular = radius_km / EARTH_RADIUS_KM
    lat_span = math.degrees(angular) + _BOX_MARGIN_DEGREES
    min_lat = latitude - lat_span
    max_lat = latitude + lat_span
    if min_lat <= -MAX_LATITUDE or max_lat >= MAX_LATITUDE:
        return [
            BoundingBox(
                max(min_lat, -MAX_LATITUDE),
                min(max_lat, MAX_LATITUDE),
                -MAX_LONGITUDE,
                MAX_LONGITUDE,
            )
        ]
    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    lon_span = math.degrees(math.asin(min(ratio, 1.0))) + _BOX_MARGIN_DEGREES
    min_lon = longitude - lon_span
    max_lon = longitude + lon_span
    if min_lon < -MAX_LONGITUDE:
        return [
            BoundingBox(min_lat, max_lat, min_lon + 2 * MAX_LONGITUDE, MAX_LONGITUDE),
            BoundingBox(min_lat, max_lat, -MAX_LONGITUDE, max_lon),
        ]
    if max_lon > MAX_LONGITUDE:
        return [
            BoundingBox(min_lat, max_lat, min_lon, MAX_LONGITUDE),
            BoundingBox(min_lat, max_lat, -MAX_LONGITUDE, max_lon - 2 * MAX_LONGITUDE),
        ]
    return [BoundingBox(min_lat, max_lat, min_lon, max_lon)]
