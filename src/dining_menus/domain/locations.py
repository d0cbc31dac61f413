"""Domain models for dining locations."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Location:
    """Canonical dining location stored in the database."""

    id: UUID
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class NearbyLocation:
    """Location returned by a proximity query."""

    id: UUID
    name: str
    latitude: float
    longitude: float
    distance_km: float


@dataclass(frozen=True)
class BoundingBox:
    """Latitude/longitude rectangle with inclusive bounds, never crossing 180."""

    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )
