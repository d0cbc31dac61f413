"""Reference data seeding for dining locations and information sources."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from dining_menus.domain.records import LocationRecord
from dining_menus.services.locations import LocationService
from dining_menus.services.sources import InformationSourceService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceSeed:
    """Information source to create if missing."""

    name: str
    description: str
    error_confidence_description: str


CAL_DINING_SOURCE = SourceSeed(
    name="Cal Dining",
    description="Nutrition information available at https://dining.berkeley.edu/menus/",
    error_confidence_description=(
        "Nutrition information presented on the Cal Dining website is derived "
        "from the USDA database and data provided by our suppliers while also "
        "considering factors such as cooking methods and portion sizes. Both the "
        "nutrition and ingredient content of menu items may vary due to changes "
        "in product sourcing and formulation, portion size and other factors. "
        "Cal Dining cannot guarantee the accuracy of the nutrition information "
        "provided."
    ),
)

CAL_DINING_LOCATIONS: tuple[LocationRecord, ...] = (
    LocationRecord(
        name="Crossroads",
        description="Crossroads dining hall at UC Berkeley",
        latitude=37.867002796350604,
        longitude=-122.25622229402228,
    ),
    LocationRecord(
        name="Foothill",
        description="Foothill dining hall at UC Berkeley",
        latitude=37.87574317540418,
        longitude=-122.25605167267514,
    ),
    LocationRecord(
        name="Clark Kerr Campus",
        description="Clark Kerr Campus dining hall at UC Berkeley",
        latitude=37.864143308702076,
        longitude=-122.24888972575017,
    ),
    LocationRecord(
        name="Cafe 3",
        description="Cafe 3 dining hall at UC Berkeley",
        latitude=37.86732112692691,
        longitude=-122.26022742849526,
    ),
)


@dataclass
class SeedService:
    """Creates known sources and locations so lookup-only menus can resolve."""

    location_service: LocationService
    source_service: InformationSourceService

    def seed(
        self,
        sources: Sequence[SourceSeed] = (CAL_DINING_SOURCE,),
        locations: Sequence[LocationRecord] = CAL_DINING_LOCATIONS,
    ) -> dict[str, dict[str, UUID]]:
        """Get or create each source and location, returning ids by name."""
        source_ids = {
            source.name: self.source_service.get_or_create(
                source.name,
                description=source.description,
                error_confidence_description=source.error_confidence_description,
            )
            for source in sources
        }
        location_ids = {
            location.name: self.location_service.resolve_location(
                location.name, location.latitude, location.longitude
            )
            for location in locations
        }
        _logger.info(
            "Seeded reference data: sources=%s locations=%s",
            len(source_ids),
            len(location_ids),
        )
        return {"sources": source_ids, "locations": location_ids}
