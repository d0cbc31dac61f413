"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from dining_menus.adapters.supabase_location_repository import (
    SupabaseLocationRepository,
)
from dining_menus.adapters.supabase_menu_repository import SupabaseMenuRepository
from dining_menus.adapters.supabase_source_repository import SupabaseSourceRepository
from dining_menus.config import Settings
from dining_menus.services.batch import BatchIngestionService
from dining_menus.services.ingestion import MenuIngestionService
from dining_menus.services.locations import LocationRepository, LocationService
from dining_menus.services.menus import MenuQueryService, MenuRepository
from dining_menus.services.seed import SeedService
from dining_menus.services.sources import (
    InformationSourceRepository,
    InformationSourceService,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    location_service: LocationService
    source_service: InformationSourceService
    query_service: MenuQueryService
    ingestion_service: MenuIngestionService
    batch_service: BatchIngestionService
    seed_service: SeedService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    radius = resolved_settings.location_match_radius_km
    location_repository = SupabaseLocationRepository(supabase_client, radius)
    source_repository = SupabaseSourceRepository(supabase_client)
    menu_repository = SupabaseMenuRepository(supabase_client, radius)
    return wire_services(
        resolved_settings,
        location_repository=location_repository,
        source_repository=source_repository,
        menu_repository=menu_repository,
    )


def wire_services(
    settings: Settings,
    *,
    location_repository: LocationRepository,
    source_repository: InformationSourceRepository,
    menu_repository: MenuRepository,
) -> AppContainer:
    """Build the service graph on top of the given repositories."""
    location_service = LocationService(
        location_repository,
        match_radius_km=settings.location_match_radius_km,
    )
    source_service = InformationSourceService(source_repository)
    query_service = MenuQueryService(menu_repository, location_service)
    ingestion_service = MenuIngestionService(
        store=menu_repository,
        location_service=location_service,
        source_service=source_service,
        conflict_retry_attempts=settings.conflict_retry_attempts,
    )
    batch_service = BatchIngestionService(
        ingestion_service=ingestion_service,
        query_service=query_service,
        location_service=location_service,
        max_workers=settings.batch_max_workers,
    )
    return AppContainer(
        settings=settings,
        location_service=location_service,
        source_service=source_service,
        query_service=query_service,
        ingestion_service=ingestion_service,
        batch_service=batch_service,
        seed_service=SeedService(location_service, source_service),
    )
