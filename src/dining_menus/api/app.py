"""FastAPI application factory."""

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dining_menus.api.admin import router as admin_router
from dining_menus.api.models import (
    error_payload,
    location_payload,
    menu_payload,
    menu_with_foods_payload,
)
from dining_menus.app_logging import configure_logging
from dining_menus.containers import AppContainer
from dining_menus.domain.errors import NotFoundError, StorageError, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": error_payload(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"error": error_payload(exc)},
        )

    @app.exception_handler(StorageError)
    async def storage_error(_: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure: %s", exc)
        return JSONResponse(
            status_code=502,
            content={"error": error_payload(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/menus")
    def list_menus(
        location: str, start: datetime, end: datetime, request: Request
    ) -> dict[str, object]:
        """Return menus at a named location overlapping the window."""
        state_container: AppContainer = request.app.state.container
        menus = state_container.query_service.menus_in_window(location, start, end)
        return {"menus": [menu_payload(menu) for menu in menus]}

    @app.get("/menus/foods")
    def list_menus_with_foods(
        location: str, start: datetime, end: datetime, request: Request
    ) -> dict[str, object]:
        """Return overlapping menus at a named location with their foods."""
        state_container: AppContainer = request.app.state.container
        menus = state_container.query_service.menus_with_foods(location, start, end)
        return {"menus": [menu_with_foods_payload(menu) for menu in menus]}

    @app.get("/menus/near")
    def list_menus_near(  # noqa: PLR0913
        latitude: float,
        longitude: float,
        start: datetime,
        end: datetime,
        request: Request,
        max_distance_km: float = 10.0,
    ) -> dict[str, object]:
        """Return overlapping menus near a point, closest first."""
        state_container: AppContainer = request.app.state.container
        menus = state_container.query_service.menus_near(
            latitude, longitude, start, end, max_distance_km
        )
        return {"menus": [menu_with_foods_payload(menu) for menu in menus]}

    @app.get("/locations/near")
    def list_locations_near(
        latitude: float,
        longitude: float,
        request: Request,
        max_distance_km: float = 10.0,
    ) -> dict[str, object]:
        """Return locations of any name within the radius, nearest first."""
        state_container: AppContainer = request.app.state.container
        locations = state_container.location_service.find_all_locations_near(
            latitude, longitude, max_distance_km
        )
        return {"locations": [location_payload(location) for location in locations]}

    return app
