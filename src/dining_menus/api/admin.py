"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from dining_menus.api.models import BatchRequest, batch_payload

if TYPE_CHECKING:
    from dining_menus.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/menus/batch", dependencies=[Depends(require_admin)])
def ingest_menus(payload: BatchRequest, request: Request) -> dict[str, object]:
    """Ingest scraped menus and report the outcome of every record."""
    container: AppContainer = request.app.state.container
    result = container.batch_service.ingest_batch(
        payload.records, skip_existing=payload.skip_existing
    )
    return batch_payload(result)


@router.post("/seed", dependencies=[Depends(require_admin)])
def seed_reference_data(request: Request) -> dict[str, object]:
    """Create the default information source and dining locations."""
    container: AppContainer = request.app.state.container
    seeded = container.seed_service.seed()
    return {
        group: {name: str(entity_id) for name, entity_id in ids.items()}
        for group, ids in seeded.items()
    }
