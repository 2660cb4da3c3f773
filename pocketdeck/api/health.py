"""
Health check endpoints.

Provides liveness and readiness checks. Readiness checks the database and
reports the card catalog's cache state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pocketdeck.api.dependencies import Catalog
from pocketdeck.db.database import get_session

router = APIRouter(tags=["health"])


class CatalogHealth(BaseModel):
    """Card catalog cache status."""

    state: str
    cards: int
    fetched_at: float | None = None
    degraded: bool = False


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    catalog: CatalogHealth | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Catalog,
) -> HealthResponse:
    """
    Readiness check.

    Returns 503 if the database is unavailable. An empty or stale catalog
    does not fail readiness; it is fetched on demand.
    """
    cache = catalog.status()
    catalog_health = CatalogHealth(
        state=cache.state.value,
        cards=cache.card_count,
        fetched_at=cache.fetched_at,
        degraded=cache.degraded,
    )

    try:
        await session.execute(text("SELECT 1"))
        return HealthResponse(status="ready", database="connected", catalog=catalog_health)
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected", catalog=catalog_health)
