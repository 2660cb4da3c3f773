"""
Card catalog API endpoints.

Serves the cached TCG Pocket card catalog. All routes require a signed-in user.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from pocketdeck.api.dependencies import Catalog, CurrentUser
from pocketdeck.catalog.errors import CatalogUnavailableError
from pocketdeck.models.card import CatalogItem

router = APIRouter(prefix="/cards", tags=["cards"])

UNAVAILABLE_DETAIL = "Card catalog is temporarily unavailable, try again shortly"


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


@router.get(
    "",
    response_model=list[CatalogItem],
    responses={503: {"description": "Catalog could not be fetched"}},
)
async def list_cards(catalog: Catalog, _user: CurrentUser) -> list[CatalogItem]:
    """
    Get every card in the catalog.

    Cards are served from cache; the first request after startup or after
    the cache expires fetches from TCGdex and may take a while.
    """
    try:
        return list(await catalog.get_all())
    except CatalogUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=UNAVAILABLE_DETAIL,
        ) from e


@router.post("/clear-cache", response_model=MessageResponse)
async def clear_cache(catalog: Catalog, _user: CurrentUser) -> MessageResponse:
    """Drop the cached catalog so the next read refetches it."""
    catalog.invalidate()
    return MessageResponse(message="Cache cleared successfully")


@router.get(
    "/{card_id}",
    response_model=CatalogItem,
    responses={404: {"description": "Card not found"}, 503: {"description": "Catalog unavailable"}},
)
async def get_card(card_id: str, catalog: Catalog, _user: CurrentUser) -> CatalogItem:
    """
    Get a single card by id (e.g., "A1-001").

    Returns 404 if no card has that id.
    """
    try:
        card = await catalog.get_by_id(card_id)
    except CatalogUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=UNAVAILABLE_DETAIL,
        ) from e

    if card is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Card not found")

    return card
