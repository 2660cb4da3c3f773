"""
Deck API endpoints.

CRUD for the signed-in user's decks. Every deck must hold exactly
DECK_SIZE cards; card ids are not checked against the catalog.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from pocketdeck.api.dependencies import CurrentUser
from pocketdeck.db import (
    create_deck,
    deck_to_model,
    delete_deck,
    get_owned_deck,
    get_user_decks,
    update_deck,
)
from pocketdeck.db.database import get_session
from pocketdeck.models.deck import (
    Deck,
    DeckAccessError,
    DeckCard,
    DeckNotFoundError,
    DeckSizeError,
)

router = APIRouter(prefix="/decks", tags=["decks"])

Session = Annotated[AsyncSession, Depends(get_session)]


class DeckCreateRequest(BaseModel):
    """Request model for creating a deck."""

    name: str = Field(..., min_length=1, max_length=255)
    cards: list[DeckCard]
    notes: str = ""


class DeckUpdateRequest(BaseModel):
    """Request model for updating a deck. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    cards: list[DeckCard] | None = None
    notes: str | None = None


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, DeckNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deck not found")
    if isinstance(error, DeckAccessError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.get("", response_model=list[Deck])
async def list_decks(user: CurrentUser, session: Session) -> list[Deck]:
    """Get the user's decks, most recently updated first."""
    db_decks = await get_user_decks(session, user.uid)
    return [deck_to_model(d) for d in db_decks]


@router.post("", response_model=Deck, status_code=status.HTTP_201_CREATED)
async def create_user_deck(
    request: DeckCreateRequest,
    user: CurrentUser,
    session: Session,
) -> Deck:
    """
    Create a deck.

    Returns 400 if the deck is not exactly DECK_SIZE cards.
    """
    try:
        db_deck = await create_deck(
            session, user.uid, request.name, request.cards, notes=request.notes
        )
    except DeckSizeError as e:
        raise _to_http_error(e) from e

    return deck_to_model(db_deck)


@router.get("/{deck_id}", response_model=Deck)
async def get_user_deck(deck_id: str, user: CurrentUser, session: Session) -> Deck:
    """
    Get one of the user's decks.

    Returns 404 if the deck doesn't exist, 403 if someone else owns it.
    """
    try:
        db_deck = await get_owned_deck(session, deck_id, user.uid)
    except (DeckNotFoundError, DeckAccessError) as e:
        raise _to_http_error(e) from e

    return deck_to_model(db_deck)


@router.put("/{deck_id}", response_model=Deck)
async def update_user_deck(
    deck_id: str,
    request: DeckUpdateRequest,
    user: CurrentUser,
    session: Session,
) -> Deck:
    """
    Update a deck's name, cards, or notes.

    Returns 404/403 as for GET, 400 if new cards are not exactly DECK_SIZE.
    """
    try:
        db_deck = await update_deck(
            session,
            deck_id,
            user.uid,
            name=request.name,
            cards=request.cards,
            notes=request.notes,
        )
    except (DeckNotFoundError, DeckAccessError, DeckSizeError) as e:
        raise _to_http_error(e) from e

    return deck_to_model(db_deck)


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_deck(deck_id: str, user: CurrentUser, session: Session) -> Response:
    """Delete a deck. Returns 404/403 as for GET."""
    try:
        await delete_deck(session, deck_id, user.uid)
    except (DeckNotFoundError, DeckAccessError) as e:
        raise _to_http_error(e) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
