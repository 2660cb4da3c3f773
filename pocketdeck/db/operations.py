"""
Database CRUD operations.

Provides async functions for creating, reading, updating, and deleting
user decks. Ownership is checked here so every caller gets it.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketdeck.models.db import DeckDB
from pocketdeck.models.deck import (
    Deck,
    DeckAccessError,
    DeckCard,
    DeckNotFoundError,
    validate_deck_size,
)


def _now() -> datetime:
    return datetime.now(UTC)


def _cards_to_json(cards: list[DeckCard]) -> list[dict[str, object]]:
    return [card.model_dump(by_alias=True) for card in cards]


async def get_user_decks(session: AsyncSession, user_id: str) -> list[DeckDB]:
    """Get all decks owned by a user, most recently updated first."""
    result = await session.execute(
        select(DeckDB).where(DeckDB.user_id == user_id).order_by(DeckDB.updated_at.desc())
    )
    return list(result.scalars().all())


async def get_deck(session: AsyncSession, deck_id: str) -> DeckDB | None:
    """Get a deck by id regardless of owner."""
    return await session.get(DeckDB, deck_id)


async def get_owned_deck(session: AsyncSession, deck_id: str, user_id: str) -> DeckDB:
    """
    Get a deck, verifying it belongs to the user.

    Raises:
        DeckNotFoundError: If the deck doesn't exist
        DeckAccessError: If another user owns it
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        raise DeckNotFoundError(deck_id)
    if deck.user_id != user_id:
        raise DeckAccessError(deck_id, user_id)
    return deck


async def create_deck(
    session: AsyncSession,
    user_id: str,
    name: str,
    cards: list[DeckCard],
    notes: str = "",
) -> DeckDB:
    """
    Create a new deck for a user.

    Raises:
        DeckSizeError: If the deck is not exactly DECK_SIZE cards
    """
    validate_deck_size(cards)

    now = _now()
    deck = DeckDB(
        id=uuid.uuid4().hex,
        user_id=user_id,
        name=name,
        cards=_cards_to_json(cards),
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    session.add(deck)
    await session.flush()
    return deck


async def update_deck(
    session: AsyncSession,
    deck_id: str,
    user_id: str,
    *,
    name: str | None = None,
    cards: list[DeckCard] | None = None,
    notes: str | None = None,
) -> DeckDB:
    """
    Update the given fields of a user's deck.

    Fields left as None are unchanged. updated_at is always bumped.

    Raises:
        DeckNotFoundError: If the deck doesn't exist
        DeckAccessError: If another user owns it
        DeckSizeError: If new cards are not exactly DECK_SIZE cards
    """
    deck = await get_owned_deck(session, deck_id, user_id)

    if cards is not None:
        validate_deck_size(cards)
        deck.cards = _cards_to_json(cards)
    if name is not None:
        deck.name = name
    if notes is not None:
        deck.notes = notes
    deck.updated_at = _now()

    await session.flush()
    return deck


async def delete_deck(session: AsyncSession, deck_id: str, user_id: str) -> None:
    """
    Delete a user's deck.

    Raises:
        DeckNotFoundError: If the deck doesn't exist
        DeckAccessError: If another user owns it
    """
    deck = await get_owned_deck(session, deck_id, user_id)
    await session.delete(deck)
    await session.flush()


def deck_to_model(db_deck: DeckDB) -> Deck:
    """Convert a database deck to a domain model."""
    return Deck(
        id=db_deck.id,
        name=db_deck.name,
        cards=[DeckCard.model_validate(card) for card in db_deck.cards],
        notes=db_deck.notes or "",
        user_id=db_deck.user_id,
        created_at=db_deck.created_at,
        updated_at=db_deck.updated_at,
    )
