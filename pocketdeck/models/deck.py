from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pocketdeck.config import DECK_SIZE


class DeckSizeError(ValueError):
    """Raised when a deck's card counts don't add up to DECK_SIZE."""

    def __init__(self, total: int, expected: int = DECK_SIZE):
        self.total = total
        self.expected = expected
        super().__init__(f"Deck must contain exactly {expected} cards")


class _DeckModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeckCard(_DeckModel):
    """
    A catalog card referenced by id, with a copy count.

    The id is not checked against the catalog.
    """

    card_id: str = Field(..., min_length=1)
    count: int = Field(..., ge=1)


class Deck(_DeckModel):
    """A user's saved deck."""

    id: str
    name: str
    cards: list[DeckCard]
    notes: str = ""
    user_id: str
    created_at: datetime
    updated_at: datetime


def deck_total(cards: list[DeckCard]) -> int:
    """Total number of cards, counting copies."""
    return sum(card.count for card in cards)


def validate_deck_size(cards: list[DeckCard], expected: int = DECK_SIZE) -> None:
    """
    Enforce the fixed deck size.

    Raises:
        DeckSizeError: If the card counts don't sum to expected
    """
    total = deck_total(cards)
    if total != expected:
        raise DeckSizeError(total, expected)


class DeckNotFoundError(LookupError):
    """Raised when a deck id doesn't exist."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck '{deck_id}' not found")


class DeckAccessError(PermissionError):
    """Raised when a user touches a deck they don't own."""

    def __init__(self, deck_id: str, user_id: str):
        self.deck_id = deck_id
        self.user_id = user_id
        super().__init__("Unauthorized access to deck")
