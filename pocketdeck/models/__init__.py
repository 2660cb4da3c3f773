from pocketdeck.models.card import CardAttributes, CardGroup, CatalogItem
from pocketdeck.models.deck import (
    Deck,
    DeckAccessError,
    DeckCard,
    DeckNotFoundError,
    DeckSizeError,
    deck_total,
    validate_deck_size,
)

__all__ = [
    "CardAttributes",
    "CardGroup",
    "CatalogItem",
    "Deck",
    "DeckAccessError",
    "DeckCard",
    "DeckNotFoundError",
    "DeckSizeError",
    "deck_total",
    "validate_deck_size",
]
