from pocketdeck.db.database import get_session, init_db
from pocketdeck.db.operations import (
    create_deck,
    deck_to_model,
    delete_deck,
    get_deck,
    get_owned_deck,
    get_user_decks,
    update_deck,
)

__all__ = [
    "create_deck",
    "deck_to_model",
    "delete_deck",
    "get_deck",
    "get_owned_deck",
    "get_session",
    "get_user_decks",
    "init_db",
    "update_deck",
]
