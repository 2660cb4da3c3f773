"""
PocketDeck services.

Integrations with external collaborators the catalog and deck layers rely on.
"""

from pocketdeck.services.identity import (
    FirebaseTokenVerifier,
    InvalidTokenError,
    Principal,
    TokenVerifier,
)

__all__ = [
    "FirebaseTokenVerifier",
    "InvalidTokenError",
    "Principal",
    "TokenVerifier",
]
