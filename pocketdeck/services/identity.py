"""
Identity token verification.

Users sign in with Firebase on the client and send the resulting ID token
as a bearer token. Verification is delegated to the identity provider; the
rest of the app only sees "token -> Principal or InvalidTokenError".
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_LOOKUP = "https://identitytoolkit.googleapis.com/v1/accounts:lookup"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    An authenticated user.

    Attributes:
        uid: Provider-assigned user id, used as deck owner
        email: Email address, if the provider shares one
    """

    uid: str
    email: str | None = None


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified."""

    pass


class TokenVerifier(Protocol):
    """Anything that can turn a bearer token into a Principal."""

    async def verify(self, token: str) -> Principal:
        """
        Raises:
            InvalidTokenError: If the token is rejected
        """
        ...


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens with the Identity Toolkit REST API.

    The lookup endpoint only answers for valid, unexpired tokens issued to
    the project that owns the API key.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        lookup_url: str = IDENTITY_TOOLKIT_LOOKUP,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._lookup_url = lookup_url

    async def verify(self, token: str) -> Principal:
        if not token:
            raise InvalidTokenError("Empty token")
        if not self._api_key:
            raise InvalidTokenError("Identity provider is not configured")

        try:
            response = await self._http.post(
                self._lookup_url,
                params={"key": self._api_key},
                json={"idToken": token},
            )
        except httpx.HTTPError as e:
            logger.error("Token verification request failed: %s", e)
            raise InvalidTokenError("Token verification unavailable") from e

        if response.status_code != 200:
            raise InvalidTokenError(f"Token rejected (HTTP {response.status_code})")

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidTokenError("Malformed token lookup response") from e

        users = payload.get("users") if isinstance(payload, dict) else None
        user = users[0] if isinstance(users, list) and users else None
        if not isinstance(user, dict) or not user.get("localId"):
            raise InvalidTokenError("Token does not identify a user")

        return Principal(uid=str(user["localId"]), email=user.get("email"))
