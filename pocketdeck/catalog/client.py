"""
TCGdex REST client.

Thin async wrapper over the three read endpoints the catalog needs.
Classifies failures so the fetcher knows what is worth retrying.

API docs: https://tcgdex.dev/rest
"""

from typing import Any
from urllib.parse import quote

import httpx

from pocketdeck.catalog.errors import CatalogFetchError, TransientFetchError

TCGDEX_API = "https://api.tcgdex.net/v2/en"
USER_AGENT = "PocketDeck/1.0"


class TCGdexClient:
    """
    Read-only client for the TCGdex card database.

    Missing resources (HTTP 404) come back as None rather than raising,
    matching how the upstream SDK reports them.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = TCGDEX_API) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def get_serie(self, serie_id: str) -> dict[str, Any] | None:
        """Get a series with its list of set summaries."""
        return await self._get(f"/series/{quote(serie_id, safe='')}")

    async def get_set(self, set_id: str) -> dict[str, Any] | None:
        """Get a set with its (brief) card list."""
        return await self._get(f"/sets/{quote(set_id, safe='')}")

    async def get_card(self, card_id: str) -> dict[str, Any] | None:
        """Get the full record for one card."""
        return await self._get(f"/cards/{quote(card_id, safe='')}")

    async def _get(self, path: str) -> dict[str, Any] | None:
        url = f"{self._base_url}{path}"

        try:
            response = await self._http.get(url, headers={"User-Agent": USER_AGENT})
        except httpx.RequestError as e:
            # Connection failures, redirect loops and undecodable bodies alike
            raise TransientFetchError(f"Request to {url} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientFetchError(f"{url} returned HTTP {response.status_code}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CatalogFetchError(f"{url} returned HTTP {response.status_code}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogFetchError(f"{url} returned malformed JSON") from e

        if not isinstance(data, dict):
            raise CatalogFetchError(f"{url} returned {type(data).__name__}, expected object")
        return data
