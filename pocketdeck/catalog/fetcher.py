"""
Catalog fetcher.

Pulls every card of a TCGdex series as raw records:
1. Fetch the series to get its list of sets (fatal if this fails)
2. Fetch each set's card list, one set at a time
3. Fetch full detail for cards the set listing only summarizes

Only step 1 can fail the whole fetch. A broken set or card is logged
and skipped, so a bad day upstream means a smaller catalog, not an error.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

from pocketdeck.catalog.client import TCGdexClient
from pocketdeck.catalog.errors import CatalogError, TransientFetchError
from pocketdeck.catalog.resilience import Sleep, retry_with_backoff, with_timeout
from pocketdeck.models.card import CardGroup

logger = logging.getLogger(__name__)

RETRYABLE = (TimeoutError, TransientFetchError)

Lookup = Callable[[str], Awaitable[dict[str, Any] | None]]

# Set listings omit these; their presence means we already hold the full record
DETAIL_FIELDS = ("category",)


class FetchedCard(NamedTuple):
    """A raw card record and the set it was fetched from."""

    raw: dict[str, Any]
    group: CardGroup


class CatalogFetcher:
    """Fetches raw card records for one series."""

    def __init__(
        self,
        client: TCGdexClient,
        *,
        series_id: str = "tcgp",
        timeout: float = 30.0,
        max_attempts: int = 3,
        initial_delay: float = 2.0,
        batch_size: int = 10,
        enrich_details: bool = True,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self.client = client
        self.series_id = series_id
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.batch_size = batch_size
        self.enrich_details = enrich_details
        self._sleep = sleep

    async def fetch_all(self) -> list[FetchedCard]:
        """
        Fetch every card in the series.

        Returns:
            Raw card records tagged with their set, in set order.
            Empty if the series has no sets.

        Raises:
            TimeoutError, CatalogError: If the series itself cannot be fetched
        """
        logger.info("Fetching series %s from TCGdex...", self.series_id)
        serie = await self._call(self.client.get_serie, self.series_id)

        set_summaries = serie.get("sets") if serie else None
        if not isinstance(set_summaries, list) or not set_summaries:
            logger.info("No sets found for series %s", self.series_id)
            return []

        logger.info("Found %d sets in series %s", len(set_summaries), self.series_id)

        fetched: list[FetchedCard] = []
        for summary in set_summaries:
            set_id = _resolve_set_id(summary)
            if not set_id:
                logger.warning("Skipping set summary without id: %r", summary)
                continue

            try:
                cards = await self.fetch_set(set_id)
            except (CatalogError, TimeoutError) as e:
                logger.error("Failed to fetch set %s: %s", set_id, e)
                continue
            except Exception:
                logger.exception("Unexpected error fetching set %s", set_id)
                continue

            fetched.extend(cards)

        logger.info("Total cards fetched: %d", len(fetched))
        return fetched

    async def fetch_set(self, set_id: str) -> list[FetchedCard]:
        """
        Fetch one set's cards, enriched with full detail where needed.

        Raises:
            TimeoutError, CatalogError: If the set listing cannot be fetched
        """
        logger.info("Fetching set: %s", set_id)
        details = await self._call(self.client.get_set, set_id)
        if not details:
            logger.warning("Set %s not found", set_id)
            return []

        raw_cards = details.get("cards")
        if not isinstance(raw_cards, list):
            logger.warning("Set %s has no card list", set_id)
            return []

        group_id = str(details.get("id") or set_id)
        group = CardGroup(id=group_id, name=str(details.get("name") or group_id))

        cards = [card for card in raw_cards if isinstance(card, dict)]
        if self.enrich_details:
            cards = await self._enrich(cards)

        logger.info("Fetched %d cards from set %s", len(cards), set_id)
        return [FetchedCard(raw=card, group=group) for card in cards]

    async def _enrich(self, cards: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Replace card summaries with full records, batch_size requests at a time."""
        enriched: list[dict[str, Any]] = []

        for start in range(0, len(cards), self.batch_size):
            batch = cards[start : start + self.batch_size]
            results = await asyncio.gather(*(self._card_detail(card) for card in batch))
            enriched.extend(card for card in results if card is not None)

        return enriched

    async def _card_detail(self, card: dict[str, Any]) -> dict[str, Any] | None:
        """Full record for a card, or None if it cannot be fetched."""
        if all(field in card for field in DETAIL_FIELDS):
            return card

        card_id = card.get("id")
        if not card_id:
            logger.warning("Skipping card without id: %r", card.get("name"))
            return None

        try:
            detail = await self._call(self.client.get_card, str(card_id))
        except (CatalogError, TimeoutError) as e:
            logger.warning("Failed to fetch card %s: %s", card_id, e)
            return None
        except Exception:
            logger.exception("Unexpected error fetching card %s", card_id)
            return None

        if detail is None:
            logger.warning("Card %s not found", card_id)
        return detail

    async def _call(self, method: Lookup, resource_id: str) -> dict[str, Any] | None:
        """One upstream call with a per-attempt deadline and backoff retry."""
        return await retry_with_backoff(
            lambda: with_timeout(lambda: method(resource_id), self.timeout),
            self.max_attempts,
            self.initial_delay,
            retry_on=RETRYABLE,
            sleep=self._sleep,
        )


def _resolve_set_id(summary: Any) -> str | None:
    """Set summaries are usually objects but older payloads carry only a name."""
    if isinstance(summary, str):
        return summary or None
    if isinstance(summary, dict):
        set_id = summary.get("id") or summary.get("name")
        return str(set_id) if set_id else None
    return None
