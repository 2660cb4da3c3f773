"""
Catalog service.

The only entry point the rest of the app uses for card data. Serves the
cached catalog, refreshes it when the freshness window expires, and falls
back to the stale catalog when a refresh fails.
"""

import asyncio
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path

import httpx
from pydantic import ValidationError

from pocketdeck.catalog.cache import CacheSnapshot, CacheState, CatalogCache
from pocketdeck.catalog.client import TCGdexClient
from pocketdeck.catalog.errors import (
    CatalogError,
    CatalogUnavailableError,
    DegradedServiceWarning,
)
from pocketdeck.catalog.fetcher import CatalogFetcher, FetchedCard
from pocketdeck.catalog.normalizer import TCGDEX_CDN, normalize_card
from pocketdeck.catalog.seed import load_seed
from pocketdeck.config import Settings
from pocketdeck.models.card import CatalogItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheStatus:
    """Point-in-time view of the cache for health reporting."""

    state: CacheState
    card_count: int
    fetched_at: float | None
    degraded: bool


class CatalogService:
    """Facade over the fetcher, normalizer and cache."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        cache: CatalogCache | None = None,
        *,
        cdn_base: str = TCGDEX_CDN,
        image_quality: str = "high",
        image_format: str = "webp",
        seed_path: Path | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache or CatalogCache()
        self.cdn_base = cdn_base
        self.image_quality = image_quality
        self.image_format = image_format
        self._seed_path = seed_path
        self._refresh_lock = asyncio.Lock()

    async def get_all(self) -> tuple[CatalogItem, ...]:
        """
        Get every card in the catalog.

        Returns:
            Cached cards, refreshed first if the cache is empty or stale.
            If the refresh fails and a stale catalog exists, that is returned.

        Raises:
            CatalogUnavailableError: If the cache is empty and the fetch failed
        """
        snapshot = self.cache.snapshot
        if snapshot is not None and self.cache.is_fresh():
            return snapshot.items

        # Callers that queued behind an in-flight refresh reuse its result
        async with self._refresh_lock:
            snapshot = self.cache.snapshot
            if snapshot is not None and self.cache.is_fresh():
                return snapshot.items

            if snapshot is None:
                seeded = self._load_seed()
                if seeded is not None:
                    return seeded.items

            return await self._refresh()

    async def get_by_id(self, card_id: str) -> CatalogItem | None:
        """
        Get a single card by id.

        Returns None if no card has that id.

        Raises:
            CatalogUnavailableError: If the cache is empty and the fetch failed
        """
        # The catalog is a few thousand cards at most, a scan is fine
        for card in await self.get_all():
            if card.id == card_id:
                return card
        return None

    def invalidate(self) -> None:
        """Clear the cache. The next read performs a full refetch."""
        self.cache.invalidate()
        logger.info("Cache cleared")

    def status(self) -> CacheStatus:
        snapshot = self.cache.snapshot
        return CacheStatus(
            state=self.cache.state(),
            card_count=len(snapshot.items) if snapshot else 0,
            fetched_at=snapshot.fetched_at if snapshot else None,
            degraded=self.cache.degraded,
        )

    def normalize(self, fetched: list[FetchedCard]) -> list[CatalogItem]:
        """Normalize raw records, skipping any that lack identity fields."""
        items: list[CatalogItem] = []
        for raw, group in fetched:
            try:
                items.append(
                    normalize_card(
                        raw,
                        group,
                        cdn_base=self.cdn_base,
                        quality=self.image_quality,
                        image_format=self.image_format,
                    )
                )
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed card %r in set %s: %s", raw.get("id"), group.id, e
                )
        return items

    async def _refresh(self) -> tuple[CatalogItem, ...]:
        previous = self.cache.snapshot
        logger.info("Fetching cards from TCGdex...")

        try:
            fetched = await self.fetcher.fetch_all()
        except (CatalogError, TimeoutError) as e:
            if previous is not None:
                logger.warning(
                    "Catalog refresh failed (%s), serving %d cached cards from %s",
                    e,
                    len(previous.items),
                    previous.fetched_at,
                )
                warnings.warn(
                    DegradedServiceWarning(f"Serving stale catalog after failed refresh: {e}"),
                    stacklevel=2,
                )
                self.cache.degraded = True
                return previous.items

            logger.error("Catalog fetch failed with no cache to fall back on: %s", e)
            raise CatalogUnavailableError("Failed to fetch cards from TCGdex") from e

        items = self.normalize(fetched)
        if not items:
            # Never replace a catalog with nothing; the next read tries again
            if previous is not None:
                logger.warning(
                    "TCGdex returned no cards, keeping %d cached cards", len(previous.items)
                )
                return previous.items
            logger.warning("TCGdex returned no cards, leaving cache empty")
            return ()

        snapshot = self.cache.store(items)
        logger.info("Cached %d cards", len(snapshot.items))
        return snapshot.items

    def _load_seed(self) -> CacheSnapshot | None:
        """Warm an empty cache from the seed file. Only tried once."""
        path, self._seed_path = self._seed_path, None
        if path is None:
            return None

        try:
            items = load_seed(path)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring catalog seed %s: %s", path, e)
            return None

        if not items:
            logger.warning("Ignoring empty catalog seed %s", path)
            return None

        snapshot = self.cache.store(items)
        logger.info("Loaded %d cards from seed %s", len(items), path)
        return snapshot


def build_catalog_service(
    http: httpx.AsyncClient,
    config: Settings,
    *,
    use_seed: bool = True,
) -> CatalogService:
    """Wire a CatalogService from settings around a shared HTTP client."""
    client = TCGdexClient(http, base_url=config.catalog_source_url)
    fetcher = CatalogFetcher(
        client,
        series_id=config.catalog_series,
        timeout=config.catalog_request_timeout,
        max_attempts=config.catalog_max_attempts,
        initial_delay=config.catalog_retry_delay,
        batch_size=config.catalog_detail_batch_size,
        enrich_details=config.catalog_enrich_details,
    )
    return CatalogService(
        fetcher,
        CatalogCache(ttl=config.catalog_cache_ttl),
        cdn_base=config.catalog_cdn_base,
        image_quality=config.image_quality,
        image_format=config.image_format,
        seed_path=config.catalog_seed_path if use_seed else None,
    )
