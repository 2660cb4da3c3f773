from pocketdeck.catalog.cache import CacheSnapshot, CacheState, CatalogCache
from pocketdeck.catalog.client import TCGdexClient
from pocketdeck.catalog.errors import (
    CatalogError,
    CatalogFetchError,
    CatalogUnavailableError,
    DegradedServiceWarning,
    TransientFetchError,
)
from pocketdeck.catalog.fetcher import CatalogFetcher, FetchedCard
from pocketdeck.catalog.normalizer import card_number, normalize_card, resolve_image_url
from pocketdeck.catalog.resilience import retry_with_backoff, with_timeout
from pocketdeck.catalog.service import CacheStatus, CatalogService, build_catalog_service

__all__ = [
    "CacheSnapshot",
    "CacheState",
    "CacheStatus",
    "CatalogCache",
    "CatalogError",
    "CatalogFetchError",
    "CatalogFetcher",
    "CatalogService",
    "CatalogUnavailableError",
    "DegradedServiceWarning",
    "FetchedCard",
    "TCGdexClient",
    "TransientFetchError",
    "build_catalog_service",
    "card_number",
    "normalize_card",
    "resolve_image_url",
    "retry_with_backoff",
    "with_timeout",
]
