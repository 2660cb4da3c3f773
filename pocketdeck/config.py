from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PocketDeck"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/pocketdeck"

    # TCGdex card database
    catalog_api_url: str = "https://api.tcgdex.net/v2"
    catalog_asset_url: str = "https://assets.tcgdex.net"
    catalog_language: str = "en"
    catalog_series: str = "tcgp"
    image_quality: str = "high"
    image_format: str = "webp"

    # Per-request deadline and retry policy for catalog fetches
    catalog_request_timeout: float = 30.0
    catalog_max_attempts: int = 3
    catalog_retry_delay: float = 2.0

    # Card data rarely changes, refresh once a day
    catalog_cache_ttl: float = 60.0 * 60.0 * 24.0

    catalog_detail_batch_size: int = 10

    # Set listings only carry id/name/image; full card detail is fetched per card.
    # Turning this off makes cold starts fast but leaves type data empty.
    catalog_enrich_details: bool = True

    # Optional JSON dump of the catalog used to warm a cold cache
    catalog_seed_path: Path | None = None

    # Firebase Web API key used to verify identity tokens
    identity_api_key: str = ""

    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def catalog_source_url(self) -> str:
        """Language-scoped TCGdex API root."""
        return f"{self.catalog_api_url.rstrip('/')}/{self.catalog_language}"

    @property
    def catalog_cdn_base(self) -> str:
        """Asset CDN root for the configured series, e.g. https://assets.tcgdex.net/en/tcgp."""
        return f"{self.catalog_asset_url.rstrip('/')}/{self.catalog_language}/{self.catalog_series}"


settings = Settings()


# =============================================================================
# DECK RULES
# =============================================================================

# TCG Pocket decks are always exactly 20 cards
DECK_SIZE = 20
