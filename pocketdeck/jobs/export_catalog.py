"""
Export the card catalog to a seed file.

A live fetch of every TCG Pocket card takes minutes. Run this job ahead of
deploys and point CATALOG_SEED_PATH at the output so cold starts serve
the seed while the cache ages toward its first live refresh.
"""

import argparse
import asyncio
import logging
from pathlib import Path

import httpx

from pocketdeck.catalog.seed import write_seed
from pocketdeck.catalog.service import build_catalog_service
from pocketdeck.config import settings

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path(__file__).parent.parent / "data" / "catalog-seed.json"


async def run_export(output_path: Path = DEFAULT_OUTPUT) -> int:
    """
    Fetch the live catalog and write it as a seed file.

    Args:
        output_path: Where to write the seed

    Returns:
        Number of cards exported

    Raises:
        CatalogUnavailableError: If the catalog cannot be fetched
    """
    logger.info("Exporting card catalog to %s...", output_path)

    async with httpx.AsyncClient(
        follow_redirects=True, timeout=settings.catalog_request_timeout
    ) as http:
        # Never seed an export from an older seed
        service = build_catalog_service(http, settings, use_seed=False)
        try:
            items = await service.get_all()
        except Exception as e:
            logger.error("Failed to export card catalog: %s", e)
            raise

    if not items:
        logger.warning("TCGdex returned no cards, leaving %s untouched", output_path)
        return 0

    write_seed(items, output_path)
    logger.info("Exported %d cards to %s", len(items), output_path)
    return len(items)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Export the card catalog to a seed file.")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT, help="Seed file path")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_export(args.output))


if __name__ == "__main__":
    main()
