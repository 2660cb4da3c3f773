"""
Catalog seed file.

A JSON dump of a normalized catalog. Loading one on a cold start avoids the
multi-minute live fetch; the freshness window still triggers a live refresh.
"""

import json
from pathlib import Path

from pydantic import TypeAdapter

from pocketdeck.models.card import CatalogItem

_items_adapter = TypeAdapter(list[CatalogItem])


def write_seed(items: list[CatalogItem] | tuple[CatalogItem, ...], path: Path) -> Path:
    """
    Write catalog items to a seed file.

    Args:
        items: Normalized catalog
        path: Destination file (parent directories are created)

    Returns:
        Path written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = _items_adapter.dump_python(list(items), mode="json", by_alias=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    return path


def load_seed(path: Path) -> list[CatalogItem]:
    """
    Load catalog items from a seed file.

    Args:
        path: Seed file written by write_seed

    Returns:
        Catalog items in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a valid catalog dump
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog seed not found at {path}")

    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Catalog seed at {path} is corrupted: {e}") from e

    # ValidationError subclasses ValueError
    return _items_adapter.validate_python(payload)
