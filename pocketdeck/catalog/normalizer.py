"""
Card normalizer.

Turns raw TCGdex card records into CatalogItem. Only named fields are
copied into a fresh record; attacks, weaknesses and resistances are never
read, so whatever shape the source gives them cannot leak into the cache.
"""

from typing import Any

from pocketdeck.models.card import CardAttributes, CardGroup, CatalogItem

TCGDEX_CDN = "https://assets.tcgdex.net/en/tcgp"

IMAGE_EXTENSIONS = (".webp", ".png", ".jpg", ".jpeg")

# Best quality first
IMAGE_VARIANTS = ("high", "large", "low", "small")


def card_number(local_id: str | None) -> str | None:
    """
    Card number within its set.

    Args:
        local_id: Set-scoped id, either bare ("001") or prefixed ("A1-001")

    Returns:
        Trailing segment after the last "-", or None if empty
    """
    if not isinstance(local_id, str) or not local_id:
        return None
    return local_id.rsplit("-", 1)[-1] or None


def resolve_image_url(
    image: Any,
    group_id: str | None,
    number: str | None,
    *,
    cdn_base: str = TCGDEX_CDN,
    quality: str = "high",
    image_format: str = "webp",
) -> str | None:
    """
    Build a usable image URL.

    TCGdex returns image URLs without a file extension; the client must append
    /{quality}.{format}. Some payloads carry a dict of quality variants instead.

    Args:
        image: Raw image field (string, dict of variants, or missing)
        group_id: Set id, used to synthesize a CDN URL when image is missing
        number: Card number within the set
        cdn_base: CDN root for the series
        quality: Quality segment to append
        image_format: File extension to append

    Returns:
        Resolved URL, or None if nothing can be derived
    """
    base: str | None = None

    if isinstance(image, str):
        base = image
    elif isinstance(image, dict):
        for variant in IMAGE_VARIANTS:
            candidate = image.get(variant)
            if isinstance(candidate, str) and candidate:
                base = candidate
                break

    if base:
        if base.lower().endswith(IMAGE_EXTENSIONS):
            return base
        return f"{base.rstrip('/')}/{quality}.{image_format}"

    if group_id and number:
        return f"{cdn_base.rstrip('/')}/{group_id}/{number}/{quality}.{image_format}"

    return None


def normalize_card(
    raw: dict[str, Any],
    group: CardGroup,
    *,
    cdn_base: str = TCGDEX_CDN,
    quality: str = "high",
    image_format: str = "webp",
) -> CatalogItem:
    """
    Project a raw card record onto CatalogItem.

    Args:
        raw: Card record as returned by TCGdex
        group: Set the card was fetched from (its id/name win over the raw record)
        cdn_base: CDN root for synthesized image URLs
        quality: Image quality segment
        image_format: Image file extension

    Returns:
        A fresh, fully serializable CatalogItem

    Raises:
        pydantic.ValidationError: If the record lacks an id or name
    """
    card_id = _text(raw.get("id"))
    local_id = _text(raw.get("localId"))
    if not local_id and isinstance(card_id, str):
        local_id = card_number(card_id)

    return CatalogItem(
        id=card_id,
        local_id=local_id,
        name=_text(raw.get("name")),
        image_url=resolve_image_url(
            raw.get("image"),
            group.id,
            card_number(local_id),
            cdn_base=cdn_base,
            quality=quality,
            image_format=image_format,
        ),
        group=CardGroup(id=group.id, name=group.name),
        attributes=CardAttributes(
            category=_str(raw.get("category")),
            hp=_int(raw.get("hp")),
            types=_array(raw.get("types"), str),
            stage=_str(raw.get("stage")),
            rarity=_str(raw.get("rarity")),
            dex_id=_array(raw.get("dexId"), int),
            level=_int(raw.get("level")),
            description=_str(raw.get("description")),
            retreat=_int(raw.get("retreat")),
            effect=_str(raw.get("effect")),
        ),
    )


def _text(value: Any) -> Any:
    """Identity fields are strings; numbers are stringified, anything else left for validation."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _int(value: Any) -> int | None:
    """Whole numbers only; numeric strings are accepted, anything else counts as absent."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _array(value: Any, item_type: type) -> list[Any]:
    """Fresh list of the elements of the expected type, or empty if the value is not a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, item_type) and not isinstance(item, bool)]
