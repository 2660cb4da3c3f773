"""
Normalized card catalog records.

These are the only card shapes that leave the catalog layer. They are
built by allow-list projection from raw TCGdex records, so anything the
source nests (attacks, weaknesses, resistances) never reaches them.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class CardGroup(_CatalogModel):
    """The set a card was released in."""

    id: str
    name: str


class CardAttributes(_CatalogModel):
    """
    Optional gameplay fields.

    None means the source did not provide the field. Array fields are
    always present, empty when the source had nothing usable.
    """

    category: str | None = None
    hp: int | None = None
    types: tuple[str, ...] = Field(default_factory=tuple)
    stage: str | None = None
    rarity: str | None = None
    dex_id: tuple[int, ...] = Field(default_factory=tuple)
    level: int | None = None
    description: str | None = None
    retreat: int | None = None
    effect: str | None = None


class CatalogItem(_CatalogModel):
    """
    A single card in the catalog.

    Attributes:
        id: TCGdex card id (e.g., "A1-001"), unique within a snapshot
        local_id: Id within the set (e.g., "001")
        name: Card name
        image_url: Fully resolved image URL
        group: Set the card belongs to
        attributes: Gameplay fields
    """

    id: str
    local_id: str
    name: str
    image_url: str | None = None
    group: CardGroup
    attributes: CardAttributes = Field(default_factory=CardAttributes)
