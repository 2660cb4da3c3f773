from typing import Any
from unittest.mock import AsyncMock

import pytest

from pocketdeck.catalog.client import TCGdexClient
from pocketdeck.models.card import CardGroup


@pytest.fixture
def sample_serie() -> dict[str, Any]:
    """TCGdex series payload with three sets."""
    return {
        "id": "tcgp",
        "name": "Pokémon TCG Pocket",
        "sets": [
            {"id": "A1", "name": "Genetic Apex"},
            {"id": "A1a", "name": "Mythical Island"},
            {"id": "A2", "name": "Space-Time Smackdown"},
        ],
    }


@pytest.fixture
def sample_sets() -> dict[str, dict[str, Any]]:
    """Set payloads as returned by /sets/{id} (brief card records only)."""
    return {
        "A1": {
            "id": "A1",
            "name": "Genetic Apex",
            "cards": [
                {
                    "id": "A1-001",
                    "localId": "001",
                    "name": "Bulbasaur",
                    "image": "https://assets.tcgdex.net/en/tcgp/A1/001",
                },
                {
                    "id": "A1-002",
                    "localId": "002",
                    "name": "Ivysaur",
                    "image": "https://assets.tcgdex.net/en/tcgp/A1/002",
                },
            ],
        },
        "A1a": {
            "id": "A1a",
            "name": "Mythical Island",
            "cards": [
                {"id": "A1a-001", "localId": "001", "name": "Exeggcute"},
            ],
        },
        "A2": {
            "id": "A2",
            "name": "Space-Time Smackdown",
            "cards": [
                {
                    "id": "A2-001",
                    "localId": "001",
                    "name": "Oddish",
                    "image": "https://assets.tcgdex.net/en/tcgp/A2/001",
                },
            ],
        },
    }


def _full_card(card_id: str, name: str) -> dict[str, Any]:
    set_id, local_id = card_id.rsplit("-", 1)
    return {
        "id": card_id,
        "localId": local_id,
        "name": name,
        "image": f"https://assets.tcgdex.net/en/tcgp/{set_id}/{local_id}",
        "category": "Pokemon",
        "hp": 70,
        "types": ["Grass"],
        "stage": "Basic",
        "rarity": "One Diamond",
        "dexId": [1],
        "retreat": 1,
        "set": {"id": set_id, "name": "ignored"},
        "attacks": [{"name": "Vine Whip", "cost": ["Grass", "Colorless"], "damage": 40}],
        "weaknesses": [{"type": "Fire", "value": "+20"}],
    }


@pytest.fixture
def sample_card_details() -> dict[str, dict[str, Any]]:
    """Full card payloads as returned by /cards/{id}."""
    return {
        "A1-001": _full_card("A1-001", "Bulbasaur"),
        "A1-002": _full_card("A1-002", "Ivysaur"),
        "A1a-001": _full_card("A1a-001", "Exeggcute"),
        "A2-001": _full_card("A2-001", "Oddish"),
    }


@pytest.fixture
def mock_client(
    sample_serie: dict[str, Any],
    sample_sets: dict[str, dict[str, Any]],
    sample_card_details: dict[str, dict[str, Any]],
) -> AsyncMock:
    """TCGdex client answering from the sample payloads."""
    client = AsyncMock(spec=TCGdexClient)
    client.get_serie.return_value = sample_serie
    client.get_set.side_effect = lambda set_id: sample_sets.get(set_id)
    client.get_card.side_effect = lambda card_id: sample_card_details.get(card_id)
    return client


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def genetic_apex() -> CardGroup:
    return CardGroup(id="A1", name="Genetic Apex")
