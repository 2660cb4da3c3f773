"""Tests for catalog fetch orchestration."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from pocketdeck.catalog.errors import CatalogFetchError, TransientFetchError
from pocketdeck.catalog.fetcher import CatalogFetcher


def _fetcher(client: AsyncMock, sleep, **kwargs) -> CatalogFetcher:
    return CatalogFetcher(client, sleep=sleep, **kwargs)


class TestFetchAll:
    async def test_fetches_every_set_in_order(self, mock_client: AsyncMock, fake_sleep) -> None:
        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert [card.raw["id"] for card in fetched] == ["A1-001", "A1-002", "A1a-001", "A2-001"]
        assert [card.group.id for card in fetched] == ["A1", "A1", "A1a", "A2"]
        assert [call.args[0] for call in mock_client.get_set.await_args_list] == [
            "A1",
            "A1a",
            "A2",
        ]

    async def test_group_taken_from_set_detail(self, mock_client: AsyncMock, fake_sleep) -> None:
        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert fetched[0].group.name == "Genetic Apex"
        assert fetched[2].group.name == "Mythical Island"

    async def test_enriches_brief_cards_with_detail(
        self, mock_client: AsyncMock, fake_sleep
    ) -> None:
        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert all(card.raw["category"] == "Pokemon" for card in fetched)
        assert mock_client.get_card.await_count == 4

    async def test_enrichment_can_be_disabled(self, mock_client: AsyncMock, fake_sleep) -> None:
        fetched = await _fetcher(mock_client, fake_sleep, enrich_details=False).fetch_all()

        assert len(fetched) == 4
        assert "category" not in fetched[0].raw
        mock_client.get_card.assert_not_awaited()

    async def test_cards_with_full_fields_are_not_refetched(
        self, mock_client: AsyncMock, sample_sets: dict, sample_card_details: dict, fake_sleep
    ) -> None:
        sample_sets["A1"]["cards"] = [sample_card_details["A1-001"]]

        await _fetcher(mock_client, fake_sleep).fetch_all()

        fetched_ids = [call.args[0] for call in mock_client.get_card.await_args_list]
        assert "A1-001" not in fetched_ids

    async def test_empty_series_returns_empty(self, mock_client: AsyncMock, fake_sleep) -> None:
        mock_client.get_serie.return_value = {"id": "tcgp", "sets": []}

        assert await _fetcher(mock_client, fake_sleep).fetch_all() == []
        mock_client.get_set.assert_not_awaited()

    async def test_missing_series_returns_empty(self, mock_client: AsyncMock, fake_sleep) -> None:
        mock_client.get_serie.return_value = None

        assert await _fetcher(mock_client, fake_sleep).fetch_all() == []

    async def test_set_summary_without_id_uses_name(
        self, mock_client: AsyncMock, sample_sets: dict, fake_sleep
    ) -> None:
        mock_client.get_serie.return_value = {"sets": [{"name": "A1"}, {}]}

        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert {card.group.id for card in fetched} == {"A1"}
        assert mock_client.get_set.await_count == 1

    async def test_series_failure_is_fatal_after_retries(
        self, mock_client: AsyncMock, fake_sleep
    ) -> None:
        mock_client.get_serie.side_effect = TransientFetchError("HTTP 503")

        with pytest.raises(TransientFetchError):
            await _fetcher(mock_client, fake_sleep).fetch_all()

        assert mock_client.get_serie.await_count == 3
        assert fake_sleep.delays == [2.0, 4.0]

    async def test_series_bad_request_is_not_retried(
        self, mock_client: AsyncMock, fake_sleep
    ) -> None:
        mock_client.get_serie.side_effect = CatalogFetchError("HTTP 400")

        with pytest.raises(CatalogFetchError):
            await _fetcher(mock_client, fake_sleep).fetch_all()

        assert mock_client.get_serie.await_count == 1

    async def test_series_timeout_is_retried(self, mock_client: AsyncMock, fake_sleep) -> None:
        serie = mock_client.get_serie.return_value
        calls = 0

        async def slow_once(serie_id: str) -> dict:
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(10)
            return serie

        mock_client.get_serie.side_effect = slow_once

        fetched = await _fetcher(mock_client, fake_sleep, timeout=0.01).fetch_all()

        assert len(fetched) == 4
        assert calls == 2
        assert fake_sleep.delays == [2.0]


class TestPartialFailures:
    async def test_failed_set_is_skipped_and_logged(
        self, mock_client: AsyncMock, sample_sets: dict, fake_sleep, caplog
    ) -> None:
        """If set 2 of 3 fails, sets 1 and 3 are still returned."""

        def get_set(set_id: str) -> dict | None:
            if set_id == "A1a":
                raise TransientFetchError("HTTP 502")
            return sample_sets.get(set_id)

        mock_client.get_set.side_effect = get_set

        with caplog.at_level(logging.ERROR, logger="pocketdeck.catalog.fetcher"):
            fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert [card.raw["id"] for card in fetched] == ["A1-001", "A1-002", "A2-001"]
        assert "Failed to fetch set A1a" in caplog.text
        # The failing set was retried before being skipped
        assert fake_sleep.delays == [2.0, 4.0]

    async def test_unexpected_set_error_is_skipped(
        self, mock_client: AsyncMock, sample_sets: dict, fake_sleep
    ) -> None:
        def get_set(set_id: str) -> dict | None:
            if set_id == "A1":
                raise KeyError("cards")
            return sample_sets.get(set_id)

        mock_client.get_set.side_effect = get_set

        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert {card.group.id for card in fetched} == {"A1a", "A2"}

    async def test_missing_set_is_skipped(
        self, mock_client: AsyncMock, sample_sets: dict, fake_sleep
    ) -> None:
        del sample_sets["A2"]

        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert {card.group.id for card in fetched} == {"A1", "A1a"}

    async def test_failed_card_detail_is_dropped(
        self, mock_client: AsyncMock, sample_card_details: dict, fake_sleep, caplog
    ) -> None:
        def get_card(card_id: str) -> dict | None:
            if card_id == "A1-002":
                raise TransientFetchError("connection reset")
            return sample_card_details.get(card_id)

        mock_client.get_card.side_effect = get_card

        with caplog.at_level(logging.WARNING, logger="pocketdeck.catalog.fetcher"):
            fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert [card.raw["id"] for card in fetched] == ["A1-001", "A1a-001", "A2-001"]
        assert "Failed to fetch card A1-002" in caplog.text

    async def test_missing_card_detail_is_dropped(
        self, mock_client: AsyncMock, sample_card_details: dict, fake_sleep
    ) -> None:
        del sample_card_details["A1a-001"]

        fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert "A1a-001" not in [card.raw["id"] for card in fetched]


class TestDetailBatching:
    async def test_detail_requests_bounded_by_batch_size(
        self, mock_client: AsyncMock, sample_sets: dict, fake_sleep
    ) -> None:
        sample_sets["A1"]["cards"] = [
            {"id": f"A1-{n:03d}", "localId": f"{n:03d}", "name": f"Card {n}"} for n in range(1, 26)
        ]
        mock_client.get_serie.return_value = {"sets": [{"id": "A1"}]}

        in_flight = 0
        peak = 0

        async def get_card(card_id: str) -> dict:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return {"id": card_id, "name": "Card", "category": "Pokemon"}

        mock_client.get_card.side_effect = get_card

        fetched = await _fetcher(mock_client, fake_sleep, batch_size=10).fetch_all()

        assert len(fetched) == 25
        assert peak == 10

    def test_rejects_zero_batch_size(self, mock_client: AsyncMock) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            CatalogFetcher(mock_client, batch_size=0)

    async def test_unexpected_card_error_only_drops_that_card(
        self, mock_client: AsyncMock, sample_card_details: dict, fake_sleep, caplog
    ) -> None:
        """One card blowing up mid-batch leaves the rest of its set intact."""

        def get_card(card_id: str) -> dict | None:
            if card_id == "A1-001":
                raise RuntimeError("decoder exploded")
            return sample_card_details.get(card_id)

        mock_client.get_card.side_effect = get_card

        with caplog.at_level(logging.ERROR, logger="pocketdeck.catalog.fetcher"):
            fetched = await _fetcher(mock_client, fake_sleep).fetch_all()

        assert [card.raw["id"] for card in fetched] == ["A1-002", "A1a-001", "A2-001"]
        assert "Unexpected error fetching card A1-001" in caplog.text
        assert mock_client.get_card.await_count == 4
