"""Tests for the Archidekt client."""

import httpx
import pytest
import respx

from proxyprinter.clients.archidekt import ArchidektClient, parse_card_list, parse_deck_name


class TestParseCardList:
    def test_sums_repeated_names(self, archidekt_payload: dict) -> None:
        """Different printings of one card are summed."""
        cards = parse_card_list(archidekt_payload)

        assert cards["Lightning Bolt"] == 5

    def test_excludes_categories(self, archidekt_payload: dict) -> None:
        """Cards in excluded categories are left out."""
        cards = parse_card_list(archidekt_payload, {"Maybeboard", "Sideboard"})

        assert cards == {"Lightning Bolt": 5, "Counterspell": 2}

    def test_keeps_payload_order(self, archidekt_payload: dict) -> None:
        """Names appear in first-seen order."""
        cards = parse_card_list(archidekt_payload)

        assert list(cards) == ["Lightning Bolt", "Counterspell", "Brainstorm", "Pyroblast"]

    def test_skips_malformed_entries(self) -> None:
        """Entries without a name or with a bad quantity are skipped."""
        payload = {
            "cards": [
                {"quantity": 1, "card": {}},
                {"quantity": 0, "card": {"oracleCard": {"name": "Island"}}},
                {"quantity": "2", "card": {"oracleCard": {"name": "Forest"}}},
                {"card": {"oracleCard": {"name": "Swamp"}}},
            ]
        }

        assert parse_card_list(payload) == {"Swamp": 1}

    def test_missing_card_list_raises(self) -> None:
        """A payload without cards is rejected."""
        with pytest.raises(ValueError, match="no card list"):
            parse_card_list({"name": "Broken"})


class TestParseDeckName:
    def test_reads_name(self, archidekt_payload: dict) -> None:
        """Deck name comes from the payload."""
        assert parse_deck_name(archidekt_payload) == "Izzet Tempo"

    def test_missing_name(self) -> None:
        """Missing names become an empty string."""
        assert parse_deck_name({}) == ""


class TestArchidektClient:
    @respx.mock
    async def test_get_deck(self, archidekt_payload: dict) -> None:
        """Fetches the deck endpoint with a trailing slash."""
        route = respx.get("https://archidekt.com/api/decks/12345/").mock(
            return_value=httpx.Response(200, json=archidekt_payload)
        )

        async with httpx.AsyncClient() as http:
            client = ArchidektClient(http)
            name = await client.get_deck_name(12345)
            cards = await client.get_card_list(12345, {"Maybeboard"})

        assert name == "Izzet Tempo"
        assert "Brainstorm" not in cards
        assert route.call_count == 2

    @respx.mock
    async def test_raises_on_missing_deck(self) -> None:
        """HTTP errors propagate as httpx errors."""
        respx.get("https://archidekt.com/api/decks/1/").mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as http:
            with pytest.raises(httpx.HTTPStatusError):
                await ArchidektClient(http).get_deck(1)

    @respx.mock
    async def test_custom_base_url(self) -> None:
        """Base URL can be overridden."""
        respx.get("http://localhost:9000/api/decks/7/").mock(
            return_value=httpx.Response(200, json={"name": "x", "cards": []})
        )

        async with httpx.AsyncClient() as http:
            client = ArchidektClient(http, base_url="http://localhost:9000/api/")
            assert await client.get_card_list(7) == {}
