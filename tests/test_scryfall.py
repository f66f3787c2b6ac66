"""Tests for the Scryfall client."""

import httpx
import pytest
import respx
from conftest import SCRYFALL, scryfall_card, search_result

from proxyprinter.clients.scryfall import (
    ScryfallClient,
    build_search_query,
    extract_face_images,
    extract_token_parts,
    face_label,
)


class TestBuildSearchQuery:
    def test_exact_name(self) -> None:
        """Names are searched exactly."""
        assert build_search_query("Lightning Bolt") == '!"Lightning Bolt"'

    def test_language(self) -> None:
        """A language code narrows the search."""
        assert build_search_query("Lightning Bolt", "de") == '!"Lightning Bolt" lang:de'

    def test_strips_quotes(self) -> None:
        """Quotes in names can't break the query."""
        assert build_search_query('Kongming, "Sleeping Dragon"') == '!"Kongming, Sleeping Dragon"'


class TestFaceLabel:
    def test_labels(self) -> None:
        """Faces are labelled front, back, then numbered."""
        assert [face_label(i) for i in range(4)] == ["front", "back", "face 3", "face 4"]


class TestExtractFaceImages:
    def test_single_faced(self) -> None:
        """Top-level image_uris produce a front face only."""
        card = scryfall_card("Lightning Bolt")

        assert extract_face_images(card, "png") == {
            "front": "https://cards.scryfall.io/png/lightning-bolt.png"
        }

    def test_double_faced(self) -> None:
        """card_faces produce front and back."""
        card = {
            "name": "Delver of Secrets // Insectile Aberration",
            "card_faces": [
                {"image_uris": {"png": "https://img/front.png"}},
                {"image_uris": {"png": "https://img/back.png"}},
            ],
        }

        assert extract_face_images(card, "png") == {
            "front": "https://img/front.png",
            "back": "https://img/back.png",
        }

    def test_missing_version(self) -> None:
        """No images of the requested version yields an empty map."""
        card = scryfall_card("Lightning Bolt")

        assert extract_face_images(card, "art_crop") == {}


class TestExtractTokenParts:
    def test_lists_tokens_once(self) -> None:
        """Only token parts are returned, deduplicated by uri."""
        card = scryfall_card(
            "Young Pyromancer",
            all_parts=[
                {"component": "combo_piece", "name": "Young Pyromancer", "uri": "u0"},
                {"component": "token", "name": "Elemental", "uri": "u1"},
                {"component": "token", "name": "Elemental", "uri": "u1"},
            ],
        )

        assert extract_token_parts(card) == [("Elemental", "u1")]

    def test_no_parts(self) -> None:
        """Cards without all_parts have no tokens."""
        assert extract_token_parts(scryfall_card("Island")) == []


class TestScryfallClient:
    @respx.mock
    async def test_search_returns_first_card(self) -> None:
        """The first search hit is returned."""
        route = respx.get(f"{SCRYFALL}/cards/search").mock(
            return_value=httpx.Response(
                200, json=search_result(scryfall_card("Lightning Bolt"), scryfall_card("Other"))
            )
        )

        async with httpx.AsyncClient() as http:
            card = await ScryfallClient(http).search_card("Lightning Bolt", "en")

        assert card is not None
        assert card["name"] == "Lightning Bolt"
        assert route.calls.last.request.url.params["q"] == '!"Lightning Bolt" lang:en'

    @respx.mock
    async def test_search_not_found(self) -> None:
        """A 404 from search means no match."""
        respx.get(f"{SCRYFALL}/cards/search").mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as http:
            assert await ScryfallClient(http).search_card("Nope") is None

    @respx.mock
    async def test_search_server_error_raises(self) -> None:
        """Other failures raise."""
        respx.get(f"{SCRYFALL}/cards/search").mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as http:
            with pytest.raises(httpx.HTTPStatusError):
                await ScryfallClient(http).search_card("Lightning Bolt")

    @respx.mock
    async def test_get_image(self, png_bytes: bytes) -> None:
        """Image downloads return raw bytes."""
        respx.get("https://cards.scryfall.io/png/a.png").mock(
            return_value=httpx.Response(200, content=png_bytes)
        )

        async with httpx.AsyncClient() as http:
            data = await ScryfallClient(http).get_image("https://cards.scryfall.io/png/a.png")

        assert data == png_bytes

    @respx.mock
    async def test_get_card(self) -> None:
        """Cards can be fetched by API uri."""
        respx.get(f"{SCRYFALL}/cards/abc").mock(
            return_value=httpx.Response(200, json=scryfall_card("Elemental"))
        )

        async with httpx.AsyncClient() as http:
            card = await ScryfallClient(http).get_card(f"{SCRYFALL}/cards/abc")

        assert card["name"] == "Elemental"
