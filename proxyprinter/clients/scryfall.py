"""
Scryfall card database client.

Looks up cards by exact name and downloads their images.

API docs: https://scryfall.com/docs/api
"""

from typing import Any

import httpx

from proxyprinter.config import settings

FRONT_FACE = "front"
BACK_FACE = "back"


def face_label(index: int) -> str:
    """Label for the nth face of a card: front, back, face 3, face 4..."""
    if index == 0:
        return FRONT_FACE
    if index == 1:
        return BACK_FACE
    return f"face {index + 1}"


def build_search_query(card_name: str, language_code: str | None = None) -> str:
    """
    Build a Scryfall search query for an exact card name.

    Example:
        build_search_query("Lightning Bolt", "de") -> '!"Lightning Bolt" lang:de'
    """
    query = '!"{}"'.format(card_name.replace('"', ""))
    if language_code:
        query += f" lang:{language_code}"
    return query


def extract_face_images(card: dict[str, Any], version: str) -> dict[str, str]:
    """
    Map face labels to image URLs for a Scryfall card object.

    Single-image cards (including split and adventure cards) carry a
    top-level image_uris and produce only "front". Double-faced cards carry
    image_uris per entry in card_faces.

    Args:
        card: Scryfall card object
        version: image_uris key to use (png, large, normal...)

    Returns:
        Face label -> URL, in face order. Empty if the card has no images.
    """
    image_uris = card.get("image_uris")
    if image_uris and image_uris.get(version):
        return {FRONT_FACE: image_uris[version]}

    images: dict[str, str] = {}
    for index, face in enumerate(card.get("card_faces") or []):
        url = (face.get("image_uris") or {}).get(version)
        if url:
            images[face_label(index)] = url

    return images


def extract_token_parts(card: dict[str, Any]) -> list[tuple[str, str]]:
    """
    List tokens a card creates.

    Returns:
        (token name, Scryfall API uri) pairs from all_parts with
        component == "token", duplicates removed, in card order
    """
    tokens: list[tuple[str, str]] = []
    seen: set[str] = set()

    for part in card.get("all_parts") or []:
        if part.get("component") != "token":
            continue
        name, uri = part.get("name"), part.get("uri")
        if not name or not uri or uri in seen:
            continue
        seen.add(uri)
        tokens.append((name, uri))

    return tokens


class ScryfallClient:
    """
    Client for the Scryfall card database.

    Card lookups raise httpx errors for transport failures and return None
    when Scryfall reports no match, so callers can tell a miss from an outage.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None) -> None:
        """
        Initialize the Scryfall client.

        Args:
            http: Async HTTP client owned by the caller
            base_url: API base URL. Defaults to settings.scryfall_api_url.
        """
        self.http = http
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")

    async def search_card(
        self,
        card_name: str,
        language_code: str | None = None,
    ) -> dict[str, Any] | None:
        """
        Find a card by exact name.

        Args:
            card_name: Exact card name
            language_code: Optional Scryfall language code (en, de, ja...)

        Returns:
            First matching Scryfall card object, or None if not found

        Raises:
            httpx.HTTPError: If the request fails for any reason other than
                "no cards found"
        """
        response = await self.http.get(
            f"{self.base_url}/cards/search",
            params={"q": build_search_query(card_name, language_code)},
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()

        results = response.json().get("data") or []
        return results[0] if results else None

    async def get_card(self, uri: str) -> dict[str, Any]:
        """
        Fetch a card object by its API uri (as found in all_parts).

        Raises:
            httpx.HTTPError: If the request fails
        """
        response = await self.http.get(uri)
        response.raise_for_status()

        data: dict[str, Any] = response.json()
        return data

    async def get_image(self, url: str) -> bytes:
        """
        Download raw image bytes.

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status
        """
        response = await self.http.get(url)
        response.raise_for_status()
        return response.content
