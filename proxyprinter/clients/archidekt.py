"""
Archidekt deck API client.

Deck endpoint: GET https://archidekt.com/api/decks/<id>/

Relevant payload shape:
    {
        "name": "My Deck",
        "cards": [
            {
                "quantity": 4,
                "categories": ["Removal"],
                "card": {"oracleCard": {"name": "Lightning Bolt"}}
            },
            ...
        ]
    }
"""

from collections.abc import Iterable
from typing import Any

import httpx

from proxyprinter.config import settings


def parse_deck_name(payload: dict[str, Any]) -> str:
    """Extract the deck name from a deck payload ("" if absent)."""
    name = payload.get("name")
    return str(name).strip() if name else ""


def parse_card_list(
    payload: dict[str, Any],
    excluded_categories: Iterable[str] = (),
) -> dict[str, int]:
    """
    Extract card name -> quantity from a deck payload.

    Args:
        payload: Raw deck JSON
        excluded_categories: Cards in any of these categories are left out
            (e.g. Maybeboard)

    Returns:
        Dict of card name to total quantity, in payload order. Repeated names
        (different printings) are summed.

    Raises:
        ValueError: If the payload has no card list
    """
    entries = payload.get("cards")
    if not isinstance(entries, list):
        raise ValueError("Deck payload has no card list")

    excluded = set(excluded_categories)
    cards: dict[str, int] = {}

    for entry in entries:
        categories = entry.get("categories") or []
        if excluded.intersection(categories):
            continue

        card = entry.get("card") or {}
        name = (card.get("oracleCard") or {}).get("name")
        quantity = entry.get("quantity", 1)
        if not name or not isinstance(quantity, int) or quantity < 1:
            continue

        cards[name] = cards.get(name, 0) + quantity

    return cards


class ArchidektClient:
    """
    Client for the Archidekt deck API.

    Uses the supplied httpx client so a pipeline run can share one
    connection pool across all of its requests.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None) -> None:
        """
        Initialize the Archidekt client.

        Args:
            http: Async HTTP client owned by the caller
            base_url: API base URL. Defaults to settings.archidekt_api_url.
        """
        self.http = http
        self.base_url = (base_url or settings.archidekt_api_url).rstrip("/")

    async def get_deck(self, deck_id: int) -> dict[str, Any]:
        """
        Fetch the raw deck payload.

        Raises:
            httpx.HTTPError: If the request fails or the deck doesn't exist
        """
        response = await self.http.get(f"{self.base_url}/decks/{deck_id}/")
        response.raise_for_status()

        data: dict[str, Any] = response.json()
        return data

    async def get_card_list(
        self,
        deck_id: int,
        excluded_categories: Iterable[str] = (),
    ) -> dict[str, int]:
        """Fetch a deck and return its card name -> quantity mapping."""
        return parse_card_list(await self.get_deck(deck_id), excluded_categories)

    async def get_deck_name(self, deck_id: int) -> str:
        """Fetch a deck and return its name."""
        return parse_deck_name(await self.get_deck(deck_id))
