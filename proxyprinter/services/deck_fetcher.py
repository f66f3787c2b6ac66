"""
Remote deck fetcher.

Turns an Archidekt deck id into a normalized Deck. Any failure here is fatal
for the request: without a card list there is nothing to print.
"""

import logging
from collections.abc import Iterable

import httpx

from proxyprinter.clients.archidekt import ArchidektClient, parse_card_list, parse_deck_name
from proxyprinter.config import settings
from proxyprinter.errors import SourceFetchError
from proxyprinter.models.deck import Deck

logger = logging.getLogger(__name__)


class RemoteDeckFetcher:
    """Fetches decks from Archidekt."""

    def __init__(
        self,
        client: ArchidektClient,
        excluded_categories: Iterable[str] | None = None,
    ) -> None:
        self.client = client
        self.excluded_categories = set(
            settings.excluded_categories if excluded_categories is None else excluded_categories
        )

    async def fetch(self, deck_id: int) -> Deck:
        """
        Fetch a deck by id.

        A single request supplies both the deck name and the card list.
        No retry is attempted.

        Raises:
            SourceFetchError: On network failure, missing deck or malformed payload
        """
        logger.info("Fetching deck %d from Archidekt", deck_id)

        try:
            payload = await self.client.get_deck(deck_id)
            card_list = parse_card_list(payload, self.excluded_categories)
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(
                f"Failed to fetch deck {deck_id}: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Failed to fetch deck {deck_id}: {e}") from e
        except (ValueError, AttributeError, TypeError) as e:
            raise SourceFetchError(f"Unexpected payload for deck {deck_id}: {e}") from e

        deck = Deck(name=parse_deck_name(payload))
        for name, quantity in card_list.items():
            deck.add_card(name, quantity)

        logger.info("Fetched deck %r with %d unique cards", deck.name, len(deck))
        return deck
