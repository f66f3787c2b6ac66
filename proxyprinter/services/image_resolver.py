"""
Card image resolver.

Looks up every unique card of a deck on Scryfall and attaches the image URL
of each face. A card that can't be found or looked up keeps an empty image
map and the rest of the deck carries on.
"""

import asyncio
import logging
from typing import Any

import httpx

from proxyprinter.clients.scryfall import ScryfallClient, extract_face_images, extract_token_parts
from proxyprinter.config import settings
from proxyprinter.models.deck import Deck
from proxyprinter.services.progress import StageReporter, percent_of

logger = logging.getLogger(__name__)


class CardImageResolver:
    """
    Resolves card names to face image URLs.

    One instance serves one pipeline run: looked-up cards and tokens are
    remembered for the lifetime of the instance only.
    """

    def __init__(
        self,
        client: ScryfallClient,
        *,
        language_code: str | None = None,
        include_tokens: bool = False,
        image_version: str | None = None,
        request_delay: float | None = None,
    ) -> None:
        """
        Args:
            client: Scryfall client
            language_code: Preferred print language, None for Scryfall's default
            include_tokens: Also attach images of tokens each card creates
            image_version: image_uris key. Defaults to settings.image_version.
            request_delay: Pause between Scryfall requests in seconds.
                Defaults to settings.scryfall_request_delay.
        """
        self.client = client
        self.language_code = language_code
        self.include_tokens = include_tokens
        self.image_version = image_version or settings.image_version
        self.request_delay = (
            settings.scryfall_request_delay if request_delay is None else request_delay
        )
        self._faces_by_name: dict[str, dict[str, str]] = {}
        self._token_labels_by_name: dict[str, set[str]] = {}
        self._tokens_by_uri: dict[str, str | None] = {}
        self._requests_made = 0

    async def resolve(self, deck: Deck, on_progress: StageReporter | None = None) -> Deck:
        """
        Attach image URLs to every card of the deck, in place.

        Args:
            deck: Deck with unresolved image maps
            on_progress: Receives percent after each card, plus a message
                for every card that could not be resolved

        Returns:
            The same deck
        """
        names = list(dict.fromkeys(entry.name for entry in deck))
        total = len(names)

        if on_progress:
            on_progress(0.0)

        for done, name in enumerate(names, start=1):
            error_message = None
            if name not in self._faces_by_name:
                card, error_message = await self._lookup(name)
                images: dict[str, str] = {}
                token_labels: set[str] = set()
                if card is not None:
                    try:
                        images, token_labels = await self._collect_images(card)
                    except (AttributeError, TypeError) as e:
                        logger.error("Unexpected card data for %r: %s", name, e)
                        error_message = f"Failed to look up card '{name}'"
                self._faces_by_name[name] = images
                self._token_labels_by_name[name] = token_labels

            entry = deck.cards[name]
            for label, url in self._faces_by_name[name].items():
                entry.images_by_face_label[label] = url
            entry.token_labels.update(self._token_labels_by_name[name])

            if on_progress:
                on_progress(percent_of(done, total), error_message)

        return deck

    async def _lookup(self, name: str) -> tuple[dict[str, Any] | None, str | None]:
        """Search one card. Returns (card, error message)."""
        await self._throttle()

        try:
            card = await self.client.search_card(name, self.language_code)
        except httpx.HTTPError as e:
            logger.error("Search request failed for card %r: %s", name, e)
            return None, f"Failed to look up card '{name}'"
        except (ValueError, AttributeError, TypeError, IndexError) as e:
            logger.error("Unexpected search response for card %r: %s", name, e)
            return None, f"Failed to look up card '{name}'"

        if card is None:
            logger.warning("Card %r not found", name)
            return None, f"Card '{name}' not found"

        return card, None

    async def _collect_images(self, card: dict[str, Any]) -> tuple[dict[str, str], set[str]]:
        """Face images of a card plus, when enabled, its tokens. Returns (images, token labels)."""
        images = extract_face_images(card, self.image_version)
        if not images:
            logger.warning("Card %r has no %s images", card.get("name"), self.image_version)

        token_labels: set[str] = set()
        if not self.include_tokens:
            return images, token_labels

        for token_name, uri in extract_token_parts(card):
            if token_name in images:
                continue
            url = await self._token_image(token_name, uri)
            if url:
                images[token_name] = url
                token_labels.add(token_name)

        return images, token_labels

    async def _token_image(self, token_name: str, uri: str) -> str | None:
        if uri in self._tokens_by_uri:
            return self._tokens_by_uri[uri]

        await self._throttle()
        url = None
        try:
            token = await self.client.get_card(uri)
            faces = extract_face_images(token, self.image_version)
            url = next(iter(faces.values()), None)
        except httpx.HTTPError as e:
            logger.error("Failed to fetch token %r: %s", token_name, e)
        except (ValueError, AttributeError, TypeError) as e:
            logger.error("Unexpected data for token %r: %s", token_name, e)

        self._tokens_by_uri[uri] = url
        return url

    async def _throttle(self) -> None:
        if self._requests_made and self.request_delay > 0:
            await asyncio.sleep(self.request_delay)
        self._requests_made += 1
