"""
Image fetcher.

Downloads every distinct image URL referenced by a resolved deck, a bounded
number at a time. Each URL is downloaded once no matter how many cards or
faces point at it; a failed download is logged and leaves a gap in the cache
without stopping the others.

Progress counts (card, face) references rather than distinct URLs: finishing
a URL shared by three faces advances progress by three references.
"""

import asyncio
import logging
from collections.abc import Iterator
from typing import Protocol

import httpx

from proxyprinter.config import settings
from proxyprinter.models.deck import Deck
from proxyprinter.services.progress import StageReporter, percent_of

logger = logging.getLogger(__name__)


class ImageTransport(Protocol):
    """Anything that can download image bytes (ScryfallClient in production)."""

    async def get_image(self, url: str) -> bytes: ...


class ImageCache:
    """
    Image URL -> downloaded bytes for a single pipeline run.

    A URL that was attempted but failed is remembered as failed, so it is
    neither retried nor reported as present.
    """

    def __init__(self) -> None:
        self._images: dict[str, bytes] = {}
        self._failed: set[str] = set()

    def store(self, url: str, data: bytes) -> None:
        self._images[url] = data
        self._failed.discard(url)

    def mark_failed(self, url: str) -> None:
        self._failed.add(url)

    def get(self, url: str) -> bytes | None:
        """Bytes for a URL, or None if it failed or was never fetched."""
        return self._images.get(url)

    def attempted(self, url: str) -> bool:
        """True if the URL was already downloaded or failed."""
        return url in self._images or url in self._failed

    @property
    def failed(self) -> frozenset[str]:
        return frozenset(self._failed)

    def __contains__(self, url: object) -> bool:
        return url in self._images

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[str]:
        return iter(self._images)


def count_image_references(deck: Deck) -> dict[str, int]:
    """
    Count references per distinct image URL.

    Returns:
        URL -> number of (card, face) pairs using it, ordered by first use
        in deck order then face order
    """
    references: dict[str, int] = {}
    for entry in deck:
        for url in entry.images_by_face_label.values():
            references[url] = references.get(url, 0) + 1
    return references


class ImageFetcher:
    """Concurrent, deduplicating image downloader."""

    def __init__(self, transport: ImageTransport, max_concurrency: int | None = None) -> None:
        """
        Args:
            transport: Image downloader
            max_concurrency: Parallel downloads. Defaults to
                settings.max_concurrent_downloads.
        """
        self.transport = transport
        self.max_concurrency = max(1, max_concurrency or settings.max_concurrent_downloads)

    async def fetch_all(
        self,
        deck: Deck,
        on_progress: StageReporter | None = None,
        cache: ImageCache | None = None,
    ) -> ImageCache:
        """
        Download all images referenced by a deck.

        Args:
            deck: Deck with resolved image URLs
            on_progress: Receives percent after every attempted URL, plus an
                error message when that URL failed
            cache: Existing cache of this run to extend. URLs it already
                holds (or already failed) are not requested again.

        Returns:
            Cache holding bytes for every URL that downloaded successfully

        Raises:
            asyncio.CancelledError: If the run is cancelled. Downloads still
                in flight are cancelled with it.
        """
        cache = cache if cache is not None else ImageCache()
        references = count_image_references(deck)
        total = sum(references.values())

        if total == 0:
            return cache

        lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self.max_concurrency)
        completed = 0

        async def fetch_one(url: str, weight: int) -> None:
            nonlocal completed
            data: bytes | None = None
            error_message: str | None = None

            if not cache.attempted(url):
                async with semaphore:
                    try:
                        data = await self.transport.get_image(url)
                    except httpx.HTTPError as e:
                        logger.error("Error downloading image from %s: %s", url, e)
                        error_message = f"Failed to download image {url}"

            async with lock:
                if data is not None:
                    cache.store(url, data)
                elif error_message is not None:
                    cache.mark_failed(url)
                completed += weight
                if on_progress:
                    on_progress(percent_of(completed, total), error_message)

        await asyncio.gather(*(fetch_one(url, weight) for url, weight in references.items()))

        logger.info(
            "Fetched %d of %d distinct images (%d failed)",
            len(cache),
            len(references),
            len(cache.failed),
        )
        return cache
