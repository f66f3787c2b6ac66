"""
Deck identifier extraction from Archidekt URLs.

Accepted shapes:
    https://archidekt.com/api/decks/<id>/...
    https://archidekt.com/decks/<id>/...

Each shape is a named matcher. Matchers are tried in order and the first one
yielding a positive integer wins.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DeckUrlPattern:
    """A named URL shape carrying a deck id in its `deck_id` group."""

    name: str
    regex: re.Pattern[str]

    def match(self, url: str) -> int | None:
        """Return the deck id if the URL has this shape, else None."""
        found = self.regex.match(url)
        if not found:
            return None
        try:
            deck_id = int(found.group("deck_id"))
        except (IndexError, ValueError):
            return None
        return deck_id if deck_id > 0 else None


API_DECK_URL = DeckUrlPattern(
    name="api",
    regex=re.compile(r"^https://archidekt\.com/api/decks/(?P<deck_id>\d+)/"),
)

WEB_DECK_URL = DeckUrlPattern(
    name="web",
    regex=re.compile(r"^https://archidekt\.com/decks/(?P<deck_id>\d+)/"),
)

DECK_URL_PATTERNS: tuple[DeckUrlPattern, ...] = (API_DECK_URL, WEB_DECK_URL)


def try_extract_deck_id(url: object) -> int | None:
    """
    Extract a deck id from a deck URL.

    Args:
        url: Free-form URL string. Anything else yields None.

    Returns:
        Positive deck id, or None if the URL matches no known shape
    """
    if not isinstance(url, str) or not url:
        return None

    url = url.strip()
    for pattern in DECK_URL_PATTERNS:
        deck_id = pattern.match(url)
        if deck_id is not None:
            return deck_id

    return None


def extract_deck_id(url: object) -> tuple[bool, int | None]:
    """
    Extract a deck id, reporting success as a flag.

    Returns:
        (True, deck_id) on success, (False, None) otherwise. Never raises.
    """
    deck_id = try_extract_deck_id(url)
    return deck_id is not None, deck_id
