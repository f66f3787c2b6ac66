from proxyprinter.parsers.deck_list import parse_deck_list, parse_deck_text
from proxyprinter.parsers.deck_url import (
    DECK_URL_PATTERNS,
    DeckUrlPattern,
    extract_deck_id,
    try_extract_deck_id,
)

__all__ = [
    "DECK_URL_PATTERNS",
    "DeckUrlPattern",
    "extract_deck_id",
    "parse_deck_list",
    "parse_deck_text",
    "try_extract_deck_id",
]
