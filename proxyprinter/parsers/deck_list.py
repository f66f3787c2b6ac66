"""
Parser for plain text deck lists.

Format:
    <quantity> <card name>

Example:
    4 Lightning Bolt
    2 Lightning Bolt
    1 Counterspell

Lines that don't fit the format (section headers, comments) are skipped.
Repeated card names are merged by summing their quantities.
"""

import logging
import re
from pathlib import Path

from proxyprinter.errors import SourceFetchError
from proxyprinter.models.deck import Deck

logger = logging.getLogger(__name__)

# Pattern: "4 Lightning Bolt"
# Groups: (quantity, card_name)
DECK_LINE_PATTERN = re.compile(r"^\s*(\d+)\s+(.+?)\s*$")


def parse_deck_text(text: str, name: str = "") -> Deck:
    """
    Parse deck list text into a Deck.

    Args:
        text: Raw deck list, one entry per line
        name: Deck name to attach

    Returns:
        Deck with merged entries in first-seen order. Empty deck if the
        text holds no valid lines.
    """
    deck = Deck(name=name)

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        match = DECK_LINE_PATTERN.match(line)
        if not match:
            logger.warning("Skipping unparseable line %d: %r", line_number, line)
            continue

        quantity, card_name = match.groups()
        if int(quantity) < 1:
            logger.warning("Skipping line %d with zero quantity: %r", line_number, line)
            continue

        deck.add_card(card_name, int(quantity))

    return deck


def parse_deck_list(path: str | Path) -> Deck:
    """
    Read and parse a deck list file.

    Args:
        path: Path to a UTF-8 text deck list

    Returns:
        Deck named after the file stem

    Raises:
        SourceFetchError: If the file is missing or unreadable
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFetchError(f"Could not read deck list {path}: {e}") from e

    deck = parse_deck_text(text, name=path.stem)
    logger.info("Parsed %d unique cards from %s", len(deck), path)
    return deck
