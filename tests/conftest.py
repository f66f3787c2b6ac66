import base64

import pytest

# 1x1 transparent PNG
PNG_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

SCRYFALL = "https://api.scryfall.com"
ARCHIDEKT = "https://archidekt.com/api"


def scryfall_card(name: str, png: str | None = None, **extra) -> dict:
    """Minimal single-faced Scryfall card object."""
    slug = name.lower().replace(" ", "-")
    card = {
        "object": "card",
        "name": name,
        "image_uris": {
            "normal": f"https://cards.scryfall.io/normal/{slug}.jpg",
            "png": png or f"https://cards.scryfall.io/png/{slug}.png",
        },
    }
    card.update(extra)
    return card


def search_result(*cards: dict) -> dict:
    """Scryfall list object wrapping cards."""
    return {"object": "list", "total_cards": len(cards), "has_more": False, "data": list(cards)}


@pytest.fixture
def png_bytes() -> bytes:
    """A decodable PNG image."""
    return PNG_PIXEL


@pytest.fixture
def sample_deck_text() -> str:
    """Plain text deck list with a repeated card."""
    return "4 Lightning Bolt\n2 Lightning Bolt\n1 Counterspell"


@pytest.fixture
def archidekt_payload() -> dict:
    """Archidekt deck payload with main deck, maybeboard and sideboard cards."""
    return {
        "id": 12345,
        "name": "Izzet Tempo",
        "cards": [
            {
                "quantity": 4,
                "categories": ["Removal"],
                "card": {"oracleCard": {"name": "Lightning Bolt"}},
            },
            {
                "quantity": 2,
                "categories": ["Counters"],
                "card": {"oracleCard": {"name": "Counterspell"}},
            },
            {
                "quantity": 1,
                "categories": ["Maybeboard"],
                "card": {"oracleCard": {"name": "Brainstorm"}},
            },
            {
                "quantity": 3,
                "categories": ["Sideboard"],
                "card": {"oracleCard": {"name": "Pyroblast"}},
            },
            {
                "quantity": 1,
                "categories": ["Removal"],
                "card": {"oracleCard": {"name": "Lightning Bolt"}},
            },
        ],
    }
