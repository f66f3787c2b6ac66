from proxyprinter.clients.archidekt import ArchidektClient, parse_card_list, parse_deck_name
from proxyprinter.clients.scryfall import (
    ScryfallClient,
    build_search_query,
    extract_face_images,
    extract_token_parts,
)

__all__ = [
    "ArchidektClient",
    "ScryfallClient",
    "build_search_query",
    "extract_face_images",
    "extract_token_parts",
    "parse_card_list",
    "parse_deck_name",
]
