"""
Deck API endpoints.

Extracts deck ids from URLs and resolves decks to card image URLs.
"""

from collections.abc import AsyncIterator
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from proxyprinter.clients.archidekt import ArchidektClient
from proxyprinter.clients.scryfall import ScryfallClient
from proxyprinter.config import settings
from proxyprinter.errors import SourceFetchError
from proxyprinter.models.deck import Deck
from proxyprinter.parsers.deck_list import parse_deck_text
from proxyprinter.parsers.deck_url import try_extract_deck_id
from proxyprinter.services.deck_fetcher import RemoteDeckFetcher
from proxyprinter.services.image_resolver import CardImageResolver

router = APIRouter(prefix="/decks", tags=["decks"])


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Provide an HTTP client scoped to one request."""
    async with httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        yield client


class ExtractIdRequest(BaseModel):
    """Request model for deck id extraction."""

    url: str = Field(
        ...,
        description="Archidekt deck URL",
        examples=["https://archidekt.com/decks/12345/my-deck"],
    )


class ExtractIdResponse(BaseModel):
    """Response model for deck id extraction."""

    deck_id: int


class ResolveDeckRequest(BaseModel):
    """Request model for resolving a deck. Supply deck_id or deck_list."""

    deck_id: int | None = Field(default=None, description="Archidekt deck id")
    deck_list: str | None = Field(
        default=None,
        description="Plain text deck list, one '<qty> <card name>' per line",
        examples=["4 Lightning Bolt\n1 Counterspell"],
    )
    name: str = Field(default="", description="Deck name for a plain text deck list")
    language_code: str | None = Field(default=None, description="Scryfall language code")
    include_tokens: bool = False


class CardResponse(BaseModel):
    """A resolved card."""

    name: str
    quantity: int
    images: dict[str, str] = Field(default_factory=dict)
    tokens: list[str] = Field(default_factory=list)


class ResolvedDeckResponse(BaseModel):
    """Response model for a resolved deck."""

    name: str
    cards: list[CardResponse]
    total_cards: int
    unresolved: list[str] = Field(
        default_factory=list,
        description="Cards for which no image could be found",
    )
    warnings: list[str] = Field(default_factory=list)


def deck_to_response(deck: Deck, warnings: list[str]) -> ResolvedDeckResponse:
    """Convert a resolved Deck into its API response."""
    return ResolvedDeckResponse(
        name=deck.name,
        cards=[
            CardResponse(
                name=entry.name,
                quantity=entry.quantity,
                images=dict(entry.images_by_face_label),
                tokens=sorted(entry.token_labels),
            )
            for entry in deck
        ],
        total_cards=deck.total_quantity(),
        unresolved=[entry.name for entry in deck if not entry.images_by_face_label],
        warnings=warnings,
    )


@router.post("/extract-id", response_model=ExtractIdResponse)
async def extract_id(request: ExtractIdRequest) -> ExtractIdResponse:
    """Extract the deck id from an Archidekt URL."""
    deck_id = try_extract_deck_id(request.url)
    if deck_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not a recognised deck URL: {request.url}",
        )
    return ExtractIdResponse(deck_id=deck_id)


@router.post("/resolve", response_model=ResolvedDeckResponse)
async def resolve_deck(
    request: ResolveDeckRequest,
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> ResolvedDeckResponse:
    """
    Resolve a deck to its card image URLs.

    Cards that can't be found are listed in `unresolved` rather than
    failing the request.
    """
    if request.deck_id is not None:
        if request.deck_id <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Deck id has to be greater than 0",
            )
        try:
            deck = await RemoteDeckFetcher(ArchidektClient(http)).fetch(request.deck_id)
        except SourceFetchError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    elif request.deck_list and request.deck_list.strip():
        deck = parse_deck_text(request.deck_list, name=request.name)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either deck_id or deck_list is required",
        )

    warnings: list[str] = []

    def collect(percent: float | None, error_message: str | None = None) -> None:
        if error_message:
            warnings.append(error_message)

    resolver = CardImageResolver(
        ScryfallClient(http),
        language_code=request.language_code,
        include_tokens=request.include_tokens,
    )
    await resolver.resolve(deck, collect)

    return deck_to_response(deck, warnings)
