"""
Deck printing pipeline.

Sequences one request through its stages:

    IDLE -> RESOLVING_DECK -> RESOLVING_IMAGES -> FETCHING_IMAGES
         -> ASSEMBLING_OUTPUT -> DONE

Any fatal error (CallerInputError, SourceFetchError) or cancellation moves the
run to FAILED and is re-raised. Missing cards and failed images are not fatal:
they are reported through progress events and simply produce no output.

Every call creates its own PipelineRun, Deck and ImageCache, so concurrent
requests on one DeckPrinter share nothing but the progress listeners.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import httpx

from proxyprinter.clients.archidekt import ArchidektClient
from proxyprinter.clients.scryfall import FRONT_FACE, ScryfallClient
from proxyprinter.config import settings
from proxyprinter.errors import CallerInputError
from proxyprinter.models.deck import CardEntry, Deck, DeckSource, LocalFilePath, OnlineDeckId
from proxyprinter.models.document import DocumentItem
from proxyprinter.models.progress import ProgressListener, ProgressStage
from proxyprinter.parsers.deck_list import parse_deck_list
from proxyprinter.services.deck_fetcher import RemoteDeckFetcher
from proxyprinter.services.file_manager import FileManager
from proxyprinter.services.image_fetcher import ImageCache, ImageFetcher
from proxyprinter.services.image_resolver import CardImageResolver
from proxyprinter.services.image_writer import ImageDirectoryWriter, read_image_directory
from proxyprinter.services.pdf_assembler import DocumentAssembler, PdfDocumentAssembler
from proxyprinter.services.progress import ProgressBroadcaster, StageReporter

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    RESOLVING_DECK = "resolving_deck"
    RESOLVING_IMAGES = "resolving_images"
    FETCHING_IMAGES = "fetching_images"
    ASSEMBLING_OUTPUT = "assembling_output"
    DONE = "done"
    FAILED = "failed"


STAGE_BY_STATE = {
    PipelineState.IDLE: ProgressStage.RESOLVE_DECK,
    PipelineState.RESOLVING_DECK: ProgressStage.RESOLVE_DECK,
    PipelineState.RESOLVING_IMAGES: ProgressStage.RESOLVE_IMAGES,
    PipelineState.FETCHING_IMAGES: ProgressStage.FETCH_IMAGES,
    PipelineState.ASSEMBLING_OUTPUT: ProgressStage.ASSEMBLE_DOCUMENT,
}


@dataclass
class PrintOptions:
    """
    Per-request printing options.

    Attributes:
        language_code: Preferred print language (Scryfall code), None for default
        token_copies: Copies of each token to print. 0 leaves tokens out.
        print_all_tokens: Print a shared token once per card that creates it
            instead of once per deck
        save_images: Also save the card images next to the document
    """

    language_code: str | None = None
    token_copies: int = 0
    print_all_tokens: bool = False
    save_images: bool = False


@dataclass
class PipelineRun:
    """State and results of one request."""

    source: DeckSource
    state: PipelineState = PipelineState.IDLE
    deck: Deck | None = None
    cache: ImageCache = field(default_factory=ImageCache)
    document_path: str | None = None
    image_paths: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def advance(self, state: PipelineState) -> None:
        logger.info("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state


def item_label(entry: CardEntry, face: str) -> str:
    """Label for a card face: the card name for the front, "<name> (<face>)" otherwise."""
    return entry.name if face == FRONT_FACE else f"{entry.name} ({face})"


def build_document_items(
    deck: Deck,
    cache: ImageCache,
    token_copies: int = 0,
    print_all_tokens: bool = False,
) -> list[DocumentItem]:
    """
    Turn a resolved deck and its images into document items.

    Faces are printed `quantity` times, tokens `token_copies` times. Faces
    whose image is missing from the cache are left out.

    Returns:
        Items in deck order, face order
    """
    items: list[DocumentItem] = []
    printed_tokens: set[str] = set()

    for entry in deck:
        for face, url in entry.images_by_face_label.items():
            image = cache.get(url)
            if image is None:
                continue

            if face in entry.token_labels:
                if token_copies < 1:
                    continue
                if not print_all_tokens and face in printed_tokens:
                    continue
                printed_tokens.add(face)
                items.append(DocumentItem(label=face, image=image, quantity=token_copies))
            else:
                items.append(
                    DocumentItem(label=item_label(entry, face), image=image, quantity=entry.quantity)
                )

    return items


class DeckPrinter:
    """
    Turns decks into printable card documents or image folders.

    Usage:
        printer = DeckPrinter()
        printer.subscribe(print)
        run = await printer.generate_document(deck_id=12345)
        run.document_path
    """

    def __init__(
        self,
        *,
        assembler: DocumentAssembler | None = None,
        file_manager: FileManager | None = None,
        image_writer: ImageDirectoryWriter | None = None,
        http_client: httpx.AsyncClient | None = None,
        max_concurrency: int | None = None,
        request_delay: float | None = None,
    ) -> None:
        """
        Args:
            assembler: Document builder. Defaults to PdfDocumentAssembler.
            file_manager: Output path resolver. Defaults to FileManager().
            image_writer: Image directory writer
            http_client: Shared HTTP client. By default every run opens and
                closes its own.
            max_concurrency: Parallel image downloads per run
            request_delay: Pause between Scryfall lookups
        """
        self.assembler = assembler or PdfDocumentAssembler()
        self.file_manager = file_manager or FileManager()
        self.image_writer = image_writer or ImageDirectoryWriter()
        self.http_client = http_client
        self.max_concurrency = max_concurrency
        self.request_delay = request_delay
        self.progress = ProgressBroadcaster()

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Receive progress events of every run. Returns an unsubscribe callable."""
        return self.progress.subscribe(listener)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def generate_document(
        self,
        deck_id: int | None = None,
        input_file_path: str | None = None,
        output_dir: str | None = None,
        output_file_name: str | None = None,
        options: PrintOptions | None = None,
    ) -> PipelineRun:
        """
        Generate a document from either an online deck or a deck list file.

        A positive deck id wins; otherwise the file path is used.

        Raises:
            CallerInputError: If neither a positive deck id nor a file path is given
            SourceFetchError: If the deck can't be obtained
        """
        if deck_id is not None and deck_id > 0:
            return await self.generate_document_from_deck_online(
                deck_id, output_dir, output_file_name, options
            )
        if input_file_path:
            return await self.generate_document_from_deck_in_file(
                input_file_path, output_dir, output_file_name, options
            )
        raise CallerInputError("Deck id has to be greater than 0 or a deck list file path is required")

    async def generate_document_from_deck_online(
        self,
        deck_id: int,
        output_dir: str | None = None,
        output_file_name: str | None = None,
        options: PrintOptions | None = None,
    ) -> PipelineRun:
        """Generate a document for a deck hosted on Archidekt."""
        options = options or PrintOptions()
        return await self.run(
            OnlineDeckId(deck_id),
            options=options,
            output_dir=output_dir,
            output_file_name=output_file_name,
            write_images=options.save_images,
        )

    async def generate_document_from_deck_in_file(
        self,
        deck_list_file_path: str,
        output_dir: str | None = None,
        output_file_name: str | None = None,
        options: PrintOptions | None = None,
    ) -> PipelineRun:
        """Generate a document for a local deck list file."""
        options = options or PrintOptions()
        return await self.run(
            LocalFilePath(deck_list_file_path),
            options=options,
            output_dir=output_dir,
            output_file_name=output_file_name,
            write_images=options.save_images,
        )

    async def save_images(
        self,
        source: DeckSource,
        output_dir: str | None = None,
        options: PrintOptions | None = None,
    ) -> PipelineRun:
        """Save every card image of a deck to a directory, without a document."""
        return await self.run(
            source,
            options=options or PrintOptions(),
            write_document=False,
            write_images=True,
            image_dir=output_dir,
        )

    async def generate_document_from_saved_images(
        self,
        image_dir: str,
        output_file_path: str | None = None,
    ) -> str:
        """
        Build a document from a directory of previously saved images.

        Raises:
            CallerInputError: If image_dir is not an existing directory
        """
        if not self.file_manager.directory_exists(image_dir):
            raise CallerInputError(f"Image folder {image_dir!r} has to be an existing directory")

        if output_file_path:
            Path(output_file_path).parent.mkdir(parents=True, exist_ok=True)
            target = output_file_path
        else:
            target = self.file_manager.document_path(deck_name=Path(image_dir).name)

        items = await asyncio.to_thread(read_image_directory, image_dir)
        return await self.assembler.assemble(
            items, target, self.progress.reporter(ProgressStage.ASSEMBLE_DOCUMENT)
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    async def resolve_deck(self, source: DeckSource, http: httpx.AsyncClient) -> Deck:
        """
        Obtain the normalized deck for a source.

        Raises:
            CallerInputError: For an unknown source type or a non-positive deck id
            SourceFetchError: If the deck can't be read or fetched
        """
        validate_source(source)

        if isinstance(source, OnlineDeckId):
            return await RemoteDeckFetcher(ArchidektClient(http)).fetch(source.deck_id)

        return parse_deck_list(source.path)

    async def run(
        self,
        source: DeckSource,
        *,
        options: PrintOptions | None = None,
        output_dir: str | None = None,
        output_file_name: str | None = None,
        write_document: bool = True,
        write_images: bool = False,
        image_dir: str | None = None,
    ) -> PipelineRun:
        """
        Run the full pipeline for one deck.

        Args:
            source: Deck to print
            options: Printing options
            output_dir: Directory for the document (and default image folder)
            output_file_name: Document file name, the deck name by default
            write_document: Assemble a document
            write_images: Save images to a folder
            image_dir: Folder for saved images, "<deck>_images" by default

        Returns:
            The finished run

        Raises:
            CallerInputError: Before any I/O, for an invalid source
            SourceFetchError: If the deck can't be obtained
            asyncio.CancelledError: If cancelled; the run is marked FAILED
        """
        validate_source(source)
        options = options or PrintOptions()
        run = PipelineRun(source=source)

        try:
            async with self._http() as http:
                run.advance(PipelineState.RESOLVING_DECK)
                report = self._reporter(run, ProgressStage.RESOLVE_DECK)
                report(0.0)
                deck = await self.resolve_deck(source, http)
                run.deck = deck
                report(100.0)

                run.advance(PipelineState.RESOLVING_IMAGES)
                scryfall = ScryfallClient(http)
                resolver = CardImageResolver(
                    scryfall,
                    language_code=options.language_code,
                    include_tokens=options.token_copies > 0,
                    request_delay=self.request_delay,
                )
                await resolver.resolve(deck, self._reporter(run, ProgressStage.RESOLVE_IMAGES))

                run.advance(PipelineState.FETCHING_IMAGES)
                fetcher = ImageFetcher(scryfall, self.max_concurrency)
                await fetcher.fetch_all(
                    deck, self._reporter(run, ProgressStage.FETCH_IMAGES), run.cache
                )

            run.advance(PipelineState.ASSEMBLING_OUTPUT)
            if write_images:
                await self._write_images(run, deck, options, output_dir, image_dir)
            if write_document:
                await self._write_document(run, deck, options, output_dir, output_file_name)

            run.advance(PipelineState.DONE)
            return run

        except Exception as e:
            stage = STAGE_BY_STATE.get(run.state, ProgressStage.RESOLVE_DECK)
            run.advance(PipelineState.FAILED)
            self.progress.reporter(stage)(None, str(e))
            raise
        except asyncio.CancelledError:
            run.advance(PipelineState.FAILED)
            raise

    async def _write_images(
        self,
        run: PipelineRun,
        deck: Deck,
        options: PrintOptions,
        output_dir: str | None,
        image_dir: str | None,
    ) -> None:
        if image_dir:
            directory = self.file_manager.create_output_dir(image_dir)
        else:
            directory = self.file_manager.image_dir(output_dir, deck.name)

        # One file per distinct face: print_all_tokens only repeats tokens on paper
        items = build_document_items(deck, run.cache, options.token_copies)
        paths = await asyncio.to_thread(self.image_writer.write, items, directory)
        run.image_paths = [str(path) for path in paths]

    async def _write_document(
        self,
        run: PipelineRun,
        deck: Deck,
        options: PrintOptions,
        output_dir: str | None,
        output_file_name: str | None,
    ) -> None:
        target = self.file_manager.document_path(output_dir, output_file_name, deck.name)
        items = build_document_items(
            deck, run.cache, options.token_copies, options.print_all_tokens
        )
        run.document_path = await self.assembler.assemble(
            items, target, self._reporter(run, ProgressStage.ASSEMBLE_DOCUMENT)
        )

    def _reporter(self, run: PipelineRun, stage: ProgressStage) -> StageReporter:
        """Stage reporter that also records warnings on the run."""
        forward = self.progress.reporter(stage)

        def report(percent: float | None, error_message: str | None = None) -> None:
            if error_message:
                run.warnings.append(error_message)
            forward(percent, error_message)

        return report

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return

        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            yield client


def validate_source(source: object) -> None:
    """
    Reject unusable deck sources before any I/O.

    Raises:
        CallerInputError: For an unknown source type, a non-positive deck id
            or an empty file path
    """
    if isinstance(source, OnlineDeckId):
        if source.deck_id <= 0:
            raise CallerInputError(f"Deck id has to be greater than 0, got {source.deck_id}")
    elif isinstance(source, LocalFilePath):
        if not source.path:
            raise CallerInputError("Deck list file path is empty")
    else:
        raise CallerInputError(f"Unsupported deck source: {source!r}")

