"""Print proxy sheets for a deck.

Usage:
    proxyprinter --url https://archidekt.com/decks/12345/my-deck
    proxyprinter --file decklist.txt --save-images --token-copies 2
    proxyprinter --from-images output/my_deck_images
"""

import argparse
import asyncio
import logging
import sys

from proxyprinter.config import settings
from proxyprinter.errors import CallerInputError, SourceFetchError
from proxyprinter.models.deck import DeckSource, LocalFilePath, OnlineDeckId
from proxyprinter.models.progress import ProgressEvent
from proxyprinter.parsers.deck_url import try_extract_deck_id
from proxyprinter.services.pipeline import DeckPrinter, PipelineRun, PrintOptions

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print proxy sheets for a trading card deck")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Archidekt deck URL")
    source.add_argument("--deck-id", type=int, help="Archidekt deck id")
    source.add_argument("--file", help="Deck list file (one '<qty> <card name>' per line)")
    source.add_argument("--from-images", metavar="DIR", help="Build a document from saved images")

    parser.add_argument("--output-dir", help=f"Output directory (default: {settings.output_dir})")
    parser.add_argument("--output-name", help="Document file name (default: deck name)")
    parser.add_argument("--language", help="Scryfall language code, e.g. en, de, ja")
    parser.add_argument(
        "--token-copies",
        type=int,
        default=0,
        help="Copies of each token to print (default: 0, no tokens)",
    )
    parser.add_argument(
        "--print-all-tokens",
        action="store_true",
        help="Print a shared token once for every card that makes it",
    )
    parser.add_argument(
        "--save-images",
        action="store_true",
        help="Also save card images next to the document",
    )
    parser.add_argument(
        "--images-only",
        action="store_true",
        help="Only save card images, don't build a document",
    )
    return parser


def print_progress(event: ProgressEvent) -> None:
    """Progress listener writing one line per event."""
    if event.error_message:
        print(f"[{event.stage.value}] {event.error_message}", file=sys.stderr)
    if event.percent is not None:
        print(f"[{event.stage.value}] {event.percent:5.1f}%")


def resolve_source(args: argparse.Namespace) -> DeckSource:
    """
    Pick the deck source from parsed arguments.

    Raises:
        CallerInputError: If the URL isn't a recognised deck URL
    """
    if args.url:
        deck_id = try_extract_deck_id(args.url)
        if deck_id is None:
            raise CallerInputError(f"Not a recognised deck URL: {args.url}")
        return OnlineDeckId(deck_id)
    if args.deck_id is not None:
        return OnlineDeckId(args.deck_id)
    return LocalFilePath(args.file)


async def run_cli(args: argparse.Namespace) -> PipelineRun | str:
    """Run the pipeline requested on the command line."""
    printer = DeckPrinter()
    printer.subscribe(print_progress)

    if args.from_images:
        return await printer.generate_document_from_saved_images(
            args.from_images,
            args.output_name,
        )

    source = resolve_source(args)
    options = PrintOptions(
        language_code=args.language,
        token_copies=max(0, args.token_copies),
        print_all_tokens=args.print_all_tokens,
        save_images=args.save_images,
    )

    if args.images_only:
        return await printer.save_images(source, args.output_dir, options)

    return await printer.run(
        source,
        options=options,
        output_dir=args.output_dir,
        output_file_name=args.output_name,
        write_images=options.save_images,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run_cli(args))
    except CallerInputError as e:
        logger.error("%s", e)
        return 2
    except SourceFetchError as e:
        logger.error("%s", e)
        return 1

    if isinstance(result, str):
        print(f"Document written to {result}")
        return 0

    if result.document_path:
        print(f"Document written to {result.document_path}")
    if result.image_paths:
        print(f"Saved {len(result.image_paths)} images")
    if result.warnings:
        print(f"\n{len(result.warnings)} warnings:")
        for warning in result.warnings:
            print(f"  {warning}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
