"""
ProxyPrinter services.

Deck acquisition, image resolution and download, and output assembly.
"""

from proxyprinter.services.deck_fetcher import RemoteDeckFetcher
from proxyprinter.services.file_manager import FileManager, safe_filename
from proxyprinter.services.image_fetcher import ImageCache, ImageFetcher, count_image_references
from proxyprinter.services.image_resolver import CardImageResolver
from proxyprinter.services.image_writer import ImageDirectoryWriter, read_image_directory
from proxyprinter.services.pdf_assembler import DocumentAssembler, PdfDocumentAssembler
from proxyprinter.services.pipeline import (
    DeckPrinter,
    PipelineRun,
    PipelineState,
    PrintOptions,
    build_document_items,
    validate_source,
)
from proxyprinter.services.progress import ProgressBroadcaster, StageReporter

__all__ = [
    "CardImageResolver",
    "DeckPrinter",
    "DocumentAssembler",
    "FileManager",
    "ImageCache",
    "ImageDirectoryWriter",
    "ImageFetcher",
    "PdfDocumentAssembler",
    "PipelineRun",
    "PipelineState",
    "PrintOptions",
    "ProgressBroadcaster",
    "RemoteDeckFetcher",
    "StageReporter",
    "build_document_items",
    "count_image_references",
    "read_image_directory",
    "safe_filename",
    "validate_source",
]
