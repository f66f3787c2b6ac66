"""
Image directory writer and reader.

Writes each document item to its own file and reads a directory of saved
images back into document items.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from proxyprinter.models.document import DocumentItem
from proxyprinter.services.file_manager import safe_filename

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp"})


def guess_extension(data: bytes) -> str:
    """File extension from image magic bytes (png if unknown)."""
    if data.startswith(b"\xff\xd8\xff"):
        return ".jpg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"
    return ".png"


class ImageDirectoryWriter:
    """Saves card images as individual files."""

    def write(self, items: Sequence[DocumentItem], directory: str | Path) -> list[Path]:
        """
        Write one file per item, named after its label.

        Labels that clash after cleaning get a numeric suffix.

        Returns:
            Paths written, in item order
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        used: set[str] = set()

        for item in items:
            stem = safe_filename(item.label, "card")
            candidate, counter = stem, 2
            while candidate.lower() in used:
                candidate = f"{stem} ({counter})"
                counter += 1
            used.add(candidate.lower())

            path = directory / f"{candidate}{guess_extension(item.image)}"
            path.write_bytes(item.image)
            written.append(path)

        logger.info("Saved %d images to %s", len(written), directory)
        return written


def read_image_directory(directory: str | Path) -> list[DocumentItem]:
    """
    Load saved card images as document items (label = file stem, quantity 1).

    Files are read in name order; non-image files are ignored.
    """
    items: list[DocumentItem] = []

    for path in sorted(Path(directory).iterdir(), key=lambda p: p.name.lower()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        items.append(DocumentItem(label=path.stem, image=path.read_bytes()))

    return items
