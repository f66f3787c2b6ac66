"""
Output path handling.

Chooses and creates output directories and document file names. Callers
treat the returned paths as opaque strings.
"""

import re
from pathlib import Path

from proxyprinter.config import settings

DOCUMENT_EXTENSION = ".pdf"

# Characters not allowed in file names on common filesystems
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_filename(name: str, default: str | None = None) -> str:
    """
    Make a string usable as a file name.

    Example:
        safe_filename("Fire // Ice") -> "Fire _ Ice"
    """
    cleaned = _UNSAFE_CHARS.sub("_", name).strip().strip(".")
    cleaned = re.sub(r"_+", "_", cleaned)
    return cleaned or (default or settings.default_document_name)


class FileManager:
    """Resolves output locations relative to a base directory."""

    def __init__(self, base_dir: str | Path | None = None, default_name: str | None = None) -> None:
        self.base_dir = Path(base_dir or settings.output_dir)
        self.default_name = default_name or settings.default_document_name

    def create_output_dir(self, path: str | Path | None = None) -> str:
        """Create (if needed) and return an output directory, the base dir by default."""
        directory = Path(path) if path else self.base_dir
        directory.mkdir(parents=True, exist_ok=True)
        return str(directory)

    def document_path(
        self,
        output_dir: str | Path | None = None,
        file_name: str | None = None,
        deck_name: str | None = None,
    ) -> str:
        """
        Writable path for a generated document.

        The file name falls back to the deck name, then the default name, and
        always carries the document extension. The parent directory is created.
        """
        name = safe_filename(file_name or deck_name or self.default_name, self.default_name)
        if not name.lower().endswith(DOCUMENT_EXTENSION):
            name += DOCUMENT_EXTENSION

        return str(Path(self.create_output_dir(output_dir)) / name)

    def image_dir(self, output_dir: str | Path | None = None, deck_name: str | None = None) -> str:
        """Writable "<deck name>_images" directory under output_dir (the base dir by default)."""
        parent = Path(output_dir) if output_dir else self.base_dir
        name = safe_filename(deck_name or self.default_name, self.default_name)
        return self.create_output_dir(parent / f"{name}_images")

    @staticmethod
    def file_stem(path: str | Path) -> str:
        """File name without directory or extension."""
        return Path(path).stem

    @staticmethod
    def directory_exists(path: str | Path | None) -> bool:
        return bool(path) and Path(path).is_dir()
