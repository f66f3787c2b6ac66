"""
PDF document assembler.

Places card images at natural card size (63x88 mm) in a grid on each page,
repeating every image as many times as its quantity.
"""

import asyncio
import io
import logging
from collections.abc import Sequence
from typing import Protocol

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from proxyprinter.config import CARD_GAP_MM, CARD_HEIGHT_MM, CARD_WIDTH_MM, PAGE_MARGIN_MM
from proxyprinter.models.document import DocumentItem
from proxyprinter.services.progress import StageReporter, percent_of

logger = logging.getLogger(__name__)


class DocumentAssembler(Protocol):
    """Builds a printable document from labelled images."""

    async def assemble(
        self,
        items: Sequence[DocumentItem],
        target_path: str,
        on_progress: StageReporter | None = None,
    ) -> str: ...


def compute_grid(
    page_size: tuple[float, float],
    margin: float,
    gap: float,
    card_size: tuple[float, float],
) -> tuple[int, int, float, float]:
    """
    Fit a card grid on a page. All values in points.

    Returns:
        (rows, cols, x0, y0) where (x0, y0) is the bottom-left corner of the
        centred grid
    """
    page_w, page_h = page_size
    card_w, card_h = card_size

    cols = max(1, int((page_w - 2 * margin + gap) // (card_w + gap)))
    rows = max(1, int((page_h - 2 * margin + gap) // (card_h + gap)))
    x0 = (page_w - (cols * card_w + (cols - 1) * gap)) / 2
    y0 = (page_h - (rows * card_h + (rows - 1) * gap)) / 2

    return rows, cols, x0, y0


class PdfDocumentAssembler:
    """Lays cards out on A4 pages with reportlab."""

    def __init__(
        self,
        page_size: tuple[float, float] = A4,
        margin_mm: float = PAGE_MARGIN_MM,
        gap_mm: float = CARD_GAP_MM,
    ) -> None:
        self.page_size = page_size
        self.margin = margin_mm * mm
        self.gap = gap_mm * mm
        self.card_size = (CARD_WIDTH_MM * mm, CARD_HEIGHT_MM * mm)

    async def assemble(
        self,
        items: Sequence[DocumentItem],
        target_path: str,
        on_progress: StageReporter | None = None,
    ) -> str:
        """
        Write a PDF with every item repeated `quantity` times.

        Decoding, drawing and saving run in a worker thread one item at a
        time, so other requests on the event loop keep running. Progress is
        reported from the event loop. Images that can't be decoded are
        skipped with a warning.

        Returns:
            The target path
        """
        pdf = canvas.Canvas(target_path, pagesize=self.page_size)
        slot = 0

        if on_progress:
            on_progress(0.0)

        for done, item in enumerate(items, start=1):
            slot, error_message = await asyncio.to_thread(self._place, pdf, item, slot)
            if on_progress:
                on_progress(percent_of(done, len(items)), error_message)

        await asyncio.to_thread(pdf.save)

        if on_progress and not items:
            on_progress(100.0)

        logger.info("Wrote %d cards to %s", slot, target_path)
        return target_path

    def _place(self, pdf: canvas.Canvas, item: DocumentItem, slot: int) -> tuple[int, str | None]:
        """Draw `quantity` copies of an item from grid slot `slot`. Returns (next slot, error)."""
        try:
            image = ImageReader(io.BytesIO(item.image))
            image.getSize()
        except Exception as e:
            logger.warning("Cannot load image %r: %s", item.label, e)
            return slot, f"Could not place image '{item.label}'"

        rows, cols, x0, y0 = compute_grid(self.page_size, self.margin, self.gap, self.card_size)
        card_w, card_h = self.card_size
        per_page = rows * cols

        for _ in range(item.quantity):
            if slot and slot % per_page == 0:
                pdf.showPage()

            row, col = divmod(slot % per_page, cols)
            x = x0 + col * (card_w + self.gap)
            y = y0 + (rows - 1 - row) * (card_h + self.gap)
            pdf.drawImage(
                image,
                x,
                y,
                width=card_w,
                height=card_h,
                preserveAspectRatio=True,
                anchor="c",
            )
            slot += 1

        return slot, None
