from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ProgressStage(str, Enum):
    """Pipeline stage that produced a progress event."""

    RESOLVE_DECK = "resolve_deck"
    RESOLVE_IMAGES = "resolve_images"
    FETCH_IMAGES = "fetch_images"
    ASSEMBLE_DOCUMENT = "assemble_document"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """
    A single progress update.

    Attributes:
        stage: Stage the update belongs to
        percent: 0-100, non-decreasing within a stage. None for a pure notice.
        error_message: Optional non-fatal notice (missing card, failed image)
    """

    stage: ProgressStage
    percent: float | None = None
    error_message: str | None = None


# Observer signature for callers subscribing to progress
ProgressListener = Callable[[ProgressEvent], None]
