from proxyprinter.models.deck import CardEntry, Deck, DeckSource, LocalFilePath, OnlineDeckId
from proxyprinter.models.document import DocumentItem
from proxyprinter.models.progress import ProgressEvent, ProgressListener, ProgressStage

__all__ = [
    "CardEntry",
    "Deck",
    "DeckSource",
    "DocumentItem",
    "LocalFilePath",
    "OnlineDeckId",
    "ProgressEvent",
    "ProgressListener",
    "ProgressStage",
]
