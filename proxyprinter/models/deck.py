from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class CardEntry:
    """
    A card in a deck together with its resolved images.

    Attributes:
        name: Card name, unique within a deck
        quantity: Number of copies to print (always >= 1)
        images_by_face_label: Face label -> image URL. Labels are "front",
            "back" (further faces "face 3", ...) or a token name. Empty until
            the card image resolver has run.
        token_labels: Labels in images_by_face_label that are tokens created
            by the card rather than faces of the card itself
    """

    name: str
    quantity: int
    images_by_face_label: dict[str, str] = field(default_factory=dict)
    token_labels: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Quantity for {self.name!r} must be at least 1, got {self.quantity}")

    def image_count(self) -> int:
        """Number of (entry, face) image references."""
        return len(self.images_by_face_label)


@dataclass
class Deck:
    """
    A normalized deck: one entry per distinct card name, in insertion order.

    Attributes:
        name: Deck name (empty for anonymous deck lists)
        cards: Card name -> CardEntry, iteration follows insertion order
    """

    name: str = ""
    cards: dict[str, CardEntry] = field(default_factory=dict)

    def add_card(self, name: str, quantity: int) -> CardEntry:
        """Add copies of a card, merging with an existing entry of the same name."""
        entry = self.cards.get(name)
        if entry is None:
            entry = CardEntry(name=name, quantity=quantity)
            self.cards[name] = entry
        else:
            entry.quantity += quantity
        return entry

    def __iter__(self) -> Iterator[CardEntry]:
        return iter(self.cards.values())

    def __len__(self) -> int:
        return len(self.cards)

    def total_quantity(self) -> int:
        """Total copies across all entries."""
        return sum(entry.quantity for entry in self.cards.values())

    def total_image_references(self) -> int:
        """Count of (entry, face label) pairs, before URL deduplication."""
        return sum(entry.image_count() for entry in self.cards.values())


@dataclass(frozen=True, slots=True)
class OnlineDeckId:
    """Deck hosted on the remote deck service."""

    deck_id: int


@dataclass(frozen=True, slots=True)
class LocalFilePath:
    """Deck list stored in a local text file."""

    path: str


# Exactly one variant is supplied per request
DeckSource = OnlineDeckId | LocalFilePath
