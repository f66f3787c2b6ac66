from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DocumentItem:
    """
    One image handed to a document assembler or image writer.

    Attributes:
        label: Human readable label, also used as file name stem
        image: Raw image bytes
        quantity: Number of copies to place
    """

    label: str
    image: bytes
    quantity: int = 1
