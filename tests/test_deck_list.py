"""Tests for plain text deck list parsing."""

from pathlib import Path

import pytest

from proxyprinter.errors import SourceFetchError
from proxyprinter.models.deck import CardEntry, Deck
from proxyprinter.parsers.deck_list import parse_deck_list, parse_deck_text


class TestParseDeckText:
    def test_merges_duplicate_names(self, sample_deck_text: str) -> None:
        """Repeated names become one entry with summed quantity."""
        deck = parse_deck_text(sample_deck_text)

        assert [(e.name, e.quantity) for e in deck] == [
            ("Lightning Bolt", 6),
            ("Counterspell", 1),
        ]

    def test_skips_unparseable_lines(self) -> None:
        """Headers, comments and blank lines are ignored."""
        text = "Deck\n\n4 Lightning Bolt\n// comment\nSideboard\n2 Abrade\n"
        deck = parse_deck_text(text)

        assert list(deck.cards) == ["Lightning Bolt", "Abrade"]

    def test_skips_zero_quantity(self) -> None:
        """Zero quantity lines never produce an entry."""
        deck = parse_deck_text("0 Island\n1 Forest")

        assert list(deck.cards) == ["Forest"]

    def test_keeps_names_with_spaces_and_punctuation(self) -> None:
        """Everything after the quantity is the card name."""
        deck = parse_deck_text("1   Fire // Ice  \n")

        assert deck.cards["Fire // Ice"].quantity == 1

    def test_empty_text(self) -> None:
        """Empty input gives an empty deck."""
        deck = parse_deck_text("", name="empty")

        assert len(deck) == 0
        assert deck.name == "empty"


class TestParseDeckList:
    def test_reads_file(self, tmp_path: Path, sample_deck_text: str) -> None:
        """Deck list files are parsed and named after their stem."""
        path = tmp_path / "burn.txt"
        path.write_text(sample_deck_text, encoding="utf-8")

        deck = parse_deck_list(path)

        assert deck.name == "burn"
        assert deck.total_quantity() == 7

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing file is a SourceFetchError."""
        with pytest.raises(SourceFetchError, match="Could not read deck list"):
            parse_deck_list(tmp_path / "missing.txt")

    def test_binary_file_raises(self, tmp_path: Path) -> None:
        """Undecodable content is a SourceFetchError."""
        path = tmp_path / "deck.txt"
        path.write_bytes(b"\xff\xfe\x00\x81")

        with pytest.raises(SourceFetchError):
            parse_deck_list(path)


class TestDeckModel:
    def test_quantity_must_be_positive(self) -> None:
        """Entries reject quantities below one."""
        with pytest.raises(ValueError):
            CardEntry(name="Island", quantity=0)

    def test_image_reference_count(self) -> None:
        """References count faces per entry before deduplication."""
        deck = Deck()
        deck.add_card("A", 1).images_by_face_label.update({"front": "u1", "back": "u2"})
        deck.add_card("B", 3).images_by_face_label.update({"front": "u1"})

        assert deck.total_image_references() == 3
        assert deck.total_quantity() == 4
