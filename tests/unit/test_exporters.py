"""
Unit tests for Anki TSV and Markdown exporters.
"""

from datetime import date

import pytest

from cardsmith.exceptions import TSVImportError
from cardsmith.export.anki_tsv import (
    TSV_HEADER,
    cards_to_tsv,
    export_filename,
    import_filename,
    parse_tsv,
)
from cardsmith.export.markdown import cards_to_markdown, markdown_filename, questions_to_markdown
from cardsmith.extraction import Card, Question

DAY = date(2025, 3, 1)


class TestCardsToTsv:
    """Tests for TSV export."""

    def test_basic_rows(self):
        tsv = cards_to_tsv([Card(front="Q1", back="A1", deck="Bio"), Card(front="Q2", back="A2")])
        assert tsv == "Q1\tA1\tBio\nQ2\tA2\tGeneral\n"

    def test_header(self):
        tsv = cards_to_tsv([Card(front="Q", back="A")], include_header=True)
        assert tsv.startswith(TSV_HEADER + "\n")

    def test_tabs_and_newlines_escaped(self):
        tsv = cards_to_tsv([Card(front="a\tb", back="line1\nline2")])
        assert tsv == "a b\tline1<br>line2\tGeneral\n"

    def test_blank_deck_exported_as_default(self):
        assert cards_to_tsv([Card(front="Q", back="A", deck="")]) == "Q\tA\tDefault\n"


class TestParseTsv:
    """Tests for TSV import."""

    def test_header_skipped(self):
        cards = parse_tsv("Front\tBack\tDeck\nQ\tA\tBio\n")
        assert cards == [Card(front="Q", back="A", deck="Bio")]

    def test_no_header(self):
        assert parse_tsv("Q\tA\n") == [Card(front="Q", back="A", deck="General")]

    def test_br_restored_to_newlines(self):
        cards = parse_tsv("Q\tline1<br>line2\tBio")
        assert cards[0].back == "line1\nline2"

    def test_invalid_rows_skipped(self):
        cards = parse_tsv("only-one-field\n\nQ\tA\tX\n\t\tY")
        assert cards == [Card(front="Q", back="A", deck="X")]

    def test_empty_file_raises(self):
        with pytest.raises(TSVImportError, match="empty"):
            parse_tsv("  \n")

    def test_no_valid_cards_raises(self):
        with pytest.raises(TSVImportError, match="No valid cards"):
            parse_tsv("Front\tBack\nnothing here")

    def test_export_import_preserves_cards(self):
        cards = [Card(front="Q", back="multi\nline", deck="Bio")]
        assert parse_tsv(cards_to_tsv(cards, include_header=True)) == cards


class TestFilenames:
    """Tests for export filenames."""

    def test_export_filename(self):
        assert export_filename(DAY) == "anki-cards-2025-03-01.txt"

    @pytest.mark.parametrize("name,expected", [
        ("deck.tsv", "deck-2025-03-01.txt"),
        ("deck.TXT", "deck-2025-03-01.txt"),
        ("deck", "deck-2025-03-01.txt"),
    ])
    def test_import_filename(self, name, expected):
        assert import_filename(name, DAY) == expected

    def test_markdown_filename(self):
        assert markdown_filename("questions", DAY) == "questions-2025-03-01.md"


class TestMarkdown:
    """Tests for Markdown export."""

    def test_cards_grouped_by_deck(self):
        cards = [
            Card(front="Q1", back="A1", deck="Bio"),
            Card(front="Q2", back="A2", deck="Math"),
            Card(front="Q3", back="A3", deck="Bio"),
        ]
        md = cards_to_markdown(cards, DAY)

        assert md.startswith("# Flashcards - 2025-03-01")
        assert md.index("## Bio") < md.index("## Math")
        bio_section = md[md.index("## Bio"):md.index("## Math")]
        assert "### Card 2" in bio_section
        assert "**Question:** Q3" in bio_section
        assert "**Answer:** A1" in bio_section

    def test_questions_grouped_by_topic(self):
        questions = [
            Question(question="Why?", topic="History"),
            Question(question="How?"),
        ]
        md = questions_to_markdown(questions, DAY)

        assert "## History\n\n1. Why?" in md
        assert "## General\n\n1. How?" in md
