"""
Anki TSV import/export.

Anki's text importer accepts one note per line as Front<TAB>Back<TAB>Deck.
Tabs inside fields become spaces and newlines become <br>.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable

from loguru import logger

from cardsmith.exceptions import TSVImportError
from cardsmith.extraction import DEFAULT_CATEGORY, Card

TSV_HEADER = "Front\tBack\tDeck"
EXPORT_DEFAULT_DECK = "Default"
_TSV_SUFFIX_PATTERN = re.compile(r"\.(tsv|txt)$", re.IGNORECASE)


def _escape_field(value: str) -> str:
    return (value or "").replace("\t", " ").replace("\n", "<br>")


def _unescape_field(value: str) -> str:
    return value.replace("<br>", "\n").strip()


def cards_to_tsv(cards: Iterable[Card], include_header: bool = False) -> str:
    """
    Render cards as Anki-importable TSV.

    Args:
        cards: Cards to export
        include_header: Prefix a Front/Back/Deck header row (new files only)

    Returns:
        TSV text, newline-terminated
    """
    rows = [
        f"{_escape_field(card.front)}\t{_escape_field(card.back)}\t{card.deck or EXPORT_DEFAULT_DECK}"
        for card in cards
    ]
    body = "\n".join(rows) + "\n"
    return f"{TSV_HEADER}\n{body}" if include_header else body


def parse_tsv(content: str) -> list[Card]:
    """
    Parse cards from Anki TSV text.

    A first line mentioning both "front" and "back" is treated as a header.
    Rows without a non-empty front and back are skipped.

    Raises:
        TSVImportError: If the content is empty or holds no valid cards
    """
    lines = content.strip().split("\n") if content else []
    if not lines or not lines[0].strip():
        raise TSVImportError("File is empty")

    header = lines[0].lower()
    start = 1 if "front" in header and "back" in header else 0

    cards = []
    for line in lines[start:]:
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        front = _unescape_field(parts[0])
        back = _unescape_field(parts[1])
        deck = parts[2].strip() if len(parts) > 2 and parts[2].strip() else DEFAULT_CATEGORY
        if front and back:
            cards.append(Card(front=front, back=back, deck=deck))

    if not cards:
        raise TSVImportError("No valid cards found in the file")

    logger.debug("Parsed {} cards from TSV ({} lines)", len(cards), len(lines))
    return cards


def export_filename(day: date | None = None) -> str:
    """Default export filename, e.g. anki-cards-2025-03-01.txt."""
    day = day or date.today()
    return f"anki-cards-{day.isoformat()}.txt"


def import_filename(original_name: str, day: date | None = None) -> str:
    """Filename for re-exporting an imported file, stamped with the date."""
    day = day or date.today()
    stem = _TSV_SUFFIX_PATTERN.sub("", original_name)
    return f"{stem}-{day.isoformat()}.txt"
