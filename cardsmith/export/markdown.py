"""Markdown export of cards (grouped by deck) and questions (grouped by topic)."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from cardsmith.extraction import DEFAULT_CATEGORY, Card, Question


def _group(items: Iterable, key) -> dict[str, list]:
    groups: dict[str, list] = {}
    for item in items:
        groups.setdefault(key(item) or DEFAULT_CATEGORY, []).append(item)
    return groups


def cards_to_markdown(cards: Iterable[Card], day: date | None = None) -> str:
    day = day or date.today()
    lines = [f"# Flashcards - {day.isoformat()}", ""]

    for deck, deck_cards in _group(cards, lambda c: c.deck).items():
        lines += [f"## {deck}", ""]
        for index, card in enumerate(deck_cards, start=1):
            lines += [
                f"### Card {index}",
                "",
                f"**Question:** {card.front}",
                "",
                "---",
                "",
                f"**Answer:** {card.back}",
                "",
            ]

    return "\n".join(lines)


def questions_to_markdown(questions: Iterable[Question], day: date | None = None) -> str:
    day = day or date.today()
    lines = [f"# Discussion Questions - {day.isoformat()}", ""]

    for topic, topic_questions in _group(questions, lambda q: q.topic).items():
        lines += [f"## {topic}", ""]
        lines += [f"{i}. {q.question}" for i, q in enumerate(topic_questions, start=1)]
        lines.append("")

    return "\n".join(lines)


def markdown_filename(kind: str = "flashcards", day: date | None = None) -> str:
    day = day or date.today()
    return f"{kind}-{day.isoformat()}.md"
