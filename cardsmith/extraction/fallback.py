"""Terminal fallback records, used when every extraction stage came up empty."""

from __future__ import annotations

from cardsmith.extraction.records import DEFAULT_CATEGORY, Card, Question

FALLBACK_CARD_FRONT = "What are the key concepts from this text?"
FALLBACK_BACK_MAX_CHARS = 300
TRUNCATION_MARKER = "..."

FALLBACK_QUESTIONS = (
    "What are the main arguments or ideas presented in this text?",
    "How do the ideas in this text connect to what you already know?",
)


def fallback_cards(raw_text: str) -> list[Card]:
    """A single generic card whose back holds the start of the raw response."""
    back = raw_text
    if len(back) > FALLBACK_BACK_MAX_CHARS:
        back = back[:FALLBACK_BACK_MAX_CHARS] + TRUNCATION_MARKER
    return [Card(front=FALLBACK_CARD_FRONT, back=back, deck=DEFAULT_CATEGORY)]


def fallback_questions(raw_text: str = "") -> list[Question]:
    """Two fixed generic questions, independent of the response."""
    return [Question(question=text, topic=DEFAULT_CATEGORY) for text in FALLBACK_QUESTIONS]
