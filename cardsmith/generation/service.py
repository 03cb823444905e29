"""
Card and question generation service.

Combines prompt building, the Claude client and the extraction pipeline:

    text -> prompt -> Claude -> extract_cards / extract_questions

Network errors from the client propagate; extraction never fails.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from cardsmith.extraction import (
    Card,
    ExtractionResult,
    Question,
    extract_cards,
    extract_questions,
    unwrap_response,
)
from cardsmith.generation.claude_client import ClaudeClient
from cardsmith.generation.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    CARDS_SYSTEM_PROMPT,
    QUESTIONS_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_cards_prompt,
    build_questions_prompt,
)
from config import get_settings

ANALYSIS_MAX_TOKENS = 1000


class CardGenerator:
    """Generates flashcards, questions and context summaries with Claude."""

    def __init__(self, client: ClaudeClient | None = None) -> None:
        self.settings = get_settings()
        self.client = client or ClaudeClient()

    def close(self) -> None:
        """Close the underlying Claude client."""
        self.client.close()

    def __enter__(self) -> CardGenerator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def analyze_text(self, text: str) -> str:
        """
        Summarize a document for use as generation context.

        Args:
            text: Full document text

        Returns:
            One or two paragraph summary (may be empty)
        """
        _require_text(text)
        response = self.client.create_message(
            system=ANALYSIS_SYSTEM_PROMPT,
            user=build_analysis_prompt(text, self.settings.analysis_max_chars),
            max_tokens=ANALYSIS_MAX_TOKENS,
            timeout=self.settings.analysis_timeout_seconds,
        )
        return unwrap_response(response)

    def generate_cards(
        self,
        text: str,
        deck_options: str = "",
        context: str = "",
    ) -> ExtractionResult[Card]:
        """
        Generate flashcards from selected text.

        Args:
            text: Selected text
            deck_options: Comma-separated deck names the model may choose from
            context: Optional document summary from analyze_text

        Returns:
            Non-empty ExtractionResult of Cards
        """
        _require_text(text)
        prompt = build_cards_prompt(
            text,
            deck_options=deck_options,
            context=context,
            max_text_chars=self.settings.selection_max_chars,
            max_context_chars=self.settings.context_max_chars,
        )
        response = self.client.create_message(
            system=CARDS_SYSTEM_PROMPT,
            user=prompt,
            max_tokens=self.settings.claude_max_tokens,
        )
        cards = extract_cards(response)
        logger.info("Generated {} cards ({})", len(cards), cards.source.value)
        return cards

    def generate_questions(self, text: str, context: str = "") -> ExtractionResult[Question]:
        """Generate discussion questions from selected text."""
        _require_text(text)
        prompt = build_questions_prompt(
            text,
            context=context,
            max_text_chars=self.settings.selection_max_chars,
            max_context_chars=self.settings.context_max_chars,
        )
        response = self.client.create_message(
            system=QUESTIONS_SYSTEM_PROMPT,
            user=prompt,
            max_tokens=self.settings.claude_max_tokens,
        )
        questions = extract_questions(response)
        logger.info("Generated {} questions ({})", len(questions), questions.source.value)
        return questions


def _require_text(text: str) -> None:
    if not text or not text.strip():
        raise ValueError("Text is required")
