"""Claude-backed generation of flashcards and discussion questions.

Pipeline:
1. Optional analysis pass summarizes the whole document as context
2. Claude generates cards/questions from the selected text
3. cardsmith.extraction recovers records from the response

Usage:
    from cardsmith.generation import CardGenerator

    cards = CardGenerator().generate_cards(selection, deck_options="Bio, Math")
"""
from cardsmith.generation.claude_client import ClaudeClient, validate_anthropic_api_key
from cardsmith.generation.prompts import (
    build_analysis_prompt,
    build_cards_prompt,
    build_questions_prompt,
    truncate_text,
)
from cardsmith.generation.service import CardGenerator

__all__ = [
    "CardGenerator",
    "ClaudeClient",
    "validate_anthropic_api_key",
    "build_analysis_prompt",
    "build_cards_prompt",
    "build_questions_prompt",
    "truncate_text",
]
