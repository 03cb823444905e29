"""Resilient extraction of cards and questions from LLM responses.

Usage:
    from cardsmith.extraction import extract_cards

    cards = extract_cards(claude_response)
    for card in cards:
        print(card.front, "->", card.back)
"""
from cardsmith.extraction.candidates import Candidate, CandidateStrategy, locate_candidates
from cardsmith.extraction.envelope import unwrap_response
from cardsmith.extraction.fallback import fallback_cards, fallback_questions
from cardsmith.extraction.heuristics import QuestionLineReconstructor, reconstruct_questions
from cardsmith.extraction.pipeline import extract_cards, extract_questions, extract_records
from cardsmith.extraction.records import (
    CARD_KIND,
    DEFAULT_CATEGORY,
    QUESTION_KIND,
    Card,
    ExtractionResult,
    ExtractionSource,
    Question,
    RecordKind,
)
from cardsmith.extraction.validation import decode_candidate, normalize_records

__all__ = [
    # Pipeline
    "extract_cards",
    "extract_questions",
    "extract_records",
    # Stages
    "unwrap_response",
    "locate_candidates",
    "decode_candidate",
    "normalize_records",
    "reconstruct_questions",
    "QuestionLineReconstructor",
    "fallback_cards",
    "fallback_questions",
    # Types
    "Candidate",
    "CandidateStrategy",
    "Card",
    "Question",
    "RecordKind",
    "ExtractionResult",
    "ExtractionSource",
    "CARD_KIND",
    "QUESTION_KIND",
    "DEFAULT_CATEGORY",
]
