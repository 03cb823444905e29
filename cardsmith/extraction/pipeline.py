"""
Resilient extraction pipeline.

    unwrap_response -> locate_candidates -> decode + normalize (first success wins)
        -> reconstruct_questions (question mode only) -> fallback records

The pipeline is pure and total: any provider response yields a non-empty
ExtractionResult and no exception escapes.
"""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from cardsmith.extraction.candidates import CandidateStrategy, locate_candidates
from cardsmith.extraction.envelope import unwrap_response
from cardsmith.extraction.fallback import fallback_cards, fallback_questions
from cardsmith.extraction.heuristics import reconstruct_questions
from cardsmith.extraction.records import (
    CARD_KIND,
    QUESTION_KIND,
    Card,
    ExtractionResult,
    ExtractionSource,
    Question,
    RecordKind,
    T,
)
from cardsmith.extraction.validation import decode_candidate, normalize_records

_SOURCE_BY_STRATEGY = {
    CandidateStrategy.DIRECT: ExtractionSource.DIRECT,
    CandidateStrategy.BRACKET: ExtractionSource.BRACKET,
    CandidateStrategy.FENCED: ExtractionSource.FENCED,
}

# Per-kind recovery stages: (heuristic reconstructor or None, fallback synthesizer)
_RECOVERY: dict[str, tuple[Callable[[str], list] | None, Callable[[str], list]]] = {
    CARD_KIND.name: (None, fallback_cards),
    QUESTION_KIND.name: (reconstruct_questions, fallback_questions),
}


def extract_records(response: Any, kind: RecordKind[T]) -> ExtractionResult[T]:
    """
    Recover records of the given kind from a provider response.

    Args:
        response: Provider response envelope (dict or plain string)
        kind: CARD_KIND or QUESTION_KIND

    Returns:
        Non-empty ExtractionResult; `source` names the stage that produced it
    """
    heuristic, fallback = _RECOVERY[kind.name]
    raw_text = ""

    try:
        raw_text = unwrap_response(response)

        for candidate in locate_candidates(raw_text):
            items = decode_candidate(candidate.text, kind)
            if items is None:
                continue
            records = normalize_records(items, kind)
            if records:
                logger.debug(
                    "Extracted {} {} records via {} strategy",
                    len(records),
                    kind.name,
                    candidate.strategy.value,
                )
                return ExtractionResult(records, _SOURCE_BY_STRATEGY[candidate.strategy])

        if heuristic is not None:
            records = heuristic(raw_text)
            if records:
                logger.info("Reconstructed {} {} records from prose", len(records), kind.name)
                return ExtractionResult(records, ExtractionSource.HEURISTIC)

    except Exception as e:
        logger.exception("Unexpected error extracting {} records: {}", kind.name, e)

    logger.warning("Could not parse any {} records from response, using fallback", kind.name)
    return ExtractionResult(fallback(raw_text), ExtractionSource.FALLBACK)


def extract_cards(response: Any) -> ExtractionResult[Card]:
    """Recover flashcards from a provider response."""
    return extract_records(response, CARD_KIND)


def extract_questions(response: Any) -> ExtractionResult[Question]:
    """Recover discussion questions from a provider response."""
    return extract_records(response, QUESTION_KIND)
