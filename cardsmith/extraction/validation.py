"""
Structural Validator and Record Normalizer.

A candidate is either fully trusted or rejected: decode failures and shape
failures both report None so the caller moves on to the next candidate.
"""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from cardsmith.extraction.records import RecordKind, T


def decode_candidate(text: str, kind: RecordKind) -> list[Any] | None:
    """
    Strictly decode a candidate and check the minimum shape contract.

    The decoded value must be a non-empty list with at least one keyed
    record exposing the kind's required fields.

    Returns:
        The decoded list, or None on decode or shape failure
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.debug("Candidate is not valid JSON: {}", e)
        return None

    if not isinstance(data, list) or not data:
        logger.debug("Decoded {} candidate is not a non-empty array", kind.name)
        return None

    if not any(kind.exposes_required_fields(item) for item in data):
        logger.debug("Decoded array holds no {} records", kind.name)
        return None

    return data


def normalize_records(items: list[Any], kind: RecordKind[T]) -> list[T]:
    """Default optional fields and drop elements missing required ones."""
    records = []
    for item in items:
        record = kind.build(item)
        if record is not None:
            records.append(record)

    dropped = len(items) - len(records)
    if dropped:
        logger.debug("Discarded {} invalid {} records", dropped, kind.name)
    return records
