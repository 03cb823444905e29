"""
Record kinds produced by the extraction pipeline.

Card and Question are sibling kinds sharing one pipeline shape. Each kind is
described by a RecordKind: its required fields, its defaulted field, and
how a normalized dict becomes a record.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterator, TypeVar

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class Card:
    """A spaced-repetition flashcard."""

    front: str
    back: str
    deck: str = DEFAULT_CATEGORY

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Question:
    """A discussion question."""

    question: str
    topic: str = DEFAULT_CATEGORY

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


T = TypeVar("T", Card, Question)


@dataclass(frozen=True)
class RecordKind(Generic[T]):
    """
    Shape contract for one record kind.

    Attributes:
        name: Kind label used in logs ("card" / "question")
        required_fields: Fields that must be present and non-empty
        category_field: Optional field defaulted to DEFAULT_CATEGORY
        factory: Builds a record from normalized field values
    """

    name: str
    required_fields: tuple[str, ...]
    category_field: str
    factory: Callable[..., T]

    def exposes_required_fields(self, item: Any) -> bool:
        """True when item is a keyed record carrying every required field."""
        return isinstance(item, dict) and all(f in item for f in self.required_fields)

    def build(self, item: Any) -> T | None:
        """Normalize one decoded element, or None if it must be discarded."""
        if not isinstance(item, dict):
            return None

        values = {}
        for field_name in self.required_fields:
            value = coerce_text(item.get(field_name))
            if not value:
                return None
            values[field_name] = value

        values[self.category_field] = category_or_default(item.get(self.category_field))
        return self.factory(**values)


CARD_KIND: RecordKind[Card] = RecordKind(
    name="card",
    required_fields=("front", "back"),
    category_field="deck",
    factory=Card,
)

QUESTION_KIND: RecordKind[Question] = RecordKind(
    name="question",
    required_fields=("question",),
    category_field="topic",
    factory=Question,
)


def coerce_text(value: Any) -> str:
    """Coerce a decoded JSON value to stripped text ("" for null/false)."""
    if value is None or value is False:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value).strip()


def category_or_default(value: Any) -> str:
    """Deck/topic as text, defaulting when absent or empty."""
    return coerce_text(value) or DEFAULT_CATEGORY


class ExtractionSource(str, Enum):
    """Stage that produced an extraction result."""

    DIRECT = "direct"
    BRACKET = "bracket"
    FENCED = "fenced"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


class ExtractionResult(Generic[T]):
    """
    Ordered, non-empty sequence of records from one pipeline run.

    Behaves like a read-only list; `source` records which stage produced it.
    """

    def __init__(self, records: list[T], source: ExtractionSource):
        self._records = list(records)
        self.source = source

    def __iter__(self) -> Iterator[T]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> T:
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExtractionResult):
            return self._records == other._records
        if isinstance(other, list):
            return self._records == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ExtractionResult(source={self.source.value}, records={self._records!r})"

    def to_list(self) -> list[T]:
        """Fresh list copy the caller may mutate."""
        return list(self._records)

    def to_dicts(self) -> list[dict[str, str]]:
        return [record.to_dict() for record in self._records]
