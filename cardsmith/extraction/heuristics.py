"""
Heuristic question reconstruction from prose.

When a model ignores the JSON instruction its output still tends to look
like a numbered or bulleted list of questions. QuestionLineReconstructor
walks the text line by line with two pieces of state, the pending question
text and the current topic:

    blank line              -> skipped
    "Topic: X"/"Category: X" -> current topic = X
    line with "?" or "1. "  -> flush pending, start a new question
    any other line          -> appended to the pending question
    end of input            -> flush pending
"""

from __future__ import annotations

import re

from cardsmith.extraction.records import DEFAULT_CATEGORY, Question

TOPIC_LABEL_PATTERN = re.compile(r"^(?:topic|category)\s*:\s*(.*)$", re.IGNORECASE)
NUMBERED_MARKER_PATTERN = re.compile(r"^\d+\.\s+")
BULLET_MARKER_PATTERN = re.compile(r"^[-*•]\s+")


class QuestionLineReconstructor:
    """Line-oriented state machine that rebuilds Questions from prose."""

    def __init__(self) -> None:
        self.current_question = ""
        self.current_topic = DEFAULT_CATEGORY
        self.questions: list[Question] = []

    def feed(self, line: str) -> None:
        """Apply one line of input."""
        stripped = line.strip()
        if not stripped:
            return

        topic_match = TOPIC_LABEL_PATTERN.match(stripped)
        if topic_match:
            self.current_topic = topic_match.group(1).strip() or DEFAULT_CATEGORY
            return

        if "?" in stripped or NUMBERED_MARKER_PATTERN.match(stripped):
            self.flush()
            self.current_question = _strip_list_marker(stripped)
            return

        self.current_question = f"{self.current_question} {stripped}".strip()

    def flush(self) -> None:
        """Emit the pending question, if any."""
        text = self.current_question.strip()
        if text:
            self.questions.append(Question(question=text, topic=self.current_topic))
        self.current_question = ""

    def finish(self) -> list[Question]:
        """Flush and return everything reconstructed so far."""
        self.flush()
        return list(self.questions)


def reconstruct_questions(raw_text: str) -> list[Question]:
    """Rebuild questions from unstructured response text (may be empty)."""
    reconstructor = QuestionLineReconstructor()
    for line in raw_text.splitlines():
        reconstructor.feed(line)
    return reconstructor.finish()


def _strip_list_marker(line: str) -> str:
    line = NUMBERED_MARKER_PATTERN.sub("", line, count=1)
    return BULLET_MARKER_PATTERN.sub("", line, count=1).strip()
