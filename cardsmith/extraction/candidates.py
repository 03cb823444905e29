"""
Candidate Locator.

Produces the substrings of a response that might hold the JSON array, in a
fixed priority order of decreasing confidence:

1. DIRECT  - the whole text, for models that obey "output only JSON"
2. BRACKET - the first `[ {...} ]` span embedded in prose
3. FENCED  - each ``` fenced block, in order of appearance

The bracket pattern is non-greedy and single-match: it stops at the first
`}` followed by `]`, so nested arrays of objects inside free text can
misfire. Such candidates simply fail to decode and the search moves on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class CandidateStrategy(str, Enum):
    """Heuristic that produced a candidate, in priority order."""

    DIRECT = "direct"
    BRACKET = "bracket"
    FENCED = "fenced"


@dataclass(frozen=True)
class Candidate:
    """A substring believed to encode structured data."""

    text: str
    strategy: CandidateStrategy


BRACKET_ARRAY_PATTERN = re.compile(r"\[\s*\{.*?\}\s*\]", re.DOTALL)

# ```json\n...\n```  or  ```\n...```  (language tag optional)
FENCED_BLOCK_PATTERN = re.compile(r"```[ \t]*(?:[\w+.-]+)?[ \t]*\r?\n?(.*?)```", re.DOTALL)


def locate_candidates(raw_text: str) -> list[Candidate]:
    """
    Build the ordered candidate list for a response.

    Args:
        raw_text: Unwrapped assistant text (may be empty)

    Returns:
        Candidates in priority order; texts already offered by a
        higher-priority strategy are not repeated
    """
    candidates: list[Candidate] = []
    seen: set[str] = set()

    def offer(text: str, strategy: CandidateStrategy) -> None:
        if text in seen:
            return
        seen.add(text)
        candidates.append(Candidate(text=text, strategy=strategy))

    offer(raw_text, CandidateStrategy.DIRECT)

    match = BRACKET_ARRAY_PATTERN.search(raw_text)
    if match:
        offer(match.group(0), CandidateStrategy.BRACKET)

    for block in find_fenced_blocks(raw_text):
        offer(block, CandidateStrategy.FENCED)

    return candidates


def find_fenced_blocks(raw_text: str) -> list[str]:
    """Contents of every fenced code block, stripped, in order."""
    return [m.group(1).strip() for m in FENCED_BLOCK_PATTERN.finditer(raw_text)]
