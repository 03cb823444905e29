"""Unwrap the assistant text from a provider response envelope."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

# Single-text shapes, checked in order when there is no content-block list
_SINGLE_TEXT_KEYS = ("content", "text", "completion")


def unwrap_response(response: Any) -> str:
    """
    Extract the raw assistant text from a provider response.

    Handles:
    - {"content": [{"type": "text", "text": ...}, ...]} (text blocks joined
      in order, no separator; non-text blocks ignored)
    - {"content": "..."}, {"text": "..."}, {"completion": "..."} or a bare string
    - anything else: the envelope serialized to JSON, which later stages
      will usually fail on

    Never raises.
    """
    if isinstance(response, str):
        return response

    if isinstance(response, dict):
        content = response.get("content")
        if isinstance(content, (list, tuple)):
            return "".join(_block_text(block) for block in content)

        for key in _SINGLE_TEXT_KEYS:
            value = response.get(key)
            if isinstance(value, str):
                return value

    logger.warning("Unexpected response format from provider: {}", type(response).__name__)
    return _serialize(response)


def _block_text(block: Any) -> str:
    if not isinstance(block, dict) or block.get("type") != "text":
        return ""
    text = block.get("text")
    if text is None:
        return ""
    return text if isinstance(text, str) else str(text)


def _serialize(response: Any) -> str:
    try:
        return json.dumps(response, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        # circular references
        return repr(response)
