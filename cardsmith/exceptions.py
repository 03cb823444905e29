"""Exception types raised by cardsmith's network and file collaborators.

The extraction pipeline itself never raises; these cover the Claude and
Mochi clients and the TSV importer.
"""

from __future__ import annotations


class CardsmithError(Exception):
    """Base class for cardsmith errors."""


class MissingAPIKeyError(CardsmithError):
    """Raised when no API key is configured or supplied."""


class ClaudeAPIError(CardsmithError):
    """Raised when the Anthropic API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ClaudeTimeoutError(ClaudeAPIError):
    """Raised when a Claude request exceeds its timeout."""


class TSVImportError(CardsmithError):
    """Raised when an Anki TSV file holds no usable cards."""
