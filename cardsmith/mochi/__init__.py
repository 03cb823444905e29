"""Mochi Cards export."""

from cardsmith.mochi.mochi_client import (
    FALLBACK_DECKS,
    MochiCard,
    MochiClient,
    UploadResult,
    UploadSummary,
    build_mochi_card,
    format_card_content,
)

__all__ = [
    "MochiClient",
    "MochiCard",
    "UploadResult",
    "UploadSummary",
    "build_mochi_card",
    "format_card_content",
    "FALLBACK_DECKS",
]
