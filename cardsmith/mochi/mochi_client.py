"""
Mochi Cards client for cardsmith.

Provides an HTTP wrapper around the Mochi API for:
- Listing active decks (name -> id) to offer as deck categories
- Uploading generated cards, one request per card

Hardening:
- Deck listing never fails: any error falls back to a single "General" deck
- Per-card upload errors are recorded in the summary instead of raised
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable

import httpx
from loguru import logger

from cardsmith.exceptions import MissingAPIKeyError
from cardsmith.extraction import DEFAULT_CATEGORY, Card
from config import get_settings

FALLBACK_DECKS = {DEFAULT_CATEGORY: "general"}
CARD_SIDE_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class MochiCard:
    """Card payload in Mochi's format."""

    content: str
    deck_id: str

    def to_payload(self) -> dict[str, str]:
        return {"content": self.content, "deck-id": self.deck_id}


@dataclass
class UploadResult:
    """Outcome of uploading one card."""

    success: bool
    id: str | None = None
    error: str | None = None
    status: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.success:
            data["id"] = self.id
        else:
            data["error"] = self.error
            if self.status is not None:
                data["status"] = self.status
        return data


@dataclass
class UploadSummary:
    """Outcome of uploading a batch of cards, results in card order."""

    results: list[UploadResult] = field(default_factory=list)

    @property
    def total_cards(self) -> int:
        return len(self.results)

    @property
    def total_success(self) -> int:
        return sum(1 for r in self.results if r.success)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "results": [r.to_dict() for r in self.results],
            "totalSuccess": self.total_success,
            "totalCards": self.total_cards,
        }


def format_card_content(card: Card) -> str:
    """Mochi markdown content: front and back separated by a rule."""
    return f"{card.front}{CARD_SIDE_SEPARATOR}{card.back}"


def clean_deck_id(deck_id: str) -> str:
    """Strip the [[ ]] wrapper Mochi sometimes puts around ids."""
    return deck_id.replace("[[", "").replace("]]", "")


def build_mochi_card(card: Card, deck_ids: dict[str, str]) -> MochiCard:
    """
    Convert a Card to a MochiCard.

    The deck id is looked up by the card's deck name, then "General", then
    the first known deck.
    """
    deck_id = deck_ids.get(card.deck) or deck_ids.get(DEFAULT_CATEGORY)
    if deck_id is None:
        deck_id = next(iter(deck_ids.values()), FALLBACK_DECKS[DEFAULT_CATEGORY])
    return MochiCard(content=format_card_content(card), deck_id=deck_id)


class MochiClient:
    """
    Best-effort wrapper around the Mochi API.

    Mochi uses HTTP Basic auth with the API key as username and an empty
    password.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the Mochi client.

        Args:
            api_key: Mochi API key (default from config)
            base_url: Mochi API base URL (default from config)
            timeout: Per-request timeout in seconds
            http_client: Pre-built httpx client (tests, connection reuse)

        Raises:
            MissingAPIKeyError: If no key is supplied or configured
        """
        settings = get_settings()
        self.api_key = api_key or settings.mochi_api_key
        if not self.api_key:
            raise MissingAPIKeyError("No Mochi API key provided. Please add your API key in settings.")
        self.base_url = (base_url or settings.mochi_api_url).rstrip("/")
        self.timeout = timeout or settings.mochi_timeout_seconds
        self.client = http_client or httpx.Client()
        self.auth = httpx.BasicAuth(self.api_key, "")

        logger.debug("Initialized Mochi client: url={}, timeout={}s", self.base_url, self.timeout)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> MochiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ========================================
    # Decks
    # ========================================

    def list_decks(self) -> dict[str, str]:
        """
        Fetch active decks as {name: id}.

        Trashed and archived decks are skipped. On any error or unexpected
        response shape, returns {"General": "general"}.
        """
        try:
            response = self.client.get(
                f"{self.base_url}/decks/",
                auth=self.auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning("Mochi API request timed out. Using fallback decks.")
            return dict(FALLBACK_DECKS)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error connecting to Mochi: {}. Using fallback decks.", e)
            return dict(FALLBACK_DECKS)

        docs = data.get("docs") if isinstance(data, dict) else None
        if not isinstance(docs, list):
            logger.warning("Unexpected Mochi deck response format, using fallback deck")
            return dict(FALLBACK_DECKS)

        decks = {}
        for deck in docs:
            if not isinstance(deck, dict) or deck.get("trashed?") or deck.get("archived?"):
                continue
            if "name" not in deck or "id" not in deck:
                continue
            decks[deck["name"]] = clean_deck_id(str(deck["id"]))

        logger.info("Loaded {} active decks out of {} total from Mochi", len(decks), len(docs))
        return decks or dict(FALLBACK_DECKS)

    # ========================================
    # Cards
    # ========================================

    def upload_card(self, card: MochiCard) -> UploadResult:
        """Upload one card; failures are returned, not raised."""
        logger.debug("Uploading card to Mochi: content={!r}, deck-id={}", card.content[:20], card.deck_id)
        try:
            response = self.client.post(
                f"{self.base_url}/cards/",
                json=card.to_payload(),
                auth=self.auth,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            return UploadResult(success=False, error="Upload timeout. Try again.")
        except httpx.RequestError as e:
            return UploadResult(success=False, error=f"No response received from Mochi API: {e}")

        if response.is_error:
            return UploadResult(
                success=False,
                error=f"Mochi API Error: {response.text}",
                status=response.status_code,
            )

        try:
            card_id = response.json().get("id") or "unknown"
        except (ValueError, AttributeError):
            card_id = "unknown"
        return UploadResult(success=True, id=card_id)

    def upload_cards(self, cards: Iterable[MochiCard], max_workers: int = 1) -> UploadSummary:
        """
        Upload cards serially (max_workers=1) or in parallel.

        Results keep the order of the input cards.
        """
        cards = list(cards)
        logger.info("Starting Mochi upload of {} cards", len(cards))

        if max_workers <= 1 or len(cards) <= 1:
            results = [self.upload_card(card) for card in cards]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                results = list(pool.map(self.upload_card, cards))

        summary = UploadSummary(results=results)
        logger.info("Uploaded {}/{} cards to Mochi", summary.total_success, summary.total_cards)
        return summary
