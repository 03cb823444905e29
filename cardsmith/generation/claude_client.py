"""
Anthropic Messages API client for cardsmith.

Thin HTTP wrapper: builds the Messages payload, sends it with the configured
key and version headers, and maps transport failures onto ClaudeAPIError.
Parsing the response body is left to cardsmith.extraction.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from cardsmith.exceptions import ClaudeAPIError, ClaudeTimeoutError, MissingAPIKeyError
from config import get_settings

ANTHROPIC_KEY_PREFIX = "sk-ant-"


def validate_anthropic_api_key(key: str | None) -> bool:
    """Check that a key looks like an Anthropic API key."""
    return bool(key) and key.startswith(ANTHROPIC_KEY_PREFIX) and len(key) > 20


class ClaudeClient:
    """
    HTTP client for the Anthropic Messages API.

    A server-side key from settings takes precedence over a key supplied by
    the user.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        anthropic_version: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the Claude client.

        Args:
            api_key: User-supplied API key (used only if none is configured)
            base_url: Messages endpoint URL (default from config)
            model: Claude model name (default from config)
            anthropic_version: anthropic-version header (default from config)
            timeout: Default request timeout in seconds
            http_client: Pre-built httpx client (tests, connection reuse)
        """
        settings = get_settings()
        self.api_key = self.resolve_api_key(api_key, settings.anthropic_api_key)
        self.base_url = base_url or settings.anthropic_api_url
        self.model = model or settings.claude_model
        self.anthropic_version = anthropic_version or settings.anthropic_version
        self.timeout = timeout or settings.claude_timeout_seconds
        self.client = http_client or httpx.Client()

        logger.debug(
            "Initialized Claude client: url={}, model={}, timeout={}s",
            self.base_url,
            self.model,
            self.timeout,
        )

    @staticmethod
    def resolve_api_key(user_key: str | None, configured_key: str | None = None) -> str:
        """
        Pick the API key to use.

        Raises:
            MissingAPIKeyError: If neither a configured nor a user key exists
        """
        if configured_key:
            return configured_key
        if user_key:
            return user_key
        raise MissingAPIKeyError(
            "No API key available. Set ANTHROPIC_API_KEY or provide a Claude API key."
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> ClaudeClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def create_message(
        self,
        system: str,
        user: str,
        max_tokens: int = 4000,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """
        Send a single-turn Messages request.

        Args:
            system: System prompt
            user: User prompt
            max_tokens: Maximum tokens in the response
            timeout: Request timeout in seconds (default: client timeout)

        Returns:
            Decoded provider response envelope

        Raises:
            ClaudeTimeoutError: If the request times out
            ClaudeAPIError: On a non-2xx status or transport failure
        """
        timeout = timeout or self.timeout
        payload = {
            "model": self.model,
            "system": system,
            "messages": [{"role": "user", "content": user}],
            "max_tokens": max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.anthropic_version,
        }

        logger.debug(
            "Claude request: system={!r}, user={!r}, timeout={}s",
            system[:100],
            user[:100],
            timeout,
        )

        try:
            response = self.client.post(
                self.base_url,
                json=payload,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise ClaudeTimeoutError(
                f"Claude API request timed out after {timeout:g} seconds. "
                "Try again or use a smaller text selection."
            ) from e
        except httpx.RequestError as e:
            raise ClaudeAPIError(f"No response received from Claude API: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.error("Claude API error {}: {}", response.status_code, message)
            raise ClaudeAPIError(f"Claude API Error: {message}", status_code=response.status_code)

        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Best-effort error text from a failed Anthropic response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or "Could not parse error response"

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return "Unknown Claude API error"
