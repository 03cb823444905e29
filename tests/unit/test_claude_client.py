"""
Unit tests for the Claude client.

HTTP is faked by replacing the httpx client's post method.
"""

import pytest
from httpx import ConnectError, ReadTimeout, Request, Response

from cardsmith.exceptions import ClaudeAPIError, ClaudeTimeoutError, MissingAPIKeyError
from cardsmith.generation.claude_client import ClaudeClient, validate_anthropic_api_key

VALID_KEY = "sk-ant-REDACTED"


@pytest.fixture
def client():
    """Claude client with a user-supplied key."""
    client = ClaudeClient(api_key=VALID_KEY, base_url="https://claude.test/v1/messages")
    yield client
    client.close()


def _responder(status: int, calls: list, **kwargs):
    def mock_post(url, **post_kwargs):
        calls.append((url, post_kwargs))
        return Response(status, request=Request("POST", url), **kwargs)

    return mock_post


class TestApiKeys:
    """Tests for key validation and resolution."""

    @pytest.mark.parametrize("key,valid", [
        (VALID_KEY, True),
        ("sk-ant-short", False),
        ("sk-openai-abcdefghijklmnopqrstuv", False),
        ("", False),
        (None, False),
    ])
    def test_validate_anthropic_api_key(self, key, valid):
        assert validate_anthropic_api_key(key) is valid

    def test_configured_key_takes_precedence(self):
        assert ClaudeClient.resolve_api_key("user-key", "server-key") == "server-key"

    def test_user_key_used_without_configured_key(self):
        assert ClaudeClient.resolve_api_key("user-key", None) == "user-key"

    def test_missing_key_raises(self):
        with pytest.raises(MissingAPIKeyError):
            ClaudeClient.resolve_api_key(None, None)

    def test_client_reads_configured_key(self, monkeypatch):
        from config import get_settings

        monkeypatch.setenv("ANTHROPIC_API_KEY", "server-key")
        get_settings.cache_clear()
        client = ClaudeClient(api_key="user-key")
        assert client.api_key == "server-key"
        client.close()


class TestCreateMessage:
    """Tests for create_message."""

    def test_payload_and_headers(self, client, monkeypatch, make_envelope):
        calls = []
        envelope = make_envelope("[]")
        monkeypatch.setattr(client.client, "post", _responder(200, calls, json=envelope))

        result = client.create_message("system prompt", "user prompt", max_tokens=123, timeout=7)

        assert result == envelope
        url, kwargs = calls[0]
        assert url == "https://claude.test/v1/messages"
        assert kwargs["json"] == {
            "model": client.model,
            "system": "system prompt",
            "messages": [{"role": "user", "content": "user prompt"}],
            "max_tokens": 123,
        }
        assert kwargs["headers"]["x-api-key"] == VALID_KEY
        assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
        assert kwargs["timeout"] == 7

    def test_default_timeout(self, client, monkeypatch):
        calls = []
        monkeypatch.setattr(client.client, "post", _responder(200, calls, json={}))
        client.create_message("s", "u")
        assert calls[0][1]["timeout"] == 30.0

    def test_error_status_uses_provider_message(self, client, monkeypatch):
        body = {"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}}
        monkeypatch.setattr(client.client, "post", _responder(401, [], json=body))

        with pytest.raises(ClaudeAPIError) as exc_info:
            client.create_message("s", "u")

        assert exc_info.value.status_code == 401
        assert "invalid x-api-key" in str(exc_info.value)

    def test_error_status_with_text_body(self, client, monkeypatch):
        monkeypatch.setattr(client.client, "post", _responder(502, [], text="Bad Gateway"))

        with pytest.raises(ClaudeAPIError, match="Bad Gateway"):
            client.create_message("s", "u")

    def test_timeout(self, client, monkeypatch):
        def mock_post(url, **kwargs):
            raise ReadTimeout("timed out")

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ClaudeTimeoutError, match="timed out after 30 seconds"):
            client.create_message("s", "u")

    def test_connection_error(self, client, monkeypatch):
        def mock_post(url, **kwargs):
            raise ConnectError("refused")

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ClaudeAPIError, match="No response received"):
            client.create_message("s", "u")
