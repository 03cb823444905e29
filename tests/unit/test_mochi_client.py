"""
Unit tests for the Mochi client.

Tests deck listing, card formatting and upload bookkeeping
WITHOUT contacting Mochi.
"""

import pytest
from httpx import ConnectError, ReadTimeout, Request, Response

from cardsmith.exceptions import MissingAPIKeyError
from cardsmith.extraction import Card
from cardsmith.mochi.mochi_client import (
    FALLBACK_DECKS,
    MochiCard,
    MochiClient,
    UploadResult,
    UploadSummary,
    build_mochi_card,
    clean_deck_id,
    format_card_content,
)


@pytest.fixture
def client():
    client = MochiClient(api_key="mochi-key", base_url="https://mochi.test/api/")
    yield client
    client.close()


def _get_returning(status: int, **kwargs):
    def mock_get(url, **get_kwargs):
        return Response(status, request=Request("GET", url), **kwargs)

    return mock_get


class TestMochiClientInit:
    """Tests for MochiClient initialization."""

    def test_missing_key_raises(self):
        with pytest.raises(MissingAPIKeyError):
            MochiClient()

    def test_key_from_settings(self, monkeypatch):
        from config import get_settings

        monkeypatch.setenv("MOCHI_API_KEY", "configured")
        get_settings.cache_clear()
        client = MochiClient()
        assert client.api_key == "configured"
        assert client.base_url == "https://app.mochi.cards/api"
        assert client.timeout == 5.0
        client.close()

    def test_trailing_slash_trimmed(self, client):
        assert client.base_url == "https://mochi.test/api"


class TestListDecks:
    """Tests for list_decks."""

    def test_active_decks_only(self, client, monkeypatch):
        docs = {
            "docs": [
                {"id": "[[abc]]", "name": "Biology"},
                {"id": "def", "name": "Old", "archived?": True},
                {"id": "ghi", "name": "Deleted", "trashed?": True},
                {"id": "jkl", "name": "Math"},
            ]
        }
        monkeypatch.setattr(client.client, "get", _get_returning(200, json=docs))

        assert client.list_decks() == {"Biology": "abc", "Math": "jkl"}

    def test_basic_auth_sent(self, client, monkeypatch):
        captured = {}

        def mock_get(url, **kwargs):
            captured.update(kwargs, url=url)
            return Response(200, json={"docs": []}, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)
        client.list_decks()

        assert captured["url"] == "https://mochi.test/api/decks/"
        request = Request("GET", captured["url"])
        auth_flow = captured["auth"].auth_flow(request)
        assert next(auth_flow).headers["Authorization"].startswith("Basic ")

    def test_unexpected_shape_falls_back(self, client, monkeypatch):
        monkeypatch.setattr(client.client, "get", _get_returning(200, json={"decks": []}))
        assert client.list_decks() == FALLBACK_DECKS

    def test_http_error_falls_back(self, client, monkeypatch):
        monkeypatch.setattr(client.client, "get", _get_returning(401, json={"error": "nope"}))
        assert client.list_decks() == FALLBACK_DECKS

    def test_timeout_falls_back(self, client, monkeypatch):
        def mock_get(url, **kwargs):
            raise ReadTimeout("slow")

        monkeypatch.setattr(client.client, "get", mock_get)
        assert client.list_decks() == {"General": "general"}


class TestCardFormatting:
    """Tests for MochiCard construction."""

    def test_content_format(self):
        assert format_card_content(Card(front="Q", back="A")) == "Q\n---\nA"

    def test_clean_deck_id(self):
        assert clean_deck_id("[[xyz]]") == "xyz"

    def test_deck_matched_by_name(self):
        card = build_mochi_card(Card(front="Q", back="A", deck="Bio"), {"Bio": "b1", "General": "g1"})
        assert card == MochiCard(content="Q\n---\nA", deck_id="b1")

    def test_unknown_deck_uses_general(self):
        card = build_mochi_card(Card(front="Q", back="A", deck="Art"), {"Bio": "b1", "General": "g1"})
        assert card.deck_id == "g1"

    def test_unknown_deck_without_general_uses_first(self):
        card = build_mochi_card(Card(front="Q", back="A", deck="Art"), {"Bio": "b1"})
        assert card.deck_id == "b1"

    def test_payload_keys(self):
        assert MochiCard(content="c", deck_id="d").to_payload() == {"content": "c", "deck-id": "d"}


class TestUploads:
    """Tests for upload_card / upload_cards."""

    def test_successful_upload(self, client, monkeypatch):
        captured = {}

        def mock_post(url, **kwargs):
            captured.update(kwargs, url=url)
            return Response(200, json={"id": "card-1"}, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        result = client.upload_card(MochiCard(content="Q\n---\nA", deck_id="d1"))

        assert result == UploadResult(success=True, id="card-1")
        assert captured["url"] == "https://mochi.test/api/cards/"
        assert captured["json"] == {"content": "Q\n---\nA", "deck-id": "d1"}

    def test_http_error_recorded(self, client, monkeypatch):
        def mock_post(url, **kwargs):
            return Response(400, text="bad deck", request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        result = client.upload_card(MochiCard(content="c", deck_id="x"))

        assert result.success is False
        assert result.status == 400
        assert "bad deck" in result.error

    @pytest.mark.parametrize("exc,message", [
        (ReadTimeout("slow"), "Upload timeout. Try again."),
        (ConnectError("refused"), "No response received from Mochi API"),
    ])
    def test_transport_errors_recorded(self, client, monkeypatch, exc, message):
        def mock_post(url, **kwargs):
            raise exc

        monkeypatch.setattr(client.client, "post", mock_post)

        result = client.upload_card(MochiCard(content="c", deck_id="x"))

        assert result.success is False
        assert result.error.startswith(message)

    @pytest.mark.parametrize("workers", [1, 3])
    def test_upload_cards_keeps_order(self, client, monkeypatch, workers):
        def mock_post(url, json=None, **kwargs):
            if json["content"] == "bad":
                return Response(500, text="oops", request=Request("POST", url))
            return Response(200, json={"id": json["content"]}, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)
        cards = [MochiCard(content=c, deck_id="d") for c in ("one", "bad", "three", "four")]

        summary = client.upload_cards(cards, max_workers=workers)

        assert [r.id for r in summary.results] == ["one", None, "three", "four"]
        assert summary.total_success == 3
        assert summary.total_cards == 4

    def test_summary_to_dict(self):
        summary = UploadSummary(results=[
            UploadResult(success=True, id="a"),
            UploadResult(success=False, error="Mochi API Error: x", status=500),
        ])
        assert summary.to_dict() == {
            "success": True,
            "results": [
                {"success": True, "id": "a"},
                {"success": False, "error": "Mochi API Error: x", "status": 500},
            ],
            "totalSuccess": 1,
            "totalCards": 2,
        }
