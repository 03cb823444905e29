"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep real API keys and .env values out of tests."""
    for var in ("ANTHROPIC_API_KEY", "MOCHI_API_KEY", "LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("MOCHI_API_KEY", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def text_envelope(*texts: str) -> dict:
    """Anthropic Messages response with one text block per argument."""
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": t} for t in texts],
    }


@pytest.fixture
def make_envelope():
    """Factory for Messages API response envelopes."""
    return text_envelope


@pytest.fixture
def sample_cards_json():
    """Well-formed card array as the model should return it."""
    return (
        '[{"front": "What does ATP synthase produce?", "back": "ATP from ADP and phosphate.", "deck": "Biology"},'
        ' {"front": "Where is ATP synthase located?", "back": "In the inner mitochondrial membrane."}]'
    )


@pytest.fixture
def sample_questions_json():
    """Well-formed question array as the model should return it."""
    return (
        '[{"question": "Why did the Roman Republic fall?", "topic": "History"},'
        ' {"question": "How do institutions constrain ambition?"}]'
    )
