"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

_PROVIDER_ENV_VARS = ("OPENAI_API_KEY", "CLAUDE_API_KEY", "LLM_PROVIDER", "OPENAI_MODEL")


@pytest.fixture(autouse=True)
def _isolate_provider_env(monkeypatch):
    """Keep real API keys from leaking into tests."""
    for name in _PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def offline_settings():
    """Settings without any API key."""
    from app.config import CoachSettings

    return CoachSettings()


@pytest.fixture
def online_settings():
    """Settings with a (fake) OpenAI key."""
    from app.config import CoachSettings

    return CoachSettings(openai_api_key="test-key")
