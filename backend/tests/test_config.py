"""Tests for settings loading."""
import pytest
from pydantic import ValidationError

from app.config import CoachSettings, load_settings


class TestLoadSettings:
    """Test suite for load_settings."""

    def test_defaults(self):
        settings = load_settings({})
        assert settings == CoachSettings()
        assert settings.llm_provider == "openai"
        assert settings.model == "gpt-4o-mini"
        assert settings.api_key is None
        assert settings.allowed_origin == "*"

    def test_reads_openai_values(self):
        settings = load_settings(
            {
                "OPENAI_API_KEY": "sk-test",
                "OPENAI_MODEL": "gpt-4.1-mini",
                "ALLOWED_ORIGIN": "https://coach.example.com",
                "LLM_TEMPERATURE": "0.2",
                "HISTORY_WINDOW": "4",
                "LOG_LEVEL": "debug",
            }
        )
        assert settings.api_key == "sk-test"
        assert settings.model == "gpt-4.1-mini"
        assert settings.allowed_origin == "https://coach.example.com"
        assert settings.temperature == 0.2
        assert settings.history_window == 4
        assert settings.log_level == "DEBUG"

    def test_claude_provider_uses_claude_key(self):
        settings = load_settings(
            {"LLM_PROVIDER": "Claude", "CLAUDE_API_KEY": "c-key", "OPENAI_API_KEY": "o-key"}
        )
        assert settings.llm_provider == "claude"
        assert settings.api_key == "c-key"
        assert settings.model == "claude-sonnet-4-5-20250929"

    def test_invalid_values_fall_back(self):
        settings = load_settings(
            {"LLM_PROVIDER": "gemini", "LLM_TEMPERATURE": "warm", "HISTORY_WINDOW": "many"}
        )
        assert settings.llm_provider == "openai"
        assert settings.temperature == 0.7
        assert settings.history_window == 6

    def test_empty_key_counts_as_missing(self):
        assert load_settings({"OPENAI_API_KEY": ""}).api_key is None

    def test_unknown_log_level_falls_back_to_info(self):
        assert load_settings({"LOG_LEVEL": "VERBOSE"}).log_level == "INFO"
        assert load_settings({"LOG_LEVEL": " warning "}).log_level == "WARNING"

    def test_app_starts_with_unknown_log_level(self):
        from fastapi.testclient import TestClient

        from app.main import create_app

        client = TestClient(create_app(load_settings({"LOG_LEVEL": "VERBOSE"})))
        assert client.get("/health").status_code == 200

    def test_settings_reject_unknown_log_level(self):
        with pytest.raises(ValidationError):
            CoachSettings(log_level="VERBOSE")
