"""Tests for FastAPI endpoints."""
import json

import pytest
from fastapi.testclient import TestClient

from app.config import CoachSettings
from app.main import create_app
from app.services.coach_service import CoachService


@pytest.fixture
def client(offline_settings):
    """Create a test client for an app without any LLM key."""
    return TestClient(create_app(offline_settings))


class _FailingCompletions:
    def create(self, **_kwargs):
        raise TimeoutError("upstream timed out")


class TestAPI:
    """Test suite for API endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Vocab Coach API"
        assert "version" in data

    def test_health_reports_llm_state(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "llm_configured": False}

    def test_offline_sentence_correct(self, client):
        payload = {
            "task": "sentence",
            "target": "junk food",
            "user_input": "I avoid eating junk food every day",
        }
        response = client.post("/api/coach", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["verdict"] == "correct"
        assert data["explanation"] == ""

    def test_offline_name_incorrect_with_camel_case_field(self, client):
        payload = {"task": "name", "target": "junk food", "userInput": "snack", "alternatives": ["junk-food"]}
        response = client.post("/api/coach", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["verdict"] == "incorrect"
        assert "junk food" not in data["assistant"]
        assert data["explanation"]

    def test_malformed_alternatives_are_treated_as_empty(self, client):
        payload = {"task": "name", "target": "diet", "user_input": "Diet", "alternatives": "nope"}
        response = client.post("/api/coach", json=payload)
        assert response.status_code == 200
        assert response.json()["verdict"] == "correct"

    def test_missing_fields_returns_400(self, client):
        response = client.post("/api/coach", json={"task": "name", "target": "diet"})
        assert response.status_code == 400
        assert response.json() == {
            "assistant": "Missing task/target/user_input.",
            "verdict": "unsure",
            "explanation": "",
        }

    def test_unknown_task_returns_422(self, client):
        response = client.post(
            "/api/coach",
            json={"task": "spell", "target": "diet", "user_input": "diet"},
        )
        assert response.status_code == 422

    def test_get_not_allowed(self, client):
        response = client.get("/api/coach")
        assert response.status_code == 405

    def test_general_mode_offline(self, client):
        response = client.post("/api/coach", json={"mode": "general", "user_input": "hello"})
        assert response.status_code == 200
        assert response.json()["verdict"] == "chat"

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/coach",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert response.headers["access-control-max-age"] == "86400"

    def test_cors_restricted_origin(self):
        settings = CoachSettings(allowed_origin="https://coach.example.com")
        restricted = TestClient(create_app(settings))
        response = restricted.post(
            "/api/coach",
            json={"task": "name", "target": "diet", "user_input": "diet"},
            headers={"Origin": "https://coach.example.com"},
        )
        assert response.headers["access-control-allow-origin"] == "https://coach.example.com"

    def test_remote_failure_falls_back_to_offline(self, monkeypatch):
        chat = type("Chat", (), {"completions": _FailingCompletions()})()
        monkeypatch.setattr(
            "app.analyzers.llm_coach.OpenAI",
            lambda api_key: type("DummyClient", (), {"chat": chat})(),
        )
        client = TestClient(create_app(CoachSettings(openai_api_key="test-key")))

        response = client.post(
            "/api/coach",
            json={"task": "name", "target": "diet", "user_input": "Diet"},
        )

        assert response.status_code == 200
        assert response.json()["verdict"] == "correct"

    def test_remote_success(self, monkeypatch):
        reply = json.dumps({"assistant": "Nice, “diet” fits.", "verdict": "correct", "explanation": ""})

        class Completions:
            def create(self, **_kwargs):
                message = type("Message", (), {"content": reply})()
                return type("Response", (), {"choices": [type("Choice", (), {"message": message})()]})()

        chat = type("Chat", (), {"completions": Completions()})()
        monkeypatch.setattr(
            "app.analyzers.llm_coach.OpenAI",
            lambda api_key: type("DummyClient", (), {"chat": chat})(),
        )
        client = TestClient(create_app(CoachSettings(openai_api_key="test-key")))

        response = client.post(
            "/api/coach",
            json={"task": "name", "target": "diet", "user_input": "diet"},
        )

        assert response.status_code == 200
        assert response.json()["assistant"] == "Nice, “diet” fits."

    def test_unexpected_error_returns_500(self, offline_settings):
        class BrokenService(CoachService):
            def respond(self, request):
                raise KeyError("bug")

        client = TestClient(create_app(offline_settings, BrokenService(offline_settings)))
        response = client.post(
            "/api/coach",
            json={"task": "name", "target": "diet", "user_input": "diet"},
        )

        assert response.status_code == 500
        data = response.json()
        assert data["verdict"] == "unsure"
        assert data["explanation"] == "Server error."
