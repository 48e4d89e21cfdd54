"""Shared fixtures for all tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.core.config import Settings
from backend.main import create_app

FAKE_OPENAI_KEY = "sk-test-openai-0123456789"
FAKE_DEEPSEEK_KEY = "sk-test-deepseek-0123456789"
FAKE_GEMINI_KEY = "test-gemini-0123456789"


@pytest.fixture
def settings() -> Settings:
    """Settings with fake keys for every provider."""
    return Settings(
        openai_api_key=FAKE_OPENAI_KEY,
        deepseek_api_key=FAKE_DEEPSEEK_KEY,
        gemini_api_key=FAKE_GEMINI_KEY,
    )


@pytest.fixture
def fake_keys() -> list[str]:
    return [FAKE_OPENAI_KEY, FAKE_DEEPSEEK_KEY, FAKE_GEMINI_KEY]


@pytest.fixture
def empty_settings() -> Settings:
    """Settings with no credentials at all."""
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def unconfigured_client(empty_settings):
    with TestClient(create_app(empty_settings)) as c:
        yield c


@pytest.fixture
def completion_body() -> dict:
    """Minimal chat-completions success body."""
    return {
        "id": "chatcmpl-1",
        "choices": [
            {"message": {"role": "assistant", "content": "4"}, "finish_reason": "stop", "index": 0},
        ],
        "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
    }


@pytest.fixture
def make_response():
    """Factory for httpx.Response objects as a provider would return them."""
    def _make(status_code: int, json_body=None, text: str | None = None) -> httpx.Response:
        request = httpx.Request("POST", "https://provider.test/v1/chat/completions")
        if json_body is not None:
            return httpx.Response(status_code, json=json_body, request=request)
        return httpx.Response(status_code, text=text or "", request=request)
    return _make
