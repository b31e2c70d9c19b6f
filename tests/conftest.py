from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest

import config

PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="

UPSTREAM_URL = "https://ai.gateway.test/v1/chat/completions"


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeOpenAI:
    """Stands in for openai.OpenAI: only chat.completions.create is used."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.completions.calls


def upstream_response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", UPSTREAM_URL), json={"error": "nope"})


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv(config.API_KEY_ENV, "test-key-123")
    return "test-key-123"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv(config.API_KEY_ENV, raising=False)
