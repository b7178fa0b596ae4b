"""Pytest configuration — project root importable, no real LLM calls."""

import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from kris_detector import reset_default_detectors  # noqa: E402


@pytest.fixture(autouse=True)
def _no_llm_credentials(monkeypatch):
    """Remove any real API key and start every test with fresh default detectors."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    reset_default_detectors()
    yield
    reset_default_detectors()


class FakeLLM:
    """A fake chat-completions endpoint backed by httpx.MockTransport.

    Every request is recorded; the reply content is produced by ``reply``,
    which may be a string, a dict (JSON-encoded as the message content), or
    a callable taking the prompt.
    """

    def __init__(self, reply="", status_code=200):
        self.reply = reply
        self.status_code = status_code
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    @property
    def prompts(self) -> list[str]:
        return [json.loads(r.content)["messages"][0]["content"] for r in self.requests]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom"})

        reply = self.reply
        if callable(reply):
            reply = reply(json.loads(request.content)["messages"][0]["content"])
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": reply}}]}
        )


@pytest.fixture
def fake_llm():
    """Factory: fake_llm(reply, status_code=200) -> FakeLLM."""
    return FakeLLM
