"""Pytest configuration and shared fixtures."""
import json

import httpx
import pytest

from insightchat.config import WidgetConfig
from insightchat.integrations.clipboard import Clipboard
from insightchat.session import ChatSession, MemorySurface


class RecordingClipboard(Clipboard):
    """Clipboard double that remembers what was written."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.writes: list[str] = []

    def write(self, text: str) -> bool:
        self.writes.append(text)
        return self.succeed


class RecordingTransport:
    """httpx mock transport handler that records requests."""

    def __init__(self, status_code: int = 200, payload=None, content: bytes | None = None, error: Exception | None = None):
        self.status_code = status_code
        self.payload = payload
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    def bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def clipboard():
    """Clipboard that accepts every write."""
    return RecordingClipboard()


@pytest.fixture
def fast_config():
    """Configuration without artificial delays."""
    return WidgetConfig(heuristic_delay=0.0, copy_reset_delay=0.05)


@pytest.fixture
def surface():
    return MemorySurface()


@pytest.fixture
def session(fast_config, surface, clipboard):
    """Session using the local heuristic replies."""
    return ChatSession(fast_config, surface=surface, clipboard=clipboard)


@pytest.fixture
def make_client():
    """Build an httpx.AsyncClient served by a RecordingTransport."""
    def _make(transport: RecordingTransport) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return _make


@pytest.fixture
def recording_transport():
    """Factory for RecordingTransport handlers."""
    return RecordingTransport
