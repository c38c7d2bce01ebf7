"""Shared pytest fixtures for GeminiEngine tests."""

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from geminiengine.models.config import BackoffMode, ClientOptions, RetryConfig
from geminiengine.models.events import RetryEvent, RetryEventKind
from geminiengine.services.api_client import GeminiApiClient
from geminiengine.services.dispatcher import RequestDispatcher
from geminiengine.services.retry_service import RetryExecutor

BASE_URL = "https://api.example.com/v1beta/models/"


class ScriptedTransport:
    """
    httpx handler replaying a fixed script of outcomes.

    Each step is either ``(status, body)`` or an exception to raise. The last
    step repeats once the script runs out.
    """

    def __init__(self, *steps: Any):
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps[min(len(self.requests), len(self.steps)) - 1]
        if isinstance(step, Exception):
            raise step
        status, body = step
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def json_body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


class RecordingObserver:
    """Observer that keeps every event it receives."""

    def __init__(self):
        self.events: list[RetryEvent] = []

    def on_event(self, event: RetryEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[RetryEventKind]:
        return [event.kind for event in self.events]

    def of_kind(self, kind: RetryEventKind) -> list[RetryEvent]:
        return [event for event in self.events if event.kind == kind]


def fast_retry(max_attempts: int = 3, **overrides: Any) -> RetryConfig:
    """Retry policy with millisecond delays for tests."""
    values: dict[str, Any] = {
        "max_attempts": max_attempts,
        "initial_delay": 0.001,
        "backoff_mode": BackoffMode.FIXED,
        "jitter_enabled": False,
    }
    values.update(overrides)
    return RetryConfig(**values)


def make_options(**overrides: Any) -> ClientOptions:
    values: dict[str, Any] = {
        "api_key": "test-key",
        "base_url": BASE_URL,
        "retry": fast_retry(),
    }
    values.update(overrides)
    return ClientOptions(**values)


@pytest.fixture
def options():
    """Fixture for client options pointing at a fake base URL."""
    return make_options()


@pytest.fixture
def observer():
    """Fixture for an event-recording observer."""
    return RecordingObserver()


@pytest_asyncio.fixture
async def mock_http_client():
    """Factory for mock-transport HTTP clients, closed after the test."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def make_dispatcher(mock_http_client):
    """Factory fixture building a RequestDispatcher over a mock transport."""

    def _make(transport, **options: Any) -> RequestDispatcher:
        return RequestDispatcher(make_options(**options), mock_http_client(transport))

    return _make


@pytest.fixture
def make_executor(mock_http_client):
    """Factory fixture building a RetryExecutor over a mock transport."""

    def _make(transport, observer: RecordingObserver | None = None, **options: Any):
        client_options = make_options(**options)
        http_client = mock_http_client(transport)
        dispatcher = RequestDispatcher(client_options, http_client)
        executor = RetryExecutor(
            dispatcher,
            config=client_options.retry,
            observers=[observer] if observer is not None else [],
        )
        return executor, http_client

    return _make


@pytest.fixture
def make_client(mock_http_client):
    """Factory fixture building a GeminiApiClient over a ScriptedTransport."""

    def _make(transport: ScriptedTransport, observers=None, **option_overrides: Any) -> GeminiApiClient:
        http_client = mock_http_client(transport)
        client = GeminiApiClient(
            make_options(**option_overrides),
            http_client=http_client,
            observers=observers if observers is not None else [],
        )
        return client

    return _make


def error_envelope(code: int, message: str | None, status: str = "INVALID_ARGUMENT", details=None) -> dict:
    """Build an API error envelope body."""
    error: dict[str, Any] = {"code": code, "status": status}
    if message is not None:
        error["message"] = message
    if details is not None:
        error["details"] = details
    return {"error": error}
