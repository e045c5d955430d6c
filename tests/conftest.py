"""Pytest configuration and shared fixtures."""
import asyncio
import json
import os
from collections.abc import Callable, Sequence

import httpx
import pytest

from relaychat.chat import ConversationController, ConversationObserver, Message, RequestState
from relaychat.credentials import InMemoryCredentialStore
from relaychat.llm import CompletionClient, CompletionError, OpenAICompletionClient


class FakeCompletionClient(CompletionClient):
    """Scripted completion client.

    Each entry in `responses` is either a reply string or a CompletionError
    to raise. Records the history length seen by each call. When `gate` is
    set, calls wait for it before answering.
    """

    def __init__(self, responses: Sequence[str | CompletionError] = ()) -> None:
        super().__init__()
        self.responses = list(responses)
        self.calls: list[tuple[tuple[Message, ...], str]] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def _send(self, history: Sequence[Message], credential: str) -> str:
        self.calls.append((tuple(history), credential))
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.pop(0) if self.responses else "ok"
        if isinstance(response, CompletionError):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


class RecordingObserver(ConversationObserver):
    """Collects every notification for assertions."""

    def __init__(self) -> None:
        self.histories: list[tuple[Message, ...]] = []
        self.states: list[RequestState] = []
        self.errors: list[str] = []
        self.notices: list[str] = []
        self.credential_requests = 0

    def on_history_changed(self, history: tuple[Message, ...]) -> None:
        self.histories.append(history)

    def on_request_state_changed(self, state: RequestState) -> None:
        self.states.append(state)

    def on_error_occurred(self, message: str) -> None:
        self.errors.append(message)

    def on_credential_required(self) -> None:
        self.credential_requests += 1

    def on_notice(self, message: str) -> None:
        self.notices.append(message)


@pytest.fixture(scope="session", autouse=True)
def _isolated_environment(tmp_path_factory):
    """Keep local configuration out of tests."""
    with pytest.MonkeyPatch.context() as mp:
        for name in ("OPENAI_BASE_URL", "OPENAI_CHAT_MODEL"):
            mp.delenv(name, raising=False)
        mp.setenv(
            "RELAYCHAT_CREDENTIALS_PATH",
            str(tmp_path_factory.mktemp("home") / "credentials.json"),
        )
        yield


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"openai": os.getenv("OPENAI_API_KEY")}


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def credential_store():
    """Store that already holds a key."""
    return InMemoryCredentialStore("sk-test")


@pytest.fixture
def controller(credential_store, fake_client, observer):
    return ConversationController(credential_store, fake_client, observer)


def chat_completion_body(content: str | None, role: str = "assistant") -> dict:
    """Build a minimal Chat Completions success body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": role, "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class MockService:
    """Fake completion endpoint built on httpx.MockTransport.

    `handler` maps a request to a response (or raises a transport error).
    Every request is recorded together with its decoded JSON body.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(json.loads(request.content))
        return self.handler(request)

    def client(self, **kwargs) -> OpenAICompletionClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self._handle))
        return OpenAICompletionClient(http_client=http_client, **kwargs)


@pytest.fixture
def mock_service():
    """Factory for MockService instances."""
    return MockService
