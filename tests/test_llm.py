"""Unit tests for the completion client module."""
import asyncio

import httpx
import pytest

from conftest import chat_completion_body
from relaychat.chat import Message
from relaychat.llm import (
    CompletionClient,
    CompletionError,
    ErrorKind,
    GenerationParams,
    OpenAICompletionClient,
    build_payload,
)
from relaychat.llm.errors import EMPTY_REPLY_MESSAGE, GENERIC_REJECTION_MESSAGE

HISTORY = (Message.user("Hello"),)


class TestCompletionClientInterface:
    """Tests for the abstract CompletionClient interface."""

    def test_client_is_abstract(self):
        """Test that CompletionClient cannot be instantiated directly."""
        with pytest.raises(TypeError):
            CompletionClient()  # type: ignore


class TestPayload:
    """Tests for request payload construction."""

    def test_payload_strips_ids_and_timestamps(self):
        """Test that only role and content are sent per message."""
        history = [Message.user("Hello"), Message.assistant("Hi there!"), Message.user("Bye")]

        payload = build_payload(history, GenerationParams())

        assert payload == {
            "model": "gpt-3.5-turbo",
            "messages": [
                {"role": "user", "content": "Hello"},
                {"role": "assistant", "content": "Hi there!"},
                {"role": "user", "content": "Bye"},
            ],
            "max_tokens": 1000,
            "temperature": 0.7,
        }

    def test_generation_params_validated(self):
        """Test that out-of-range temperature is rejected."""
        with pytest.raises(ValueError):
            GenerationParams(temperature=3.0)


class TestOpenAICompletionClient:
    """Tests for OpenAICompletionClient against a fake endpoint."""

    async def test_success_returns_first_candidate(self, mock_service):
        """Test the happy path and the exact request sent."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("Hi there!")))
        client = service.client()

        reply = await client.complete(HISTORY, "sk-test")

        assert reply == "Hi there!"
        assert len(service.requests) == 1
        request = service.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert service.bodies[0] == {
            "model": "gpt-3.5-turbo",
            "messages": [{"role": "user", "content": "Hello"}],
            "max_tokens": 1000,
            "temperature": 0.7,
        }
        await client.close()

    async def test_custom_base_url_and_model(self, mock_service):
        """Test that base_url and model options reach the request."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("ok")))
        client = service.client(base_url="http://localhost:1234/v1", model="local-model")

        await client.complete(HISTORY, "sk-test")

        assert str(service.requests[0].url) == "http://localhost:1234/v1/chat/completions"
        assert service.bodies[0]["model"] == "local-model"
        await client.close()

    async def test_rejected_with_service_message(self, mock_service):
        """Test that a non-success status surfaces error.message."""
        service = mock_service(
            lambda request: httpx.Response(401, json={"error": {"message": "invalid_api_key"}})
        )
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-bad")

        assert exc_info.value.kind == ErrorKind.REJECTED
        assert exc_info.value.message == "invalid_api_key"
        await client.close()

    async def test_rejected_with_unparseable_body(self, mock_service):
        """Test that an unparseable error body yields the generic message."""
        service = mock_service(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-test")

        assert exc_info.value.kind == ErrorKind.REJECTED
        assert exc_info.value.message == GENERIC_REJECTION_MESSAGE
        await client.close()

    async def test_server_error_is_not_retried(self, mock_service):
        """Test that exactly one request is issued even on 5xx."""
        service = mock_service(
            lambda request: httpx.Response(500, json={"error": {"message": "server exploded"}})
        )
        client = service.client()

        with pytest.raises(CompletionError):
            await client.complete(HISTORY, "sk-test")

        assert len(service.requests) == 1
        await client.close()

    async def test_transport_failure(self, mock_service):
        """Test that a connection failure is classified as transport."""
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = mock_service(refuse)
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-test")

        assert exc_info.value.kind == ErrorKind.TRANSPORT
        assert exc_info.value.message
        assert len(service.requests) == 1
        await client.close()

    async def test_empty_choices(self, mock_service):
        """Test that a success body without candidates is an empty reply."""
        body = chat_completion_body("unused")
        body["choices"] = []
        service = mock_service(lambda request: httpx.Response(200, json=body))
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-test")

        assert exc_info.value.kind == ErrorKind.EMPTY_REPLY
        assert exc_info.value.message == EMPTY_REPLY_MESSAGE
        await client.close()

    async def test_undecodable_success_body(self, mock_service):
        """Test that a 200 JSON response with a broken body is an empty reply."""
        service = mock_service(
            lambda request: httpx.Response(
                200, content=b"{not json", headers={"content-type": "application/json"}
            )
        )
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-test")

        assert exc_info.value.kind == ErrorKind.EMPTY_REPLY
        assert exc_info.value.message == EMPTY_REPLY_MESSAGE
        assert not client.is_busy
        await client.close()

    @pytest.mark.parametrize("content", [None, ""])
    async def test_missing_content(self, mock_service, content):
        """Test that null or empty content is an empty reply."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body(content)))
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, "sk-test")

        assert exc_info.value.kind == ErrorKind.EMPTY_REPLY
        await client.close()

    @pytest.mark.parametrize("credential", ["", "   "])
    async def test_blank_credential_short_circuits(self, mock_service, credential):
        """Test that no request is made without a credential."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("x")))
        client = service.client()

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(HISTORY, credential)

        assert exc_info.value.kind == ErrorKind.NO_CREDENTIAL
        assert service.requests == []

    async def test_credential_change_rekeys_client(self, mock_service):
        """Test that each call authenticates with its own credential."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("ok")))
        client = service.client()

        await client.complete(HISTORY, "sk-first")
        await client.complete(HISTORY, "sk-second")

        assert [r.headers["Authorization"] for r in service.requests] == [
            "Bearer sk-first",
            "Bearer sk-second",
        ]
        await client.close()

    async def test_busy_flag_tracks_outstanding_call(self):
        """Test that is_busy is set only while a call is in flight."""
        release = asyncio.Event()

        async def slow(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=chat_completion_body("done"))

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(slow))
        client = OpenAICompletionClient(http_client=http_client)
        assert not client.is_busy

        task = asyncio.create_task(client.complete(HISTORY, "sk-test"))
        await asyncio.sleep(0.01)
        assert client.is_busy

        release.set()
        assert await task == "done"
        assert not client.is_busy
        await client.close()

    async def test_busy_flag_cleared_on_failure(self, mock_service):
        """Test that is_busy resets when the call fails."""
        service = mock_service(lambda request: httpx.Response(400, json={"error": {"message": "bad"}}))
        client = service.client()

        with pytest.raises(CompletionError):
            await client.complete(HISTORY, "sk-test")

        assert not client.is_busy
        await client.close()

    async def test_debug_callback_receives_events(self, mock_service):
        """Test that request logging goes through the debug callback."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("ok")))
        client = service.client()
        events: list[tuple[str, str, str]] = []
        client.set_debug_callback(lambda level, component, message: events.append((level, component, message)))

        await client.complete(HISTORY, "sk-secret")

        assert events
        assert all(component == "LLM" for _, component, _ in events)
        assert not any("sk-secret" in message for _, _, message in events)
        await client.close()

    async def test_async_context_manager_closes(self, mock_service):
        """Test that leaving the context closes the client."""
        service = mock_service(lambda request: httpx.Response(200, json=chat_completion_body("ok")))

        async with service.client() as client:
            assert await client.complete(HISTORY, "sk-test") == "ok"

        assert client._client is None

    @pytest.mark.integration
    async def test_real_api(self, api_keys):
        """Integration test: one round trip against the real API."""
        if not api_keys["openai"]:
            pytest.skip("OPENAI_API_KEY not set")

        async with OpenAICompletionClient() as client:
            reply = await client.complete([Message.user("Say hello in one word.")], api_keys["openai"])

        assert isinstance(reply, str)
        assert reply
