from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx
import openai
from openai import AsyncOpenAI

from ..base import CompletionClient
from ..errors import (
    EMPTY_REPLY_MESSAGE,
    GENERIC_REJECTION_MESSAGE,
    CompletionError,
    ErrorKind,
)
from ..models import GenerationParams, build_payload

if TYPE_CHECKING:
    from ...chat.models import Message


def _service_message(body: object) -> str:
    """Extract `error.message` from an error body, best effort."""
    if isinstance(body, Mapping):
        error = body.get("error", body)
        if isinstance(error, Mapping):
            message = error.get("message")
            if isinstance(message, str) and message.strip():
                return message
    return GENERIC_REJECTION_MESSAGE


def _first_candidate_text(completion: Any) -> str | None:
    """Return choices[0].message.content, or None if it is missing or empty."""
    choices = getattr(completion, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content:
        return None
    return content


class OpenAICompletionClient(CompletionClient):
    """OpenAI Chat Completions client.

    Hidden design decisions:
    - OpenAI API client initialization (lazy, keyed by credential)
    - Message format conversion
    - Error classification
    - Authentication mechanism (Bearer key per call)

    SDK retries are disabled so every complete() issues exactly one request.
    """

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 1000,
        temperature: float = 0.7,
        base_url: str | None = None,
        organization: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the OpenAI client.

        Args:
            model: Model identifier sent with every request
            max_tokens: Output length cap
            temperature: Sampling temperature
            base_url: Optional custom API base URL (OpenAI-compatible servers)
            organization: Optional organization ID
            timeout: Request timeout in seconds; None waits for the transport
            http_client: Optional httpx client (used by tests to fake transport)
        """
        super().__init__()
        self._params = GenerationParams(
            model=model, max_tokens=max_tokens, temperature=temperature
        )
        self._base_url = base_url
        self._organization = organization
        self._timeout = timeout
        self._http_client = http_client
        self._client: AsyncOpenAI | None = None

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._params.model

    @property
    def params(self) -> GenerationParams:
        return self._params

    def _client_for(self, credential: str) -> AsyncOpenAI:
        """Return an SDK client authenticated with `credential`.

        The first call creates the client; later credentials reuse its
        connection pool through with_options().
        """
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=credential,
                base_url=self._base_url,
                organization=self._organization,
                timeout=self._timeout,
                max_retries=0,
                http_client=self._http_client,
            )
            return self._client
        if self._client.api_key == credential:
            return self._client
        return self._client.with_options(api_key=credential)

    async def _send(self, history: Sequence["Message"], credential: str) -> str:
        client = self._client_for(credential)
        payload = build_payload(history, self._params)

        try:
            completion = await client.chat.completions.create(**payload)
        except openai.APIConnectionError as e:
            cause = e.__cause__
            message = str(cause) if cause is not None and str(cause) else e.message
            raise CompletionError(ErrorKind.TRANSPORT, message) from e
        except openai.APIStatusError as e:
            self._debug("debug", f"Service returned status {e.status_code}")
            raise CompletionError(ErrorKind.REJECTED, _service_message(e.body)) from e
        except (openai.APIResponseValidationError, ValueError) as e:
            # Success status with a body that does not decode
            self._debug("debug", f"Unreadable response body: {type(e).__name__}")
            raise CompletionError(ErrorKind.EMPTY_REPLY, EMPTY_REPLY_MESSAGE) from e

        content = _first_candidate_text(completion)
        if content is None:
            raise CompletionError(ErrorKind.EMPTY_REPLY, EMPTY_REPLY_MESSAGE)
        return content

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async close for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        if self._client is not None:
            await self._client.close()
            self._client = None
