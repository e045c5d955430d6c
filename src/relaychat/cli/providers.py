"""Provider factory functions for CLI.

Centralizes creation of the credential store, completion client and
controller from environment variables and command-line overrides.
Hides configuration details from command implementations.

Environment variables:
    OPENAI_BASE_URL: Completion API base URL (default: SDK default)
    OPENAI_CHAT_MODEL: Model identifier (default: gpt-3.5-turbo)
    RELAYCHAT_CREDENTIALS_PATH: Credential file (default: ~/.relaychat/credentials.json)
"""

import os
from pathlib import Path

from ..chat import ConversationController, ConversationObserver
from ..credentials import DEFAULT_CREDENTIALS_PATH, CredentialStore, create_credential_store
from ..llm import CompletionClient, OpenAICompletionClient

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"


def get_credential_store(path: Path | None = None) -> CredentialStore:
    """Create the file credential store.

    Args:
        path: Explicit credential file; falls back to RELAYCHAT_CREDENTIALS_PATH
    """
    resolved = path or os.getenv("RELAYCHAT_CREDENTIALS_PATH") or DEFAULT_CREDENTIALS_PATH
    return create_credential_store("file", path=resolved)


def get_completion_client(model: str | None = None) -> CompletionClient:
    """Create the completion client.

    Args:
        model: Explicit model; falls back to OPENAI_CHAT_MODEL
    """
    return OpenAICompletionClient(
        model=model or os.getenv("OPENAI_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        base_url=os.getenv("OPENAI_BASE_URL") or None,
    )


def get_controller(
    model: str | None = None,
    credentials_path: Path | None = None,
    observer: ConversationObserver | None = None,
) -> ConversationController:
    """Wire a controller with the configured store and client."""
    return ConversationController(
        credential_store=get_credential_store(credentials_path),
        client=get_completion_client(model),
        observer=observer,
    )
