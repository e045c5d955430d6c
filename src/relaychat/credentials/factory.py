"""Factory for creating credential stores."""

from typing import Any

from .base import CredentialStore


def create_credential_store(
    backend: str = "file",
    **kwargs: Any
) -> CredentialStore:
    """Create a credential store.

    Args:
        backend: Backend type ("file" or "memory")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.relaychat/credentials.json)
                - key: str (default: 'openai-api-key')
            For memory:
                - value: str | None (initial credential)

    Returns:
        CredentialStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "file":
        from .file import FileCredentialStore
        return FileCredentialStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryCredentialStore
        return InMemoryCredentialStore(**kwargs)

    raise ValueError(
        f"Unsupported credential backend: {backend}. "
        f"Supported backends: file, memory"
    )
