"""Credential storage module for relaychat.

Holds the single API key across process restarts.
"""

from .base import CREDENTIAL_KEY, CredentialStore
from .factory import create_credential_store
from .file import DEFAULT_CREDENTIALS_PATH, FileCredentialStore
from .in_memory import InMemoryCredentialStore

__all__ = [
    "CREDENTIAL_KEY",
    "CredentialStore",
    "DEFAULT_CREDENTIALS_PATH",
    "FileCredentialStore",
    "InMemoryCredentialStore",
    "create_credential_store",
]
