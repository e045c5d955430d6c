"""File credential backend.

Stores the credential in a flat JSON key-value file so it survives
restarts on the same machine and user profile.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .base import CREDENTIAL_KEY, CredentialStore

DEFAULT_CREDENTIALS_PATH = Path.home() / ".relaychat" / "credentials.json"


class FileCredentialStore(CredentialStore):
    """JSON-file-backed credential store.

    The file holds a single JSON object. Only CREDENTIAL_KEY is managed;
    other keys are preserved on write.
    """

    def __init__(self, path: str | Path = DEFAULT_CREDENTIALS_PATH, key: str = CREDENTIAL_KEY):
        self._path = Path(path).expanduser()
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        """Read the backing file. Missing or malformed files read as empty."""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, Any]) -> None:
        """Atomically replace the backing file with `data`."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            if os.name == "posix":
                os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self) -> str | None:
        value = self._load().get(self._key)
        return value if isinstance(value, str) else None

    def _write(self, value: str) -> None:
        data = self._load()
        data[self._key] = value
        self._dump(data)

    def clear(self) -> None:
        data = self._load()
        if self._key not in data:
            return
        del data[self._key]
        self._dump(data)

    @property
    def backend_type(self) -> str:
        return "file"
