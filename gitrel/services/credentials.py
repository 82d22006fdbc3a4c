"""Local storage of the API token."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from gitrel.core.result import Err, Ok, Result
from gitrel.platform.files import write_private_text
from gitrel.services.errors import CredentialMissing, CredentialWriteFailed

__all__ = ["CredentialStore", "FileCredentialStore"]


class CredentialStore(Protocol):
    def exists(self) -> bool: ...

    def read(self) -> Result[str, CredentialMissing]: ...

    def write(self, token: str) -> Result[None, CredentialWriteFailed]: ...


class FileCredentialStore:
    """Token kept as the first line of a file only its owner can read."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Result[str, CredentialMissing]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                token = handle.readline().strip()
        except (OSError, UnicodeDecodeError):
            return Err(CredentialMissing(self.path))
        if not token:
            return Err(CredentialMissing(self.path))
        return Ok(token)

    def write(self, token: str) -> Result[None, CredentialWriteFailed]:
        if not token:
            return Err(CredentialWriteFailed(self.path, "refusing to store an empty token"))
        try:
            write_private_text(self.path, token)
        except OSError as e:
            return Err(CredentialWriteFailed(self.path, str(e)))
        return Ok(None)
