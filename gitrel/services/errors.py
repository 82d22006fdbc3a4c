"""Fatal error variants reported by commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gitrel.core.config import ConfigError
from gitrel.github.api import NameConflict, OtpRequired, RemoteFailure
from gitrel.output.prompt import UserAbort


@dataclass(frozen=True, slots=True)
class UnknownTag:
    tag: str


@dataclass(frozen=True, slots=True)
class UnknownStatus:
    keyword: str
    accepted: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CredentialMissing:
    path: Path
    hint: str = "Run: git-release login"


@dataclass(frozen=True, slots=True)
class CredentialWriteFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class NotARepository:
    detail: str


@dataclass(frozen=True, slots=True)
class AuthorizationNotFound:
    note: str


GitReleaseError = (
    UserAbort
    | UnknownTag
    | UnknownStatus
    | CredentialMissing
    | CredentialWriteFailed
    | NotARepository
    | AuthorizationNotFound
    | ConfigError
    | RemoteFailure
    | OtpRequired
    | NameConflict
)
