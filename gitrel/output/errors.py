"""Error presentation for command failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitrel.core.config import ConfigError
from gitrel.github.api import NameConflict, OtpRequired, RemoteFailure
from gitrel.output.console import Style
from gitrel.output.prompt import UserAbort
from gitrel.services.errors import (
    AuthorizationNotFound,
    CredentialMissing,
    CredentialWriteFailed,
    GitReleaseError,
    NotARepository,
    UnknownStatus,
    UnknownTag,
)
from gitrel.services.mutate import STATUS_HINT

if TYPE_CHECKING:
    from gitrel.output.console import ConsoleProtocol

__all__ = ["print_error"]


def print_error(error: GitReleaseError, console: ConsoleProtocol) -> None:
    match error:
        case UserAbort():
            console.error("aborted")
        case UnknownTag(tag=tag):
            console.error(f"unknown tag {tag}")
        case UnknownStatus():
            console.error("unknown status")
            console.print(STATUS_HINT, Style.DIM)
        case CredentialMissing(path=path, hint=hint):
            console.error(f"please login first (no token in {path})")
            console.print(f"hint: {hint}", Style.DIM)
        case CredentialWriteFailed(path=path, reason=reason):
            console.error(f"could not store token in {path}: {reason}")
        case NotARepository(detail=detail):
            console.error("not a git repository")
            if detail:
                console.print(detail, Style.DIM)
        case AuthorizationNotFound(note=note):
            console.error(f"no authorization named '{note}' to delete")
        case ConfigError(message=message):
            console.error(message)
        case RemoteFailure(message=message):
            console.error(message)
        case OtpRequired():
            console.error("two-factor authentication code required")
        case NameConflict(note=note):
            console.error(f"token '{note}' already exists")
