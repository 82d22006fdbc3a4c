"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from gitrel.core.errors import ErrorCode
from gitrel.core.result import Err, Result
from gitrel.output.errors import print_error
from gitrel.services.errors import GitReleaseError
from gitrel.services.repo import detect_repo

if TYPE_CHECKING:
    from gitrel.cli.context import CLIContext

T = TypeVar("T")

REPO_HELP = "Repository as owner/name (default: detected from the git remote)"


def unwrap_or_exit(result: Result[T, GitReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or report the error and exit.

    Replaces the pattern:
        match result:
            case Err(e):
                print_error(e, ctx.console)
                raise typer.Exit(code=1)
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.FATAL))
    return result.value


def repo_scope(ctx: CLIContext, repo: str | None) -> tuple[str, str]:
    """Resolve ``(token, owner/name)`` for a repository-scoped command."""
    if not repo:
        repo = unwrap_or_exit(detect_repo(ctx.cwd, ctx.config.git.remote), ctx)
    token = unwrap_or_exit(ctx.store.read(), ctx)
    return token, repo
