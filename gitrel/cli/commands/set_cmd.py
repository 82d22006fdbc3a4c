from __future__ import annotations

import typer

from gitrel.cli.commands._helpers import REPO_HELP, repo_scope, unwrap_or_exit
from gitrel.cli.context import build_context
from gitrel.services.mutate import ReleaseMutator, parse_status


def set_status(
    tag: str = typer.Argument(..., help="Tag of the release to change"),
    state: str = typer.Argument(..., help="New state: r[elease], p[rerelease] or d[raft]"),
    repo: str | None = typer.Option(None, "--repo", "-R", help=REPO_HELP),
) -> None:
    """Change the status of a release."""
    ctx = build_context()
    status = unwrap_or_exit(parse_status(state), ctx)
    token, resolved = repo_scope(ctx, repo)
    mutator = ReleaseMutator(api=ctx.api, token=token, repo=resolved)
    unwrap_or_exit(mutator.set_status(tag, status), ctx)
    ctx.console.success(f"{tag} is now a {status.value}")
