from __future__ import annotations

import typer

from gitrel.cli.commands._helpers import REPO_HELP, repo_scope, unwrap_or_exit
from gitrel.cli.context import build_context
from gitrel.output.report import render_report
from gitrel.services.classify import classify


def list_releases(
    repo: str | None = typer.Option(None, "--repo", "-R", help=REPO_HELP),
) -> None:
    """List all releases with the current testing and production release."""
    ctx = build_context()
    token, resolved = repo_scope(ctx, repo)
    releases = unwrap_or_exit(ctx.api.list_releases(token, resolved), ctx)
    render_report(classify(releases), ctx.console)
