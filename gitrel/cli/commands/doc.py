from __future__ import annotations

import typer

from gitrel.cli.commands._helpers import REPO_HELP, repo_scope, unwrap_or_exit
from gitrel.cli.context import build_context
from gitrel.services.mutate import ReleaseMutator

doc_app = typer.Typer(help="Edit release notes.")


@doc_app.callback(invoke_without_command=True)
def _doc(ctx: typer.Context) -> None:  # pyright: ignore[reportUnusedFunction]
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@doc_app.command("clear")
def clear(
    tag: str = typer.Argument(..., help="Tag of the release"),
    repo: str | None = typer.Option(None, "--repo", "-R", help=REPO_HELP),
) -> None:
    """Clear the release notes."""
    ctx = build_context()
    token, resolved = repo_scope(ctx, repo)
    mutator = ReleaseMutator(api=ctx.api, token=token, repo=resolved)
    unwrap_or_exit(mutator.clear_notes(tag), ctx)
    ctx.console.success(f"cleared notes of {tag}")


@doc_app.command("add")
def add(
    tag: str = typer.Argument(..., help="Tag of the release"),
    text: list[str] = typer.Argument(..., help="One or more lines to append"),
    repo: str | None = typer.Option(None, "--repo", "-R", help=REPO_HELP),
) -> None:
    """Add one or more lines to the release notes."""
    ctx = build_context()
    token, resolved = repo_scope(ctx, repo)
    mutator = ReleaseMutator(api=ctx.api, token=token, repo=resolved)
    unwrap_or_exit(mutator.append_notes(tag, text), ctx)
    ctx.console.success(f"added {len(text)} line(s) to {tag}")
