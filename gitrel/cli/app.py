from __future__ import annotations

import typer

from gitrel import __version__
from gitrel.cli.commands.doc import doc_app
from gitrel.cli.commands.list_cmd import list_releases
from gitrel.cli.commands.login import login
from gitrel.cli.commands.set_cmd import set_status
from gitrel.output.log import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Manage GitHub releases of the current repository.",
)


def _print_version() -> None:
    typer.echo(f"git-release version {__version__}")


# Commands
app.command()(login)
app.command("list")(list_releases)
app.command("set")(set_status)

# Sub-apps
app.add_typer(doc_app, name="doc")


@app.command("version")
def version_cmd() -> None:
    """Print the current version."""
    _print_version()


@app.command("help")
def help_cmd(ctx: typer.Context) -> None:
    """Print this message."""
    parent = ctx.parent
    typer.echo(parent.get_help() if parent is not None else ctx.get_help())


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log API requests."),
) -> None:
    if version:
        _print_version()
        raise typer.Exit(code=0)
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def main() -> None:
    app()
