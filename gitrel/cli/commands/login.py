from __future__ import annotations

from gitrel.cli.commands._helpers import unwrap_or_exit
from gitrel.cli.context import build_context
from gitrel.services.login import TokenProvisioner


def login() -> None:
    """Create or verify the API token."""
    ctx = build_context()
    provisioner = TokenProvisioner(
        api=ctx.api,
        store=ctx.store,
        prompt=ctx.prompt,
        note=ctx.config.auth.note,
        scopes=ctx.config.auth.scopes,
    )
    unwrap_or_exit(provisioner.ensure_credential(), ctx)
    ctx.console.success("successfully logged in")
