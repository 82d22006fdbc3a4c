from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import typer

from gitrel import __version__
from gitrel.core.config import Config, load_config
from gitrel.core.errors import ErrorCode
from gitrel.core.result import Err
from gitrel.github.api import GitHubApi
from gitrel.github.http import HttpClient, RealHttpClient
from gitrel.output.console import ConsoleProtocol, RichConsole
from gitrel.output.errors import print_error
from gitrel.output.prompt import PromptProtocol, TyperPrompt
from gitrel.services.credentials import CredentialStore, FileCredentialStore


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    prompt: PromptProtocol
    http: HttpClient
    cwd: Path = field(default_factory=Path.cwd)

    @property
    def api(self) -> GitHubApi:
        return GitHubApi(self.http, self.config.api.url)

    @property
    def store(self) -> CredentialStore:
        return FileCredentialStore(self.config.auth.token_path)


def build_context() -> CLIContext:
    console = RichConsole()
    config_result = load_config()
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.FATAL))

    config = config_result.value
    return CLIContext(
        config=config,
        console=console,
        prompt=TyperPrompt(),
        http=RealHttpClient(
            timeout=config.api.timeout,
            user_agent=f"git-release/{__version__}",
        ),
    )
