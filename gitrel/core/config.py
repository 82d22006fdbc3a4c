"""Typed configuration loading.

The config file is optional. Every value has a default, so a missing
file yields ``Config()``; a file that exists but cannot be parsed is an
error the CLI reports before doing anything else.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "AuthConfig",
    "ApiConfig",
    "GitConfig",
    "ConfigError",
    "load_config",
    "default_config_path",
    "CONFIG_ENV",
    "TOKEN_FILE_ENV",
    "DEFAULT_TOKEN_FILE",
    "DEFAULT_NOTE",
    "DEFAULT_SCOPES",
    "DEFAULT_API_URL",
]

CONFIG_ENV = "GIT_RELEASE_CONFIG"
TOKEN_FILE_ENV = "GIT_RELEASE_TOKEN_FILE"

DEFAULT_TOKEN_FILE = "~/.git-release-token"
DEFAULT_NOTE = "Git Release CLI"
DEFAULT_SCOPES = ("repo",)
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_REMOTE = "origin"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Where the token lives and how new authorizations are requested."""

    token_file: str = DEFAULT_TOKEN_FILE
    note: str = DEFAULT_NOTE
    scopes: tuple[str, ...] = DEFAULT_SCOPES

    @property
    def token_path(self) -> Path:
        return Path(self.token_file).expanduser()


@dataclass(frozen=True, slots=True)
class ApiConfig:
    url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True, slots=True)
class GitConfig:
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    auth: AuthConfig = field(default_factory=AuthConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        auth: StrDict = get_table(data, "auth") or {}
        api: StrDict = get_table(data, "api") or {}
        git: StrDict = get_table(data, "git") or {}

        scopes = get_str_list(auth, "scopes")
        timeout = get_float(api, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"api.timeout must be positive, got {timeout}")

        return cls(
            auth=AuthConfig(
                token_file=get_str(auth, "token_file") or DEFAULT_TOKEN_FILE,
                note=get_str(auth, "note") or DEFAULT_NOTE,
                scopes=tuple(scopes) if scopes else DEFAULT_SCOPES,
            ),
            api=ApiConfig(
                url=(get_str(api, "url") or DEFAULT_API_URL).rstrip("/"),
                timeout=timeout or DEFAULT_TIMEOUT,
            ),
            git=GitConfig(remote=get_str(git, "remote") or DEFAULT_REMOTE),
        )

    def with_env(self, env: Mapping[str, str]) -> Config:
        """Apply environment overrides on top of file values."""
        token_file = env.get(TOKEN_FILE_ENV, "").strip()
        if not token_file:
            return self
        return replace(self, auth=replace(self.auth, token_file=token_file))


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    override = env.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path("~/.config/git-release/config.toml").expanduser()


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Result[Config, ConfigError]:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        path: Config file; defaults to ``default_config_path()``
        env: Environment used for overrides; defaults to ``os.environ``

    Returns:
        Ok(Config) on success, Err(ConfigError) when the file is unreadable
    """
    env = os.environ if env is None else env
    path = default_config_path(env) if path is None else path

    if not path.is_file():
        return Ok(Config().with_env(env))

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
    return Ok(config.with_env(env))
