"""Resolve the GitHub repository for the current checkout."""

from __future__ import annotations

import re
from pathlib import Path

from gitrel.core.result import Err, Ok, Result
from gitrel.platform.process import run
from gitrel.services.errors import NotARepository

__all__ = ["detect_repo", "repo_from_remote_url"]

_HOST_PREFIX = re.compile(r"^.*github\.com[/:]")


def repo_from_remote_url(url: str) -> str | None:
    """Turn a remote URL into ``owner/name``.

    Handles https (``https://github.com/o/r.git``) and scp-like ssh
    (``git@github.com:o/r.git``) forms. Returns None for other hosts.
    """
    url = url.strip()
    if not _HOST_PREFIX.match(url):
        return None
    repo = _HOST_PREFIX.sub("", url).rstrip("/")
    repo = repo.removesuffix(".git")
    if repo.count("/") != 1 or repo.startswith("/") or repo.endswith("/"):
        return None
    return repo


def detect_repo(cwd: Path, remote: str = "origin") -> Result[str, NotARepository]:
    result = run(["git", "remote", "get-url", remote], cwd=cwd)
    if isinstance(result, Err):
        return Err(NotARepository(result.error.stderr.strip() or str(result.error)))

    repo = repo_from_remote_url(result.value)
    if repo is None:
        return Err(NotARepository(f"remote '{remote}' is not a GitHub repository"))
    return Ok(repo)
