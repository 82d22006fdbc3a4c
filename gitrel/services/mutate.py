"""Single-field release updates: status flags and release notes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from gitrel.core.result import Err, Ok, Result
from gitrel.github.api import GitHubApi
from gitrel.github.models import Release
from gitrel.services.errors import GitReleaseError, UnknownStatus, UnknownTag

__all__ = [
    "ReleaseStatus",
    "STATUS_KEYWORDS",
    "STATUS_HINT",
    "ReleaseMutator",
    "append_notes",
    "find_release",
    "parse_status",
    "status_fields",
]


class ReleaseStatus(Enum):
    RELEASE = "release"
    PRERELEASE = "prerelease"
    DRAFT = "draft"


STATUS_KEYWORDS: Mapping[str, ReleaseStatus] = {
    "r": ReleaseStatus.RELEASE,
    "p": ReleaseStatus.PRERELEASE,
    "d": ReleaseStatus.DRAFT,
    "release": ReleaseStatus.RELEASE,
    "prerelease": ReleaseStatus.PRERELEASE,
    "draft": ReleaseStatus.DRAFT,
}

STATUS_HINT = "use one of: r[elease], p[rerelease] or d[raft]"


def parse_status(
    keyword: str,
    keywords: Mapping[str, ReleaseStatus] = STATUS_KEYWORDS,
) -> Result[ReleaseStatus, UnknownStatus]:
    status = keywords.get(keyword)
    if status is None:
        return Err(UnknownStatus(keyword, tuple(keywords)))
    return Ok(status)


def status_fields(status: ReleaseStatus) -> dict[str, object]:
    """Flag pair sent to the API. Drafts keep prerelease set."""
    match status:
        case ReleaseStatus.RELEASE:
            return {"draft": False, "prerelease": False}
        case ReleaseStatus.PRERELEASE:
            return {"draft": False, "prerelease": True}
        case ReleaseStatus.DRAFT:
            return {"draft": True, "prerelease": True}


def append_notes(body: str | None, lines: Sequence[str]) -> str:
    text = "\n".join(lines)
    if not body:
        return text
    return f"{body}\n{text}"


def find_release(releases: Sequence[Release], tag: str) -> Result[Release, UnknownTag]:
    for release in releases:
        if release.tag_name == tag:
            return Ok(release)
    return Err(UnknownTag(tag))


class ReleaseMutator:
    """Look a release up by tag and PATCH one aspect of it."""

    def __init__(self, *, api: GitHubApi, token: str, repo: str) -> None:
        self._api = api
        self._token = token
        self._repo = repo

    def _lookup(self, tag: str) -> Result[Release, GitReleaseError]:
        releases = self._api.list_releases(self._token, self._repo)
        if isinstance(releases, Err):
            return releases
        return find_release(releases.value, tag)

    def _update(self, tag: str, fields: dict[str, object]) -> Result[Release, GitReleaseError]:
        release = self._lookup(tag)
        if isinstance(release, Err):
            return release
        updated = self._api.update_release(self._token, release.value.url, fields)
        if isinstance(updated, Err):
            return updated
        return release

    def set_status(self, tag: str, status: ReleaseStatus) -> Result[Release, GitReleaseError]:
        return self._update(tag, status_fields(status))

    def clear_notes(self, tag: str) -> Result[Release, GitReleaseError]:
        return self._update(tag, {"body": ""})

    def append_notes(self, tag: str, lines: Sequence[str]) -> Result[Release, GitReleaseError]:
        release = self._lookup(tag)
        if isinstance(release, Err):
            return release
        body = append_notes(release.value.body, lines)
        updated = self._api.update_release(self._token, release.value.url, {"body": body})
        if isinstance(updated, Err):
            return updated
        return release
