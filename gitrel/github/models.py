"""Typed views of the GitHub objects git-release reads."""

from __future__ import annotations

from dataclasses import dataclass

from gitrel.core.structured import as_str_dict, get_bool, get_int, get_str, get_text

__all__ = ["Authorization", "Release", "parse_authorization", "parse_release"]


@dataclass(frozen=True, slots=True)
class Authorization:
    """An OAuth authorization. ``token`` is only populated on creation."""

    id: int
    note: str
    token: str | None = None


@dataclass(frozen=True, slots=True)
class Release:
    """A GitHub release.

    Attributes:
        tag_name: Tag the release is attached to
        draft: Unpublished draft flag
        prerelease: Pre-production flag (moot while ``draft`` is set)
        body: Release notes, None when the release has none
        published_at: ISO-8601 publication time, None for drafts
        url: API locator used for updates
    """

    tag_name: str
    draft: bool
    prerelease: bool
    body: str | None
    published_at: str | None
    url: str


def parse_authorization(obj: object) -> Authorization | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    auth_id = get_int(data, "id")
    if auth_id is None:
        return None
    return Authorization(
        id=auth_id,
        note=get_text(data, "note") or "",
        token=get_str(data, "token"),
    )


def parse_release(obj: object) -> Release | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    tag = get_text(data, "tag_name")
    url = get_str(data, "url")
    if tag is None or url is None:
        return None
    return Release(
        tag_name=tag,
        draft=get_bool(data, "draft"),
        prerelease=get_bool(data, "prerelease"),
        body=get_text(data, "body"),
        published_at=get_str(data, "published_at"),
        url=url,
    )
