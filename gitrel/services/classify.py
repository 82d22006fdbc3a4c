"""Derive the release status report shown by ``git-release list``.

Releases are ordered by tag name, newest-looking first, using plain
string comparison. That matches version order only while tags are
lexically monotonic (``v1.10`` sorts before ``v1.9``); the ordering is
kept as-is rather than guessing at a version scheme.

Walking that order, the first non-draft prerelease is the one currently
in testing and the first full release is the one in production. When the
first non-draft entry is a full release, nothing newer is in testing, so
it serves both channels.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from gitrel.github.models import Release

__all__ = [
    "ClassifiedRelease",
    "Marker",
    "ReleaseKind",
    "ReleaseReport",
    "classify",
    "NO_TESTING",
    "NO_PRODUCTION",
]

NO_TESTING = "no release for testing"
NO_PRODUCTION = "no release for production"


class ReleaseKind(Enum):
    DRAFT = "draft"
    PRERELEASE = "prerelease"
    RELEASE = "release"

    @classmethod
    def of(cls, release: Release) -> ReleaseKind:
        if release.draft:
            return cls.DRAFT
        if release.prerelease:
            return cls.PRERELEASE
        return cls.RELEASE


class Marker(Enum):
    NONE = ""
    TESTING = "current testing"
    PRODUCTION = "current production"
    TESTING_AND_PRODUCTION = "current testing and production"


@dataclass(frozen=True, slots=True)
class ClassifiedRelease:
    tag: str
    kind: ReleaseKind
    marker: Marker
    published_at: str | None
    notes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    entries: tuple[ClassifiedRelease, ...]
    current_testing: str | None
    current_production: str | None

    @property
    def notices(self) -> tuple[str, ...]:
        out: list[str] = []
        if self.current_testing is None:
            out.append(NO_TESTING)
        if self.current_production is None:
            out.append(NO_PRODUCTION)
        return tuple(out)


def _sort_key(release: Release) -> tuple[str, str, str]:
    return (release.tag_name, release.published_at or "", release.url)


def _notes_lines(body: str | None) -> tuple[str, ...]:
    if not body:
        return ()
    return tuple(body.splitlines())


def classify(releases: Iterable[Release]) -> ReleaseReport:
    testing: str | None = None
    production: str | None = None
    entries: list[ClassifiedRelease] = []

    for release in sorted(releases, key=_sort_key, reverse=True):
        kind = ReleaseKind.of(release)
        marker = Marker.NONE

        if kind is ReleaseKind.PRERELEASE and testing is None:
            testing = release.tag_name
            marker = Marker.TESTING
        elif kind is ReleaseKind.RELEASE and production is None:
            production = release.tag_name
            if testing is None:
                testing = release.tag_name
                marker = Marker.TESTING_AND_PRODUCTION
            else:
                marker = Marker.PRODUCTION

        entries.append(
            ClassifiedRelease(
                tag=release.tag_name,
                kind=kind,
                marker=marker,
                published_at=release.published_at,
                notes=_notes_lines(release.body),
            )
        )

    return ReleaseReport(
        entries=tuple(entries),
        current_testing=testing,
        current_production=production,
    )
