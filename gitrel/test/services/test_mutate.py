"""Tests for gitrel.services.mutate."""

from __future__ import annotations

import pytest

from gitrel.core.result import Err, Ok
from gitrel.github.api import GitHubApi, RemoteFailure
from gitrel.github.http import HttpError, HttpResponse, MockHttpClient
from gitrel.services.errors import UnknownStatus, UnknownTag
from gitrel.services.mutate import (
    STATUS_KEYWORDS,
    ReleaseMutator,
    ReleaseStatus,
    append_notes,
    parse_status,
    status_fields,
)

API = "https://api.github.com"
LIST_URL = f"{API}/repos/octo/app/releases?per_page=100"
V1_URL = f"{API}/repos/octo/app/releases/1"


def _release_json(tag: str, url: str, body: str | None = None) -> dict[str, object]:
    return {
        "tag_name": tag,
        "draft": False,
        "prerelease": False,
        "body": body,
        "published_at": "2024-01-01T00:00:00Z",
        "url": url,
    }


@pytest.fixture
def http() -> MockHttpClient:
    client = MockHttpClient()
    client.add(
        "GET",
        LIST_URL,
        HttpResponse(
            status=200,
            body=[
                _release_json("v1.0", V1_URL, body="Initial release"),
                _release_json("v0.9", f"{API}/repos/octo/app/releases/0"),
            ],
        ),
    )
    client.add("PATCH", V1_URL, HttpResponse(status=200, body={}))
    return client


def _mutator(http: MockHttpClient) -> ReleaseMutator:
    return ReleaseMutator(api=GitHubApi(http, API), token="tok", repo="octo/app")


class TestParseStatus:
    @pytest.mark.parametrize(
        ("keyword", "expected"),
        [
            ("r", ReleaseStatus.RELEASE),
            ("release", ReleaseStatus.RELEASE),
            ("p", ReleaseStatus.PRERELEASE),
            ("prerelease", ReleaseStatus.PRERELEASE),
            ("d", ReleaseStatus.DRAFT),
            ("draft", ReleaseStatus.DRAFT),
        ],
    )
    def test_known_keywords(self, keyword: str, expected: ReleaseStatus) -> None:
        assert parse_status(keyword) == Ok(expected)

    def test_unknown_keyword(self) -> None:
        result = parse_status("published")
        assert isinstance(result, Err)
        assert result.error == UnknownStatus("published", tuple(STATUS_KEYWORDS))

    def test_custom_table(self) -> None:
        assert parse_status("ship", {"ship": ReleaseStatus.RELEASE}) == Ok(ReleaseStatus.RELEASE)
        assert isinstance(parse_status("r", {"ship": ReleaseStatus.RELEASE}), Err)


def test_status_fields() -> None:
    assert status_fields(ReleaseStatus.RELEASE) == {"draft": False, "prerelease": False}
    assert status_fields(ReleaseStatus.PRERELEASE) == {"draft": False, "prerelease": True}
    assert status_fields(ReleaseStatus.DRAFT) == {"draft": True, "prerelease": True}


class TestAppendNotes:
    def test_empty_body_has_no_leading_separator(self) -> None:
        assert append_notes("", ["a", "b"]) == "a\nb"
        assert append_notes(None, ["a"]) == "a"

    def test_existing_body_gets_one_line_break(self) -> None:
        assert append_notes("old", ["a", "b"]) == "old\na\nb"


def test_set_status_patches_flags(http: MockHttpClient) -> None:
    result = _mutator(http).set_status("v1.0", ReleaseStatus.DRAFT)

    assert isinstance(result, Ok)
    patch = http.calls_to("PATCH")[0]
    assert patch.url == V1_URL
    assert patch.json_body == {"draft": True, "prerelease": True}
    assert patch.headers["Authorization"] == "Bearer tok"


def test_unknown_tag_does_not_patch(http: MockHttpClient) -> None:
    result = _mutator(http).set_status("v9.9", ReleaseStatus.RELEASE)

    assert result == Err(UnknownTag("v9.9"))
    assert http.calls_to("PATCH") == []


def test_clear_notes(http: MockHttpClient) -> None:
    _mutator(http).clear_notes("v1.0")
    assert http.calls_to("PATCH")[0].json_body == {"body": ""}


def test_append_notes_keeps_existing_body(http: MockHttpClient) -> None:
    _mutator(http).append_notes("v1.0", ["Fix crash", "Faster startup"])
    assert http.calls_to("PATCH")[0].json_body == {
        "body": "Initial release\nFix crash\nFaster startup"
    }


def test_update_failure_is_reported(http: MockHttpClient) -> None:
    http.add("PATCH", f"{API}/repos/octo/app/releases/0", HttpError(url="x", status=403, message="Forbidden"))

    result = _mutator(http).clear_notes("v0.9")

    assert isinstance(result, Err)
    assert isinstance(result.error, RemoteFailure)
