"""Tests for the token provisioning flow."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitrel.core.result import Err, Ok
from gitrel.github.api import OTP_HEADER, GitHubApi, RemoteFailure
from gitrel.github.http import HttpError, HttpResponse, MockHttpClient
from gitrel.output.prompt import ScriptedPrompt, UserAbort
from gitrel.services.credentials import FileCredentialStore
from gitrel.services.errors import AuthorizationNotFound
from gitrel.services.login import TokenProvisioner

API = "https://api.github.com"
AUTHS = f"{API}/authorizations"
REPOS = f"{API}/user/repos"
NOTE = "Git Release CLI"


def _otp_required() -> HttpError:
    return HttpError(
        url=AUTHS,
        status=401,
        message="Must specify two-factor authentication OTP code.",
        headers={"x-github-otp": "required; app"},
    )


def _already_exists() -> HttpError:
    return HttpError(
        url=AUTHS,
        status=422,
        message="Validation Failed",
        body={
            "message": "Validation Failed",
            "errors": [{"resource": "OauthAccess", "code": "already_exists", "field": "description"}],
        },
    )


def _created(token: str = "tok-123", note: str = NOTE) -> HttpResponse:
    return HttpResponse(status=201, body={"id": 42, "note": note, "token": token})


@pytest.fixture
def http() -> MockHttpClient:
    return MockHttpClient()


@pytest.fixture
def store(tmp_path: Path) -> FileCredentialStore:
    return FileCredentialStore(tmp_path / "token")


def _provisioner(
    http: MockHttpClient, store: FileCredentialStore, prompt: ScriptedPrompt
) -> TokenProvisioner:
    return TokenProvisioner(api=GitHubApi(http, API), store=store, prompt=prompt)


def test_valid_stored_token_needs_no_prompt(
    http: MockHttpClient, store: FileCredentialStore
) -> None:
    store.path.write_text("stored-token\n", encoding="utf-8")
    http.add("GET", REPOS, HttpResponse(status=200, body=[]))
    prompt = ScriptedPrompt()

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Ok("verified")
    assert prompt.asked == []
    assert http.calls[0].headers["Authorization"] == "Bearer stored-token"
    assert http.calls_to("POST") == []


def test_missing_token_creates_and_stores(
    http: MockHttpClient, store: FileCredentialStore
) -> None:
    http.add("POST", AUTHS, _created("fresh"))
    prompt = ScriptedPrompt(answers=["octocat", "hunter2"])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Ok("created")
    assert store.read() == Ok("fresh")
    assert prompt.asked == [("line", "GitHub User"), ("secret", "GitHub Password")]
    post = http.calls_to("POST")[0]
    assert post.json_body == {"scopes": ["repo"], "note": NOTE}
    assert post.headers["Authorization"].startswith("Basic ")
    assert OTP_HEADER not in post.headers


def test_rejected_stored_token_falls_back_to_login(
    http: MockHttpClient, store: FileCredentialStore
) -> None:
    store.path.write_text("revoked", encoding="utf-8")
    http.add("GET", REPOS, HttpError(url=REPOS, status=401, message="Bad credentials"))
    http.add("POST", AUTHS, _created("replacement"))
    prompt = ScriptedPrompt(answers=["octocat", "hunter2"])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Ok("created")
    assert store.read() == Ok("replacement")


def test_empty_username_aborts(http: MockHttpClient, store: FileCredentialStore) -> None:
    prompt = ScriptedPrompt(answers=[""])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Err(UserAbort("GitHub User"))
    assert http.calls == []
    assert not store.exists()


def test_empty_password_aborts(http: MockHttpClient, store: FileCredentialStore) -> None:
    prompt = ScriptedPrompt(answers=["octocat", ""])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert isinstance(result, Err)
    assert isinstance(result.error, UserAbort)
    assert http.calls == []


def test_otp_prompted_once_per_challenge(
    http: MockHttpClient, store: FileCredentialStore
) -> None:
    http.add("POST", AUTHS, _otp_required(), _otp_required(), _created())
    prompt = ScriptedPrompt(answers=["octocat", "hunter2", "111111", "222222"])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Ok("created")
    posts = http.calls_to("POST")
    assert [p.headers.get(OTP_HEADER) for p in posts] == [None, "111111", "222222"]
    assert all(p.json_body == posts[0].json_body for p in posts)
    assert prompt.count("line") == 3  # user + two codes


def test_empty_otp_aborts(http: MockHttpClient, store: FileCredentialStore) -> None:
    http.add("POST", AUTHS, _otp_required())
    prompt = ScriptedPrompt(answers=["octocat", "hunter2", ""])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert result == Err(UserAbort("GitHub 2FA"))
    assert len(http.calls_to("POST")) == 1


def test_remote_failure_is_fatal(http: MockHttpClient, store: FileCredentialStore) -> None:
    http.add("POST", AUTHS, HttpError(url=AUTHS, status=500, message="boom"))
    prompt = ScriptedPrompt(answers=["octocat", "hunter2"])

    result = _provisioner(http, store, prompt).ensure_credential()

    assert isinstance(result, Err)
    assert isinstance(result.error, RemoteFailure)
    assert result.error.status == 500
    assert len(http.calls_to("POST")) == 1


class TestNameConflict:
    def test_rename_retries_with_new_note(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists(), _created(note="laptop"))
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "2", "laptop"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Ok("created")
        notes = [p.json_body["note"] for p in http.calls_to("POST")]  # type: ignore[index]
        assert notes == [NOTE, "laptop"]
        assert http.calls_to("GET") == []
        assert http.calls_to("DELETE") == []
        assert ("choice", f"Token '{NOTE}' already exists") in prompt.asked

    def test_regenerate_deletes_old_authorization_once(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists(), _created("regenerated"))
        http.add(
            "GET",
            AUTHS,
            _otp_required(),
            HttpResponse(
                status=200,
                body=[
                    {"id": 7, "note": NOTE},
                    {"id": 8, "note": f"{NOTE} (old laptop)"},
                ],
            ),
        )
        http.add("DELETE", f"{AUTHS}/7", HttpResponse(status=204))
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "1", "424242"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Ok("created")
        assert store.read() == Ok("regenerated")
        deletes = http.calls_to("DELETE")
        assert len(deletes) == 1
        assert deletes[0].url == f"{AUTHS}/7"
        assert deletes[0].headers[OTP_HEADER] == "424242"
        assert [p.json_body["note"] for p in http.calls_to("POST")] == [NOTE, NOTE]  # type: ignore[index]

    def test_delete_challenge_reprompts(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists(), _created())
        http.add("GET", AUTHS, HttpResponse(status=200, body=[{"id": 7, "note": NOTE}]))
        http.add(
            "DELETE",
            f"{AUTHS}/7",
            HttpError(url=f"{AUTHS}/7", status=401, message="otp", headers={"x-github-otp": "required; sms"}),
            HttpResponse(status=204),
        )
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "regenerate", "555555"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Ok("created")
        assert [d.headers.get(OTP_HEADER) for d in http.calls_to("DELETE")] == [None, "555555"]

    def test_regenerate_without_matching_authorization_fails(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists())
        http.add("GET", AUTHS, HttpResponse(status=200, body=[{"id": 8, "note": "other"}]))
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "1"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Err(AuthorizationNotFound(NOTE))
        assert http.calls_to("DELETE") == []

    def test_rename_that_conflicts_again_asks_again(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists(), _already_exists(), _created())
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "2", "laptop", "2", "desktop"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Ok("created")
        notes = [p.json_body["note"] for p in http.calls_to("POST")]  # type: ignore[index]
        assert notes == [NOTE, "laptop", "desktop"]
        assert prompt.count("choice") == 2

    def test_empty_choice_aborts(self, http: MockHttpClient, store: FileCredentialStore) -> None:
        http.add("POST", AUTHS, _already_exists())
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", ""])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert isinstance(result, Err)
        assert isinstance(result.error, UserAbort)

    def test_rename_with_empty_answer_keeps_current_note(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists(), _already_exists(), _created())
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "2", "", "2", "desktop"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Ok("created")
        notes = [p.json_body["note"] for p in http.calls_to("POST")]  # type: ignore[index]
        assert notes == [NOTE, NOTE, "desktop"]
        assert prompt.count("line") == 3

    def test_regenerate_only_deletes_exact_note_match(
        self, http: MockHttpClient, store: FileCredentialStore
    ) -> None:
        http.add("POST", AUTHS, _already_exists())
        http.add(
            "GET",
            AUTHS,
            HttpResponse(status=200, body=[{"id": 8, "note": f"{NOTE} (old laptop)"}]),
        )
        prompt = ScriptedPrompt(answers=["octocat", "hunter2", "1"])

        result = _provisioner(http, store, prompt).ensure_credential()

        assert result == Err(AuthorizationNotFound(NOTE))
        assert http.calls_to("DELETE") == []
