"""GitHub REST client for authorizations and releases.

Failures come back as one of the ``ApiError`` variants. Two of them are
expected during login and are handled by the caller rather than
reported: ``OtpRequired`` (the account has two-factor auth and the
request needs an ``X-GitHub-OTP`` header) and ``NameConflict`` (an
authorization with the requested note already exists).
"""

from __future__ import annotations

import base64
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from gitrel.core.result import Err, Ok, Result
from gitrel.core.structured import as_obj_list, as_str_dict, get_str
from gitrel.github.http import HttpClient, HttpError, HttpResponse
from gitrel.github.models import Authorization, Release, parse_authorization, parse_release

__all__ = [
    "ApiError",
    "BasicAuth",
    "GitHubApi",
    "NameConflict",
    "OtpRequired",
    "RemoteFailure",
    "OTP_HEADER",
]

log = logging.getLogger(__name__)

OTP_HEADER = "X-GitHub-OTP"
_NEXT_LINK = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


@dataclass(frozen=True, slots=True)
class OtpRequired:
    """The request must be repeated with a one-time password."""

    delivery: str | None = None


@dataclass(frozen=True, slots=True)
class NameConflict:
    note: str


@dataclass(frozen=True, slots=True)
class RemoteFailure:
    message: str
    status: int = 0


ApiError = OtpRequired | NameConflict | RemoteFailure


@dataclass(frozen=True, slots=True)
class BasicAuth:
    """Username/password pair, used only while creating a token."""

    username: str
    password: str

    def header(self) -> str:
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def __repr__(self) -> str:
        return f"BasicAuth(username={self.username!r}, password='***')"


def _otp_delivery(error: HttpError) -> str | None:
    """Return the delivery method if ``error`` is a two-factor challenge."""
    if error.status != 401:
        return None
    value = error.header(OTP_HEADER)
    if value is None or not value.lower().startswith("required"):
        return None
    _, _, delivery = value.partition(";")
    return delivery.strip() or "app"


def _is_already_exists(error: HttpError) -> bool:
    if error.status != 422:
        return False
    doc = as_str_dict(error.body)
    if doc is not None:
        for item in as_obj_list(doc.get("errors")) or []:
            entry = as_str_dict(item)
            if entry is not None and get_str(entry, "code") == "already_exists":
                return True
    return "already_exists" in f"{error.message} {error.body}"


def _failure(error: HttpError) -> RemoteFailure:
    return RemoteFailure(message=str(error), status=error.status)


class GitHubApi:
    """The subset of the GitHub API git-release needs.

    Args:
        http: Transport
        base_url: API root, e.g. ``https://api.github.com``
    """

    def __init__(self, http: HttpClient, base_url: str = "https://api.github.com") -> None:
        self._http = http
        self._base = base_url.rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self._base}{path}"

    @staticmethod
    def _basic_headers(basic: BasicAuth, otp: str | None) -> dict[str, str]:
        headers = {"Authorization": basic.header()}
        if otp:
            headers[OTP_HEADER] = otp
        return headers

    @staticmethod
    def _token_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def _call(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        json_body: object = None,
    ) -> Result[HttpResponse, ApiError]:
        result = self._http.request(method, url, headers=headers, json_body=json_body)
        if isinstance(result, Ok):
            return result

        error = result.error
        delivery = _otp_delivery(error)
        if delivery is not None:
            log.debug("%s %s requires a one-time password (%s)", method, url, delivery)
            return Err(OtpRequired(delivery=delivery))
        return Err(_failure(error))

    # -- authentication -------------------------------------------------

    def authenticate(self, token: str) -> Result[None, RemoteFailure]:
        """Check that ``token`` is accepted by listing the user's repositories."""
        result = self._http.request(
            "GET", self._url("/user/repos"), headers=self._token_headers(token)
        )
        if isinstance(result, Err):
            return Err(_failure(result.error))
        return Ok(None)

    def list_authorizations(
        self, basic: BasicAuth, otp: str | None = None
    ) -> Result[list[Authorization], ApiError]:
        result = self._call(
            "GET", self._url("/authorizations"), self._basic_headers(basic, otp)
        )
        if isinstance(result, Err):
            return result

        items = as_obj_list(result.value.body)
        if items is None:
            return Err(RemoteFailure("unexpected authorizations payload"))
        auths = [a for a in (parse_authorization(item) for item in items) if a is not None]
        return Ok(auths)

    def create_authorization(
        self,
        basic: BasicAuth,
        note: str,
        scopes: Sequence[str],
        otp: str | None = None,
    ) -> Result[Authorization, ApiError]:
        url = self._url("/authorizations")
        payload = {"scopes": list(scopes), "note": note}
        result = self._http.request(
            "POST", url, headers=self._basic_headers(basic, otp), json_body=payload
        )
        if isinstance(result, Err):
            error = result.error
            delivery = _otp_delivery(error)
            if delivery is not None:
                return Err(OtpRequired(delivery=delivery))
            if _is_already_exists(error):
                return Err(NameConflict(note=note))
            return Err(_failure(error))

        auth = parse_authorization(result.value.body)
        if auth is None or not auth.token:
            return Err(RemoteFailure("authorization response carried no token"))
        return Ok(auth)

    def delete_authorization(
        self, basic: BasicAuth, auth_id: int, otp: str | None = None
    ) -> Result[None, ApiError]:
        result = self._call(
            "DELETE",
            self._url(f"/authorizations/{auth_id}"),
            self._basic_headers(basic, otp),
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    # -- releases -------------------------------------------------------

    def list_releases(self, token: str, repo: str) -> Result[list[Release], ApiError]:
        """Fetch every release of ``repo`` (``owner/name``), following pagination."""
        releases: list[Release] = []
        url: str | None = self._url(f"/repos/{repo}/releases?per_page=100")

        while url is not None:
            result = self._call("GET", url, self._token_headers(token))
            if isinstance(result, Err):
                return result

            items = as_obj_list(result.value.body)
            if items is None:
                return Err(RemoteFailure(f"unexpected releases payload for {repo}"))
            releases.extend(r for r in (parse_release(item) for item in items) if r is not None)

            link = result.value.header("link") or ""
            match = _NEXT_LINK.search(link)
            url = match.group(1) if match else None

        return Ok(releases)

    def update_release(
        self, token: str, url: str, fields: Mapping[str, object]
    ) -> Result[None, ApiError]:
        """PATCH the release at ``url`` with only the given fields."""
        result = self._call("PATCH", url, self._token_headers(token), dict(fields))
        if isinstance(result, Err):
            return result
        return Ok(None)
