"""HTTP transport for the GitHub REST API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Scripted implementation for testing
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from email.message import Message
from typing import Protocol, runtime_checkable

from gitrel.core.result import Err, Ok, Result
from gitrel.core.structured import as_str_dict, get_str

__all__ = [
    "HttpClient",
    "HttpResponse",
    "HttpError",
    "RealHttpClient",
    "MockHttpClient",
]

log = logging.getLogger(__name__)


def _empty_headers() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A 2xx response. ``body`` is parsed JSON, or None for an empty body."""

    status: int
    body: object = None
    headers: dict[str, str] = field(default_factory=_empty_headers)

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
        headers: Response headers, lower-cased names
        body: Parsed JSON error document, if the server sent one
    """

    url: str
    status: int
    message: str
    headers: dict[str, str] = field(default_factory=_empty_headers)
    body: object = None

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: object = None,
    ) -> Result[HttpResponse, HttpError]:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP verb
            url: Absolute URL
            headers: Extra request headers
            json_body: Object serialized as the JSON request body

        Returns:
            Ok with the decoded response for 2xx statuses, or Err with HttpError
        """
        ...


def _lower_headers(message: Message | None) -> dict[str, str]:
    if message is None:
        return {}
    return {k.lower(): v for k, v in message.items()}


def _decode(raw: bytes) -> object:
    if not raw.strip():
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return raw.decode("utf-8", errors="replace")


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 30.0, user_agent: str = "git-release") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: object = None,
    ) -> Result[HttpResponse, HttpError]:
        all_headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
        }
        all_headers.update(headers or {})

        data: bytes | None = None
        if json_body is not None:
            data = json.dumps(json_body).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
        log.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                status: int = response.status
                body = _decode(response.read())
                log.debug("%s %s -> %d", method, url, status)
                return Ok(
                    HttpResponse(status=status, body=body, headers=_lower_headers(response.headers))
                )
        except urllib.error.HTTPError as e:
            body = _decode(e.read())
            doc = as_str_dict(body)
            message = (get_str(doc, "message") if doc else None) or str(e.reason)
            log.debug("%s %s -> %d %s", method, url, e.code, message)
            return Err(
                HttpError(
                    url=url,
                    status=e.code,
                    message=message,
                    headers=_lower_headers(e.headers),
                    body=body,
                )
            )
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    json_body: object


class MockHttpClient:
    """Scripted HTTP client for testing.

    Responses are queued per ``(method, url)`` and consumed in order; the
    last queued response repeats once the queue is down to one entry.

    Usage:
        http = MockHttpClient()
        http.add("GET", "https://api.github.com/user/repos", HttpResponse(200, []))
        result = http.request("GET", "https://api.github.com/user/repos")
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], list[HttpResponse | HttpError]] = {}
        self.calls: list[RecordedRequest] = []

    def add(self, method: str, url: str, *responses: HttpResponse | HttpError) -> None:
        self._responses.setdefault((method, url), []).extend(responses)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: object = None,
    ) -> Result[HttpResponse, HttpError]:
        self.calls.append(
            RecordedRequest(method=method, url=url, headers=dict(headers or {}), json_body=json_body)
        )

        queue = self._responses.get((method, url))
        if not queue:
            return Err(HttpError(url=url, status=404, message="Not Found (mock)"))

        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def calls_to(self, method: str) -> list[RecordedRequest]:
        return [c for c in self.calls if c.method == method]
