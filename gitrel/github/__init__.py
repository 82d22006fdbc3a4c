"""GitHub REST API access."""

from .api import BasicAuth, GitHubApi, NameConflict, OtpRequired, RemoteFailure
from .http import HttpClient, HttpError, HttpResponse, MockHttpClient, RealHttpClient
from .models import Authorization, Release

__all__ = [
    "Authorization",
    "BasicAuth",
    "GitHubApi",
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "NameConflict",
    "OtpRequired",
    "RealHttpClient",
    "Release",
    "RemoteFailure",
]
