"""Provision the API token used by every other command.

The flow is a state machine over ``LoginSession``:

    verify ──(stored token accepted)──────────────────────────> done
      │
      └─> credentials ─> create ──(token)──> store ─> done
                           │  ^
              OtpRequired  │  │ retry with code
                           v  │
                           otp ─────────> (resume step)
                           │
              NameConflict v
                        conflict ─┬─ regenerate ─> find ─> delete ─> create
                                  └─ rename ──────────────────────> create

``find`` and ``delete`` go through ``otp`` the same way ``create`` does.
A code is only ever sent with the operation it was typed for and the
one that immediately follows within the same regenerate step; every
other transition drops it, so the server asks again when it needs one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal, TypeAlias

from gitrel.core.config import DEFAULT_NOTE, DEFAULT_SCOPES
from gitrel.core.result import Err, Ok, Result
from gitrel.github.api import BasicAuth, GitHubApi, NameConflict, OtpRequired
from gitrel.output.prompt import Choice, PromptProtocol
from gitrel.services.credentials import CredentialStore
from gitrel.services.errors import AuthorizationNotFound, GitReleaseError
from gitrel.services.fsm import StepHandler, StepOutcome, UnknownStep, advance, finish, run_state_machine

__all__ = [
    "ConflictAction",
    "CONFLICT_CHOICES",
    "LoginOutcome",
    "LoginSession",
    "TokenProvisioner",
]

log = logging.getLogger(__name__)

LoginOutcome = Literal["verified", "created"]
LoginStep = Literal[
    "verify", "credentials", "create", "otp", "conflict", "rename", "find", "delete", "store"
]


class ConflictAction(Enum):
    REGENERATE = "regenerate"
    RENAME = "rename"


CONFLICT_CHOICES: tuple[Choice[ConflictAction], ...] = (
    Choice(ConflictAction.REGENERATE, "regenerate token (will delete old one)"),
    Choice(ConflictAction.RENAME, "generate token with new name"),
)


@dataclass(frozen=True, slots=True)
class LoginSession:
    step: LoginStep
    note: str
    basic: BasicAuth | None = None
    otp: str | None = None
    resume: LoginStep = "create"
    auth_id: int | None = None
    token: str | None = None
    outcome: LoginOutcome | None = None


_Step: TypeAlias = Result[StepOutcome[LoginSession], GitReleaseError]


class TokenProvisioner:
    """Make sure a working token is stored, prompting only when needed.

    Args:
        api: GitHub client
        store: Where the token is read from and written to
        prompt: Interactive input
        note: Display name of the authorization to create
        scopes: OAuth scopes requested for new tokens
    """

    def __init__(
        self,
        *,
        api: GitHubApi,
        store: CredentialStore,
        prompt: PromptProtocol,
        note: str = DEFAULT_NOTE,
        scopes: Sequence[str] = DEFAULT_SCOPES,
    ) -> None:
        self._api = api
        self._store = store
        self._prompt = prompt
        self._note = note
        self._scopes = tuple(scopes)

    def ensure_credential(self) -> Result[LoginOutcome, GitReleaseError]:
        handlers: dict[str, StepHandler[LoginSession, GitReleaseError]] = {
            "verify": self._verify,
            "credentials": self._credentials,
            "create": self._create,
            "otp": self._otp,
            "conflict": self._conflict,
            "rename": self._rename,
            "find": self._find,
            "delete": self._delete,
            "store": self._save,
        }
        result = run_state_machine(
            initial_state=LoginSession(step="verify", note=self._note),
            get_step=lambda s: s.step,
            handlers=handlers,
        )
        match result:
            case Ok(session):
                return Ok(session.outcome or "created")
            case Err(UnknownStep(step=step)):
                raise AssertionError(f"login flow has no handler for step {step!r}")
            case Err(error):
                return Err(error)

    def _basic(self, s: LoginSession) -> BasicAuth:
        if s.basic is None:
            raise AssertionError(f"step {s.step!r} reached without credentials")
        return s.basic

    # -- steps ----------------------------------------------------------

    def _verify(self, s: LoginSession) -> _Step:
        if self._store.exists():
            stored = self._store.read()
            if isinstance(stored, Ok):
                if isinstance(self._api.authenticate(stored.value), Ok):
                    return Ok(finish(replace(s, outcome="verified")))
                log.info("stored token was rejected, creating a new one")
        return Ok(advance(replace(s, step="credentials")))

    def _credentials(self, s: LoginSession) -> _Step:
        user = self._prompt.ask_line("GitHub User")
        if isinstance(user, Err):
            return user
        password = self._prompt.ask_secret("GitHub Password")
        if isinstance(password, Err):
            return password
        basic = BasicAuth(username=user.value, password=password.value)
        return Ok(advance(replace(s, step="create", basic=basic)))

    def _create(self, s: LoginSession) -> _Step:
        result = self._api.create_authorization(self._basic(s), s.note, self._scopes, s.otp)
        match result:
            case Ok(auth):
                return Ok(advance(replace(s, step="store", token=auth.token, otp=None)))
            case Err(OtpRequired()):
                return Ok(advance(replace(s, step="otp", resume="create")))
            case Err(NameConflict()):
                return Ok(advance(replace(s, step="conflict", otp=None)))
            case Err(error):
                return Err(error)

    def _otp(self, s: LoginSession) -> _Step:
        code = self._prompt.ask_line("GitHub 2FA")
        if isinstance(code, Err):
            return code
        return Ok(advance(replace(s, step=s.resume, otp=code.value)))

    def _conflict(self, s: LoginSession) -> _Step:
        choice = self._prompt.ask_choice(f"Token '{s.note}' already exists", CONFLICT_CHOICES)
        if isinstance(choice, Err):
            return choice
        match choice.value:
            case ConflictAction.REGENERATE:
                return Ok(advance(replace(s, step="find", auth_id=None)))
            case ConflictAction.RENAME:
                return Ok(advance(replace(s, step="rename")))

    def _rename(self, s: LoginSession) -> _Step:
        """Ask for a new note; pressing Enter resubmits the current one instead of aborting."""
        note = self._prompt.ask_line("OAuth token note", default=s.note)
        if isinstance(note, Err):
            return note
        return Ok(advance(replace(s, step="create", note=note.value)))

    def _find(self, s: LoginSession) -> _Step:
        result = self._api.list_authorizations(self._basic(s), s.otp)
        match result:
            case Ok(auths):
                # exact note only; "Git Release CLI (laptop)" is a different token
                match_ = next((a for a in auths if a.note == s.note), None)
                if match_ is None:
                    return Err(AuthorizationNotFound(s.note))
                return Ok(advance(replace(s, step="delete", auth_id=match_.id)))
            case Err(OtpRequired()):
                return Ok(advance(replace(s, step="otp", resume="find")))
            case Err(error):
                return Err(error)

    def _delete(self, s: LoginSession) -> _Step:
        if s.auth_id is None:
            raise AssertionError("delete step reached without an authorization id")
        result = self._api.delete_authorization(self._basic(s), s.auth_id, s.otp)
        match result:
            case Ok(_):
                log.info("deleted authorization %d (%s)", s.auth_id, s.note)
                return Ok(advance(replace(s, step="create", auth_id=None, otp=None)))
            case Err(OtpRequired()):
                return Ok(advance(replace(s, step="otp", resume="delete")))
            case Err(error):
                return Err(error)

    def _save(self, s: LoginSession) -> _Step:
        written = self._store.write(s.token or "")
        if isinstance(written, Err):
            return written
        return Ok(finish(replace(s, outcome="created")))
