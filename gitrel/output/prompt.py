"""Interactive prompts.

Every prompt treats an empty answer as the user backing out: the caller
gets ``Err(UserAbort)`` and the command exits with status 1.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

import typer

from gitrel.core.result import Err, Ok, Result

T = TypeVar("T")

__all__ = [
    "Choice",
    "UserAbort",
    "PromptProtocol",
    "TyperPrompt",
    "ScriptedPrompt",
]


@dataclass(frozen=True, slots=True)
class UserAbort:
    """The user answered ``prompt`` with an empty line."""

    prompt: str


@dataclass(frozen=True, slots=True)
class Choice(Generic[T]):
    value: T
    label: str


class PromptProtocol(Protocol):
    def ask_line(self, prompt: str, default: str | None = None) -> Result[str, UserAbort]:
        """Ask for one line of text; ``default`` is offered and used on Enter."""
        ...

    def ask_secret(self, prompt: str) -> Result[str, UserAbort]:
        """Ask for a line without echoing it."""
        ...

    def ask_choice(self, prompt: str, options: Sequence[Choice[T]]) -> Result[T, UserAbort]:
        """Present a numbered menu and return the selected option's value."""
        ...


def _match_choice(answer: str, options: Sequence[Choice[T]]) -> Choice[T] | None:
    if answer.isdigit():
        index = int(answer) - 1
        if 0 <= index < len(options):
            return options[index]
        return None

    matches = [o for o in options if o.label.lower().startswith(answer.lower())]
    if len(matches) == 1:
        return matches[0]
    return None


class TyperPrompt:
    """Prompts read from the terminal through ``typer.prompt``."""

    def ask_line(self, prompt: str, default: str | None = None) -> Result[str, UserAbort]:
        answer: str = typer.prompt(
            prompt,
            default=default or "",
            show_default=bool(default),
        )
        answer = answer.strip()
        if not answer:
            return Err(UserAbort(prompt))
        return Ok(answer)

    def ask_secret(self, prompt: str) -> Result[str, UserAbort]:
        answer: str = typer.prompt(prompt, default="", show_default=False, hide_input=True)
        if not answer:
            return Err(UserAbort(prompt))
        return Ok(answer)

    def ask_choice(self, prompt: str, options: Sequence[Choice[T]]) -> Result[T, UserAbort]:
        for i, option in enumerate(options, start=1):
            typer.echo(f"{i}. {option.label}")

        while True:
            answer: str = typer.prompt(prompt, default="", show_default=False).strip()
            if not answer:
                return Err(UserAbort(prompt))
            selected = _match_choice(answer, options)
            if selected is not None:
                return Ok(selected.value)
            typer.echo("You must choose one of the options above.")


def _empty_answers() -> list[str]:
    return []


def _empty_asked() -> list[tuple[str, str]]:
    return []


@dataclass
class ScriptedPrompt:
    """Prompt implementation that replays canned answers for tests.

    ``asked`` records ``(kind, prompt)`` pairs in order. Running out of
    answers behaves like the user pressing Enter.
    """

    answers: list[str] = field(default_factory=_empty_answers)
    asked: list[tuple[str, str]] = field(default_factory=_empty_asked)

    def _next(self, kind: str, prompt: str, default: str | None = None) -> Result[str, UserAbort]:
        self.asked.append((kind, prompt))
        answer = self.answers.pop(0) if self.answers else ""
        if not answer and default:
            answer = default
        if not answer:
            return Err(UserAbort(prompt))
        return Ok(answer)

    def ask_line(self, prompt: str, default: str | None = None) -> Result[str, UserAbort]:
        return self._next("line", prompt, default)

    def ask_secret(self, prompt: str) -> Result[str, UserAbort]:
        return self._next("secret", prompt)

    def ask_choice(self, prompt: str, options: Sequence[Choice[T]]) -> Result[T, UserAbort]:
        result = self._next("choice", prompt)
        if isinstance(result, Err):
            return result
        selected = _match_choice(result.value, options)
        if selected is None:
            return Err(UserAbort(prompt))
        return Ok(selected.value)

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.asked if k == kind)
