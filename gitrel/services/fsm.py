"""A small step-driven state machine runner.

A session is an immutable value that knows its current step. Each step
handler looks at the session and either advances to a new session or
finishes. Handlers report fatal problems as ``Err``; anything the flow
can recover from is expressed as a transition instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

from gitrel.core.result import Err, Ok, Result

log = logging.getLogger(__name__)

S = TypeVar("S")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class StepAdvance(Generic[S]):
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish(Generic[S]):
    session: S


StepOutcome: TypeAlias = StepAdvance[S] | StepFinish[S]
StepHandler: TypeAlias = Callable[[S], Result[StepOutcome[S], E]]


@dataclass(frozen=True, slots=True)
class UnknownStep:
    step: str


def advance(session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def finish(session: S) -> StepFinish[S]:
    return StepFinish(session=session)


def run_state_machine(
    *,
    initial_state: S,
    get_step: Callable[[S], str],
    handlers: Mapping[str, StepHandler[S, E]],
) -> Result[S, E | UnknownStep]:
    """Drive ``initial_state`` through ``handlers`` until a step finishes.

    Returns the final session, the first handler error, or UnknownStep
    when a session names a step with no handler.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(UnknownStep(step))

        log.debug("step %s", step)
        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome

        match outcome.value:
            case StepFinish(session=session):
                return Ok(session)
            case StepAdvance(session=session):
                current = session
