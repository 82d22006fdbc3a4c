"""Subprocess execution returning Results.

Only used to ask git about the checkout, so output is captured as text and
a failure carries whatever git wrote to stderr.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitrel.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not start, timed out, or exited non-zero.

    ``returncode`` is -1 when the process never produced an exit status.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:4])
        if len(self.command) > 4:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _not_run(cmd: list[str], reason: str) -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=reason))


def run(
    cmd: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd``; Ok carries stdout unmodified."""
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return _not_run(cmd, f"Command timed out after {timeout}s")
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode == 0:
        return Ok(proc.stdout)
    return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
