"""Process exit codes.

git-release only distinguishes success from a fatal abort. Every reported
failure exits with ``FATAL``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    FATAL = 1
