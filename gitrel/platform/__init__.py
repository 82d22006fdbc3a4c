"""Thin wrappers over the operating system."""

from .files import write_private_text
from .process import ProcessError, run

__all__ = ["ProcessError", "run", "write_private_text"]
