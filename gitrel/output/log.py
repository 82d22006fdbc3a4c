"""Logging setup for the CLI process."""

from __future__ import annotations

import logging

__all__ = ["configure_logging"]

_FORMAT = "%(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route ``gitrel.*`` loggers to stderr through Rich.

    Warnings are shown by default; ``verbose`` turns on request and
    login-step tracing. Calling this more than once replaces the handler.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_FORMAT))

    logger = logging.getLogger("gitrel")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
