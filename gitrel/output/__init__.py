"""Output abstraction layer."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .log import configure_logging
from .prompt import Choice, PromptProtocol, ScriptedPrompt, TyperPrompt, UserAbort

__all__ = [
    "Choice",
    "ConsoleProtocol",
    "MockConsole",
    "PromptProtocol",
    "RichConsole",
    "ScriptedPrompt",
    "Style",
    "TyperPrompt",
    "UserAbort",
    "configure_logging",
]
