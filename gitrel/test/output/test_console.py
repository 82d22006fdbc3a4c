"""Tests for gitrel.output.console."""

from __future__ import annotations

import pytest

from gitrel.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


def test_style_str() -> None:
    assert str(Style.SUCCESS) == "success"
    assert str(Style.INFO) == "info"


class TestMockConsole:
    def test_print_captures_message_and_style(self) -> None:
        console = MockConsole()
        console.print("hello", Style.WARNING)
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.WARNING

    def test_error_prefix(self) -> None:
        console = MockConsole()
        console.error("bad")
        assert console.messages == ["error: bad"]
        assert console.has_error()

    def test_text_joins_lines(self) -> None:
        console = MockConsole()
        console.print("a")
        console.newline()
        console.print("b")
        assert console.text == "a\n\nb"

    def test_find(self) -> None:
        console = MockConsole()
        console.print("v1.0 (release)")
        console.print("released: now")
        assert len(console.find("release")) == 2


def test_rich_console_prints_user_text_literally(capsys: pytest.CaptureFixture[str]) -> None:
    console: ConsoleProtocol = RichConsole()
    console.print("[bold]not markup[/bold]")
    assert "[bold]not markup[/bold]" in capsys.readouterr().out
