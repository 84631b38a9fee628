"""Tests for the Rich console helpers."""

from __future__ import annotations

import sys

import pytest
from rich.console import Console

from inmask.output.console import caret_text, create_console, get_output, style_for_role


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console()
        console.print("[inmask.ok]OK[/]")
        assert get_output(console) == "OK\n"

    def test_width(self) -> None:
        assert create_console(width=40).width == 40

    def test_foreign_console(self) -> None:
        with pytest.raises(TypeError):
            get_output(Console(file=sys.stderr))


class TestCaretText:
    def test_caret_inside(self) -> None:
        text = caret_text("1234", 1)
        assert text.plain == "1234"
        assert text.spans[0].start == 1
        assert text.spans[0].end == 2

    def test_caret_at_end_adds_cell(self) -> None:
        assert caret_text("12", 2).plain == "12 "


class TestRoleStyles:
    def test_known_roles(self) -> None:
        assert style_for_role("handler") == "inmask.role.handler"
        assert style_for_role("static") == "inmask.role.static"

    def test_unknown_role(self) -> None:
        assert style_for_role("mystery") == ""
