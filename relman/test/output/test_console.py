"""Tests for relman.output.console module."""

from __future__ import annotations

import pytest

from relman.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_prefixes_and_styles(self) -> None:
        console = MockConsole()
        console.print("git push", Style.DIM)
        console.success("pushed")
        console.error("failed")
        console.warning("careful")
        console.info("cloned")

        assert console.messages == [
            "git push",
            "OK pushed",
            "error: failed",
            "warning: careful",
            "info: cloned",
        ]
        assert [o.style for o in console.outputs] == [
            Style.DIM,
            Style.SUCCESS,
            Style.ERROR,
            Style.WARNING,
            Style.INFO,
        ]
        assert console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.info("cloned https://github.com/o/r.git in /tmp/x")
        console.info("committed abc")

        assert len(console.find("cloned")) == 1
        assert console.find("missing") == []
        assert "committed abc" in console.text


class TestRichConsole:
    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.error("push failed")
        console.info("cloned")

        captured = capsys.readouterr()
        assert "push failed" in captured.err
        assert "cloned" in captured.out
        assert "push failed" not in captured.out

    def test_markup_in_messages_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.info("branch [bold]x[/bold]")
        console.print("[red]raw[/red]", Style.DIM)

        out = capsys.readouterr().out
        assert "[bold]x[/bold]" in out
        assert "[red]raw[/red]" in out
