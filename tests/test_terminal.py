"""Tests for the terminal variants."""

import io
import sys
from types import SimpleNamespace
from typing import Iterator

import pytest
import typer
from InquirerPy import inquirer
from rich.console import Console

from lopper.config import Settings
from lopper.terminal import PlainTerminal, RichTerminal, select_terminal

CHOICES = [("a", "branch a"), ("b", "branch b"), ("c", "branch c")]


@pytest.fixture
def terminal() -> PlainTerminal:
    return PlainTerminal(Settings())


def answer_with(monkeypatch, *answers: str) -> None:
    """Feed answers to typer.prompt, aborting once they run out."""
    queue: Iterator[str] = iter(answers)

    def fake_prompt(*args, **kwargs) -> str:
        try:
            return next(queue)
        except StopIteration:
            raise typer.Abort() from None

    monkeypatch.setattr(typer, "prompt", fake_prompt)


def test_choose_one(terminal: PlainTerminal, monkeypatch, capsys) -> None:
    """Test picking a numbered option after an invalid one."""
    answer_with(monkeypatch, "9", "2")
    assert terminal.choose_one("Pick", CHOICES) == "b"
    out = capsys.readouterr().out
    assert " 1. branch a" in out
    assert "Invalid option: 9" in out


def test_choose_one_back(terminal: PlainTerminal, monkeypatch) -> None:
    """Test that an empty answer or end of input goes back."""
    answer_with(monkeypatch, "")
    assert terminal.choose_one("Pick", CHOICES) is None
    answer_with(monkeypatch)
    assert terminal.choose_one("Pick", CHOICES) is None


def test_choose_many(terminal: PlainTerminal, monkeypatch) -> None:
    """Test multi selection keeps menu order and drops duplicates."""
    answer_with(monkeypatch, "3, 1 3")
    assert terminal.choose_many("Pick", CHOICES) == ["a", "c"]


def test_choose_many_all(terminal: PlainTerminal, monkeypatch) -> None:
    """Test selecting everything."""
    answer_with(monkeypatch, "all")
    assert terminal.choose_many("Pick", CHOICES) == ["a", "b", "c"]


def test_choose_many_invalid_then_cancel(terminal: PlainTerminal, monkeypatch, capsys) -> None:
    """Test that invalid input is asked again and empty input cancels."""
    answer_with(monkeypatch, "1 x", "")
    assert terminal.choose_many("Pick", CHOICES) == []
    assert "Invalid selection: 1 x" in capsys.readouterr().out


def test_confirm_abort_is_no(terminal: PlainTerminal, monkeypatch) -> None:
    """Test that end of input at a confirmation means no."""

    def abort(*args, **kwargs) -> bool:
        raise typer.Abort()

    monkeypatch.setattr(typer, "confirm", abort)
    assert terminal.confirm("Sure?") is False


def test_render_panel_strips_markup(terminal: PlainTerminal, capsys) -> None:
    """Test that markup is not printed literally."""
    terminal.render_panel("[bold]hello[/bold]", title="[red]Title[/red]")
    out = capsys.readouterr().out
    assert "hello" in out
    assert "Title" in out
    assert "[bold]" not in out


class FakePrompt:
    """Stands in for an InquirerPy prompt."""

    def __init__(self, result=None, interrupt: bool = False) -> None:
        self.result = result
        self.interrupt = interrupt

    def execute(self):
        if self.interrupt:
            raise KeyboardInterrupt
        return self.result


@pytest.fixture
def rich_terminal() -> RichTerminal:
    return RichTerminal(Settings(), console=Console(file=io.StringIO()))


def prompt_returning(monkeypatch, name: str, prompt: FakePrompt) -> list[dict]:
    """Replace inquirer.<name> and record the keyword arguments it is built with."""
    calls: list[dict] = []

    def build(**kwargs) -> FakePrompt:
        calls.append(kwargs)
        return prompt

    monkeypatch.setattr(inquirer, name, build)
    return calls


def test_rich_choose_one(rich_terminal: RichTerminal, monkeypatch) -> None:
    """Test that the chosen value is returned and escape is bound to go back."""
    calls = prompt_returning(monkeypatch, "select", FakePrompt("b"))
    assert rich_terminal.choose_one("Pick", CHOICES) == "b"
    assert calls[0]["mandatory"] is False
    assert calls[0]["keybindings"]["skip"] == [{"key": "escape"}]
    assert [c.value for c in calls[0]["choices"]] == ["a", "b", "c"]


def test_rich_choose_one_back(rich_terminal: RichTerminal, monkeypatch) -> None:
    """Test that a skipped or interrupted menu gives None."""
    prompt_returning(monkeypatch, "select", FakePrompt(None))
    assert rich_terminal.choose_one("Pick", CHOICES) is None
    prompt_returning(monkeypatch, "select", FakePrompt(interrupt=True))
    assert rich_terminal.choose_one("Pick", CHOICES) is None


def test_rich_choose_many(rich_terminal: RichTerminal, monkeypatch) -> None:
    """Test multi selection through the fuzzy picker."""
    calls = prompt_returning(monkeypatch, "fuzzy", FakePrompt(["a", "c"]))
    assert rich_terminal.choose_many("Pick", CHOICES) == ["a", "c"]
    assert calls[0]["multiselect"] is True


def test_rich_choose_many_cancel(rich_terminal: RichTerminal, monkeypatch) -> None:
    """Test that a skipped or interrupted picker gives an empty list."""
    prompt_returning(monkeypatch, "fuzzy", FakePrompt(None))
    assert rich_terminal.choose_many("Pick", CHOICES) == []
    prompt_returning(monkeypatch, "fuzzy", FakePrompt(interrupt=True))
    assert rich_terminal.choose_many("Pick", CHOICES) == []


def test_rich_confirm(rich_terminal: RichTerminal, monkeypatch) -> None:
    """Test that only an explicit yes confirms."""
    prompt_returning(monkeypatch, "confirm", FakePrompt(True))
    assert rich_terminal.confirm("Sure?") is True
    prompt_returning(monkeypatch, "confirm", FakePrompt(None))
    assert rich_terminal.confirm("Sure?") is False
    prompt_returning(monkeypatch, "confirm", FakePrompt(interrupt=True))
    assert rich_terminal.confirm("Sure?") is False


def test_rich_render_panel(rich_terminal: RichTerminal) -> None:
    """Test that panels are drawn with rendered markup."""
    rich_terminal.render_panel("[bold]hello[/bold]", title="Title")
    out = rich_terminal.console.file.getvalue()
    assert "hello" in out
    assert "Title" in out
    assert "[bold]" not in out


def fake_tty(monkeypatch, stdin: bool, stdout: bool) -> None:
    monkeypatch.setattr(sys, "stdin", SimpleNamespace(isatty=lambda: stdin))
    monkeypatch.setattr(sys, "stdout", SimpleNamespace(isatty=lambda: stdout))


def test_select_terminal_rich(monkeypatch) -> None:
    """Test that an interactive terminal gets the rich variant."""
    fake_tty(monkeypatch, stdin=True, stdout=True)
    assert isinstance(select_terminal(Settings()), RichTerminal)


def test_select_terminal_plain(monkeypatch) -> None:
    """Test that redirected input or output gets the plain variant."""
    fake_tty(monkeypatch, stdin=False, stdout=True)
    assert isinstance(select_terminal(Settings()), PlainTerminal)
    fake_tty(monkeypatch, stdin=True, stdout=False)
    assert isinstance(select_terminal(Settings()), PlainTerminal)
