"""Terminal interaction: styled output and prompts.

Two variants share one interface. ``RichTerminal`` draws panels with rich and
prompts with InquirerPy; ``PlainTerminal`` prints plain text and reads numbered
answers line by line, for terminals that are not interactive.
"""

import sys
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

import typer
from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from lopper.config import Settings
from lopper.logging_config import get_logger

logger = get_logger(__name__)

# (value, label) pairs offered in menus
Choices = Sequence[tuple[str, str]]

BACK_KEYS = {"skip": [{"key": "escape"}]}


class Terminal(ABC):
    """Presentation and prompt operations used by the session."""

    @abstractmethod
    def render_panel(self, body: str, title: str = "", style: str = "") -> None:
        """Show a block of rich markup, framed when the terminal allows it."""

    @abstractmethod
    def message(self, text: str, style: str = "") -> None:
        """Show a single line of rich markup."""

    @abstractmethod
    def choose_one(self, message: str, choices: Choices) -> Optional[str]:
        """Ask for one choice. Returns None when the user backs out."""

    @abstractmethod
    def choose_many(self, message: str, choices: Choices) -> list[str]:
        """Ask for any number of choices. An empty list means cancel."""

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question. Backing out counts as no."""


class RichTerminal(Terminal):
    """Styled terminal using rich for output and InquirerPy for prompts."""

    def __init__(self, settings: Settings, console: Optional[Console] = None) -> None:
        self.settings = settings
        self.console = console or Console()

    def render_panel(self, body: str, title: str = "", style: str = "") -> None:
        self.console.print(
            Panel(
                body,
                title=title or None,
                title_align="left",
                border_style=style or self.settings.palette.primary,
                padding=(1, 2),
                expand=False,
            )
        )

    def message(self, text: str, style: str = "") -> None:
        self.console.print(text, style=style or None)

    def choose_one(self, message: str, choices: Choices) -> Optional[str]:
        prompt = inquirer.select(
            message=message,
            choices=[Choice(value=value, name=label) for value, label in choices],
            qmark="›",
            mandatory=False,
            keybindings=BACK_KEYS,
        )
        return self._execute(prompt)

    def choose_many(self, message: str, choices: Choices) -> list[str]:
        prompt = inquirer.fuzzy(
            message=message,
            choices=[Choice(value=value, name=label) for value, label in choices],
            multiselect=True,
            qmark="›",
            instruction="(TAB to mark, ENTER to confirm, ESC to go back)",
            border=True,
            mandatory=False,
            keybindings={**BACK_KEYS, "toggle-all": [{"key": "c-a"}]},
        )
        return list(self._execute(prompt) or [])

    def confirm(self, message: str, default: bool = False) -> bool:
        prompt = inquirer.confirm(
            message=message,
            default=default,
            qmark="›",
            mandatory=False,
            keybindings=BACK_KEYS,
        )
        return bool(self._execute(prompt))

    @staticmethod
    def _execute(prompt: Any) -> Any:
        try:
            return prompt.execute()
        except KeyboardInterrupt:
            return None


class PlainTerminal(Terminal):
    """Line based terminal with numbered menus."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def render_panel(self, body: str, title: str = "", style: str = "") -> None:
        rule = "━" * 54
        typer.echo(rule)
        if title:
            typer.echo(f"  {Text.from_markup(title).plain}")
            typer.echo(rule)
        typer.echo(Text.from_markup(body).plain)
        typer.echo(rule)

    def message(self, text: str, style: str = "") -> None:
        typer.echo(Text.from_markup(text).plain)

    def choose_one(self, message: str, choices: Choices) -> Optional[str]:
        self._print_choices(message, choices)
        while True:
            answer = self._ask("Select option # (empty to go back)")
            if not answer:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1][0]
            typer.echo(f"Invalid option: {answer}")

    def choose_many(self, message: str, choices: Choices) -> list[str]:
        self._print_choices(message, choices)
        while True:
            answer = self._ask("Numbers separated by spaces or commas, 'all', or empty to go back")
            if not answer:
                return []
            indexes = self._parse_indexes(answer, len(choices))
            if indexes is not None:
                return [choices[i][0] for i in indexes]
            typer.echo(f"Invalid selection: {answer}")

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return typer.confirm(message, default=default)
        except typer.Abort:
            return False

    @staticmethod
    def _print_choices(message: str, choices: Choices) -> None:
        typer.echo(message)
        for idx, (_, label) in enumerate(choices, start=1):
            typer.echo(f" {idx:2d}. {label}")

    @staticmethod
    def _ask(prompt: str) -> Optional[str]:
        """Read one answer. Returns None on end of input."""
        try:
            return typer.prompt(prompt, default="", show_default=False).strip()
        except typer.Abort:
            return None

    @staticmethod
    def _parse_indexes(answer: str, count: int) -> Optional[list[int]]:
        """Turn "1 3,4" or "all" into sorted zero-based indexes."""
        if answer.lower() == "all":
            return list(range(count))
        indexes = set()
        for token in answer.replace(",", " ").split():
            if not token.isdigit() or not 1 <= int(token) <= count:
                return None
            indexes.add(int(token) - 1)
        return sorted(indexes)


def select_terminal(settings: Settings) -> Terminal:
    """Pick the terminal variant once, based on whether we can prompt interactively."""
    if sys.stdin.isatty() and sys.stdout.isatty():
        logger.debug("Using rich terminal")
        return RichTerminal(settings)
    logger.debug("Using plain terminal")
    return PlainTerminal(settings)
