"""Interactive session: menu, selection, confirmation and deletion loop."""

from enum import Enum
from typing import Callable

from lopper.config import Settings
from lopper.deletion import DeletionReport, delete_branches
from lopper.filters import filter_candidates
from lopper.logging_config import get_logger
from lopper.preview import format_branch_preview, format_choice_label, format_help, format_protected, format_summary
from lopper.terminal import Terminal
from lopper.vcs import GitRepo

logger = get_logger(__name__)


class State(Enum):
    """Session states."""

    MAIN_MENU = "main menu"
    SELECTING = "selecting"
    CONFIRMING = "confirming"
    DELETING = "deleting"
    SHOW_PROTECTED = "show protected"
    SHOW_HELP = "show help"
    EXIT = "exit"


MENU_CHOICES = [
    (State.SELECTING.value, "🗑  Delete branches"),
    (State.SHOW_PROTECTED.value, "🛡  Show protected branches"),
    (State.SHOW_HELP.value, "❓ Help"),
    (State.EXIT.value, "🚪 Exit"),
]


class Session:
    """Drives the menu loop until the user exits.

    Branch lists and previews are read from the repository every time they are
    shown, since branches can change between screens.
    """

    def __init__(self, repo: GitRepo, terminal: Terminal, settings: Settings, base_branch: str) -> None:
        self.repo = repo
        self.terminal = terminal
        self.settings = settings
        self.base_branch = base_branch
        self.selection: list[str] = []
        self.reports: list[DeletionReport] = []
        self._handlers: dict[State, Callable[[], State]] = {
            State.MAIN_MENU: self.main_menu,
            State.SELECTING: self.select,
            State.CONFIRMING: self.confirm,
            State.DELETING: self.delete,
            State.SHOW_PROTECTED: self.show_protected,
            State.SHOW_HELP: self.show_help,
        }

    def run(self) -> list[DeletionReport]:
        """Run the session. Returns the report of every batch deleted."""
        state = State.MAIN_MENU
        while state is not State.EXIT:
            logger.debug("Entering %s", state.value)
            state = self._handlers[state]()
        return self.reports

    def candidates(self) -> list[str]:
        """Local branches that may be offered for deletion right now."""
        return filter_candidates(self.repo.get_local_branches(), self.settings.protected, self.settings.exclude_patterns)

    def main_menu(self) -> State:
        """Offer the top level actions; backing out exits."""
        choice = self.terminal.choose_one("What would you like to do?", MENU_CHOICES)
        if choice is None:
            return State.EXIT
        return State(choice)

    def select(self) -> State:
        """Let the user pick branches from the current candidates."""
        self.selection = []
        candidates = self.candidates()
        if not candidates:
            self.terminal.message("No branches available for deletion ✨", style=self.settings.palette.success)
            return State.MAIN_MENU

        choices = []
        for branch in candidates:
            info = self.repo.get_branch_summary(branch, self.base_branch)
            choices.append((branch, format_choice_label(info)))

        self.selection = self.terminal.choose_many("Select the branches to DELETE:", choices)
        if not self.selection:
            self.terminal.message("No branches selected", style=self.settings.palette.warning)
            return State.MAIN_MENU
        return State.CONFIRMING

    def confirm(self) -> State:
        """Preview every selected branch and ask before deleting."""
        for branch in self.selection:
            info = self.repo.get_branch_info(
                branch, self.base_branch, self.settings.max_files_preview, self.settings.max_commits_preview
            )
            self.terminal.render_panel(format_branch_preview(info, self.settings))

        count = len(self.selection)
        question = f"Delete {count} branch(es)? Unmerged commits will be lost."
        if self.terminal.confirm(question, default=False):
            return State.DELETING

        self.terminal.message("Operation cancelled 🛑", style=self.settings.palette.warning)
        self.selection = []
        return State.MAIN_MENU

    def delete(self) -> State:
        """Delete the confirmed selection and show the summary."""
        report = delete_branches(self.repo, self.selection, self.settings.protected)
        self.reports.append(report)
        self.selection = []

        body, border = format_summary(report, self.settings)
        self.terminal.render_panel(body, title="Deletion summary", style=border)
        return State.MAIN_MENU

    def show_protected(self) -> State:
        """Show the base branch, protected names and exclusion patterns."""
        self.terminal.render_panel(
            format_protected(self.settings, self.base_branch),
            title="Protected branches",
            style=self.settings.palette.info,
        )
        return State.MAIN_MENU

    def show_help(self) -> State:
        """Show the help screen."""
        self.terminal.render_panel(format_help(self.settings), title="Help", style=self.settings.palette.primary)
        return State.MAIN_MENU
