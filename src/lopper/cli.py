"""Command line interface for lopper."""

import shutil
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich import print
from rich.console import Console
from rich.panel import Panel

from lopper import __version__
from lopper.config import Settings
from lopper.logging_config import get_logger, setup_logging
from lopper.terminal import select_terminal

app = typer.Typer(help="Interactively delete local git branches", add_completion=False)
console = Console()
logger = get_logger(__name__)

GIT_INSTALL_HINT = "Install git from https://git-scm.com/downloads and make sure it is on your PATH."


def fail(message: str, hint: str = "") -> NoReturn:
    """Report a fatal startup error and exit."""
    body = f"[red]❌ Error:[/red] {message}"
    if hint:
        body += f"\n\n{hint}"
    console.print(Panel(body, border_style="red", padding=(1, 2), expand=False))
    raise typer.Exit(code=1)


def version_callback(value: bool) -> None:
    """Print the version and exit when --version is given."""
    if value:
        print(f"lopper {__version__}")
        raise typer.Exit()


@app.command()
def main(
    patterns: Annotated[
        Optional[list[str]],
        typer.Argument(help="Extra patterns (substring or regex) for branches that must not be offered"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show what is being deleted")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Show debug logging")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
) -> None:
    """Pick local branches in the current repository and delete them safely."""
    setup_logging(verbose=verbose, debug=debug)

    if shutil.which("git") is None:
        fail("git was not found", GIT_INSTALL_HINT)

    # GitPython refuses to import without a git executable
    from lopper.preview import format_banner
    from lopper.session import Session
    from lopper.vcs import GitError, GitRepo

    settings = Settings.from_patterns(patterns)
    try:
        repo = GitRepo(Path.cwd())
        base_branch = repo.resolve_base_branch()
    except GitError as err:
        fail(str(err), "Run lop from inside a git working tree.")

    terminal = select_terminal(settings)
    terminal.render_panel(format_banner(settings, base_branch), style=settings.palette.primary)

    reports = Session(repo, terminal, settings, base_branch).run()
    logger.info("Deleted %d branch(es) in %d batch(es)", sum(r.deleted for r in reports), len(reports))
    terminal.message("Bye 👋")


if __name__ == "__main__":
    app()
