"""Text shown to the user: branch previews, summaries and info screens."""

from rich.markup import escape

from lopper import __version__
from lopper.config import Settings
from lopper.deletion import DeletionReport, Outcome
from lopper.vcs import BranchInfo

RULE = "━" * 33


def format_branch_preview(info: BranchInfo, settings: Settings) -> str:
    """Build the detailed preview of a branch as rich markup."""
    colors = settings.palette
    base = escape(info.base)
    merge_status = f"[{colors.success}]✓ Merged[/]" if info.merged else f"[{colors.warning}]Not merged[/]"

    lines = [
        f"[bold {colors.primary}]Branch: {escape(info.name)}[/]",
        f"[{colors.info}]{RULE}[/]",
        f"[{colors.warning}]📅 Created: {info.created_date}[/]",
        f"[{colors.warning}]👤 Last author: {escape(info.author)}[/]",
        f"[{colors.warning}]📝 Last commit: {info.last_commit_date} ({info.last_commit_relative})[/]",
        "",
        f"[{colors.info}]📊 Status:[/]",
        f"  • {info.ahead} commits ahead of {base}",
        f"  • {info.behind} commits behind {base}",
        f"  • State: {merge_status}",
    ]

    if info.changed_files:
        shown = len(info.changed_files)
        header = f"📁 Changed files ({shown} of {info.changed_files_total}):"
        lines += ["", f"[{colors.info}]{header}[/]"]
        lines += [f"  • {escape(path)}" for path in info.changed_files]

    lines += ["", f"[{colors.info}]📋 Recent commits (last {settings.max_commits_preview}):[/]"]
    if info.recent_commits:
        lines += [f"  {escape(entry)}" for entry in info.recent_commits]
    else:
        lines.append("  (no commits)")

    return "\n".join(lines)


def format_choice_label(info: BranchInfo) -> str:
    """One-line summary used in the branch picker."""
    merged = "merged" if info.merged else "unmerged"
    return f"{info.name}  ↑{info.ahead} ↓{info.behind}  {merged}  {info.last_commit_relative}"


def format_summary(report: DeletionReport, settings: Settings) -> tuple[str, str]:
    """Build the end-of-batch summary.

    Returns:
        A tuple of (markup, border color).
    """
    colors = settings.palette
    lines = []
    for item in report.outcomes:
        name = escape(item.branch)
        if item.outcome is Outcome.DELETED:
            lines.append(f"[{colors.success}]✓[/] {name}")
        elif item.outcome is Outcome.FAILED:
            lines.append(f"[{colors.error}]✗[/] {name}: {escape(item.reason)}")
        else:
            lines.append(f"[{colors.warning}]•[/] {name} skipped: {escape(item.reason)}")

    lines += [
        "",
        f"Deleted: [bold]{report.deleted}[/]  Failed: [bold]{report.failed}[/]  Skipped: [bold]{report.skipped}[/]",
    ]

    if report.failed:
        border = colors.error
    elif report.skipped:
        border = colors.warning
    else:
        border = colors.success
    return "\n".join(lines), border


def format_protected(settings: Settings, base_branch: str) -> str:
    """Describe what can never be offered for deletion in this run."""
    lines = [f"Base branch: [bold]{escape(base_branch)}[/]", "", "Protected branches:"]
    lines += [f"  • {escape(name)}" for name in settings.protected]
    lines += ["", "Exclusion patterns:"]
    if settings.exclude_patterns:
        lines += [f"  • {escape(pattern)}" for pattern in settings.exclude_patterns]
    else:
        lines.append("  (none)")
    return "\n".join(lines)


def format_help(settings: Settings) -> str:
    """Build the help screen: keys, protected branches, usage and version."""
    colors = settings.palette
    protected = "\n".join(f"  • {escape(name)}" for name in settings.protected)
    return f"""[bold {colors.success}]Navigation:[/]
  ↑↓        Move between options
  SPACE     Select/deselect (TAB in the branch picker)
  CTRL+A    Toggle all branches
  ENTER     Confirm selection
  ESC       Go back
  CTRL+C    Go back / quit

[bold {colors.success}]Protected branches:[/]
{protected}

[bold {colors.success}]Arguments:[/]
  lop [PATTERN]...

  Example: lop 1234 hotfix
  (excludes branches containing "1234" or "hotfix")

[bold {colors.info}]Version: {__version__}[/]"""


def format_banner(settings: Settings, base_branch: str) -> str:
    """Build the startup banner."""
    patterns = ", ".join(escape(p) for p in settings.exclude_patterns) or "none"
    return (
        f"[bold]lopper v{__version__}[/]\n\n"
        f"Base branch: {escape(base_branch)}\n"
        f"Protected: {', '.join(escape(p) for p in settings.protected)}\n"
        f"Exclusion patterns: {patterns}"
    )
