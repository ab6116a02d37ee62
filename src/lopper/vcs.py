"""Git repository operations."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import BadName, BadObject

from lopper.logging_config import get_logger

logger = get_logger(__name__)

UNKNOWN = "Unknown"
DATE_FORMAT = "%Y-%m-%d %H:%M"
BASE_CANDIDATES = ("main", "master")


class GitError(Exception):
    """Git operation error."""


@dataclass
class BranchInfo:
    """Snapshot of a branch compared against the base branch."""

    name: str
    base: str
    author: str = UNKNOWN
    last_commit_date: str = UNKNOWN
    last_commit_relative: str = UNKNOWN
    created_date: str = UNKNOWN
    ahead: int = 0
    behind: int = 0
    merged: bool = False
    changed_files: list[str] = field(default_factory=list)
    changed_files_total: int = 0
    recent_commits: list[str] = field(default_factory=list)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Open the repository containing ``path``."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Not inside a git repository: {path}") from err
        if self.repo.bare:
            raise GitError("Cannot operate on bare repository")

    def get_current_branch_name(self) -> str:
        """Get current branch name, or an empty string on a detached HEAD."""
        try:
            try:
                return self.repo.active_branch.name
            except TypeError:
                return ""
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to get current branch: {err}") from err

    def get_local_branches(self) -> list[str]:
        """List local branch names, sorted by ref name."""
        try:
            output = self.repo.git.for_each_ref("refs/heads", "--format=%(refname)")
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {err}") from err
        # Full ref names, since the short form turns ambiguous names into "heads/<name>"
        return [ref.strip().removeprefix("refs/heads/") for ref in output.splitlines() if ref.strip()]

    def branch_exists(self, branch_name: str) -> bool:
        """Check whether a local branch with this exact name exists."""
        try:
            self.repo.git.show_ref("--verify", "--quiet", f"refs/heads/{branch_name}")
            return True
        except GitCommandError:
            return False

    def resolve_base_branch(self) -> str:
        """Pick the branch used for ahead/behind and merge comparisons.

        ``main`` wins over ``master``; without either the checked out branch is
        used, and ``HEAD`` on a detached checkout.
        """
        for candidate in BASE_CANDIDATES:
            if self.branch_exists(candidate):
                return candidate
        return self.get_current_branch_name() or "HEAD"

    def delete_branch(self, branch_name: str) -> None:
        """Force delete a local branch."""
        try:
            self.repo.git.branch("-D", branch_name)
        except GitCommandError as err:
            message = (err.stderr or "").strip().removeprefix("stderr:").strip().strip("'") or str(err)
            raise GitError(message) from err

    def get_branch_summary(self, branch_name: str, base: str) -> BranchInfo:
        """Collect the cheap part of the preview: divergence, merge status and last commit age."""
        info = BranchInfo(name=branch_name, base=base)
        ref = self._branch_ref(branch_name)
        base_ref = self._base_ref(base)

        info.ahead = self._count(f"{base_ref}..{ref}")
        info.behind = self._count(f"{ref}..{base_ref}")
        info.merged = self._is_ancestor(ref, base_ref)
        try:
            info.last_commit_relative = self.repo.git.log("-1", "--format=%ar", ref, "--").strip() or UNKNOWN
        except GitCommandError as err:
            logger.debug("No last commit for %s: %s", branch_name, err)
        return info

    def get_branch_info(
        self,
        branch_name: str,
        base: str,
        max_files: int = 10,
        max_commits: int = 20,
    ) -> BranchInfo:
        """Collect preview data for a branch.

        Every query runs on its own and falls back to a placeholder when it
        fails, so a branch without history still gets a partial preview.
        """
        info = self.get_branch_summary(branch_name, base)
        ref = self._branch_ref(branch_name)
        base_ref = self._base_ref(base)

        try:
            commit = self.repo.commit(ref)
            info.author = commit.author.name or UNKNOWN
            info.last_commit_date = commit.authored_datetime.strftime(DATE_FORMAT)
        except (GitCommandError, BadName, BadObject, ValueError) as err:
            logger.debug("No last commit for %s: %s", branch_name, err)

        info.created_date = self._first_commit_date(ref)

        try:
            files = [f for f in self.repo.git.diff("--name-only", f"{base_ref}...{ref}", "--").splitlines() if f]
            info.changed_files = files[:max_files]
            info.changed_files_total = len(files)
        except GitCommandError as err:
            logger.debug("No diff for %s against %s: %s", branch_name, base, err)

        try:
            history = self.repo.git.log("--oneline", "--graph", f"--max-count={max_commits}", ref, "--")
            info.recent_commits = history.splitlines()
        except GitCommandError as err:
            logger.debug("No history for %s: %s", branch_name, err)

        return info

    def is_merged(self, branch_name: str, base: str) -> bool:
        """Check if the branch tip is an ancestor of the base tip."""
        return self._is_ancestor(self._branch_ref(branch_name), self._base_ref(base))

    @staticmethod
    def _branch_ref(branch_name: str) -> str:
        """Full ref of a local branch, so a tag or path with the same name is never picked."""
        return f"refs/heads/{branch_name}"

    def _base_ref(self, base: str) -> str:
        """Full ref of the base branch; ``HEAD`` and other revisions are kept as given."""
        return self._branch_ref(base) if self.branch_exists(base) else base

    def _is_ancestor(self, ref: str, base_ref: str) -> bool:
        try:
            self.repo.git.merge_base("--is-ancestor", ref, base_ref)
            return True
        except GitCommandError:
            return False

    def _first_commit_date(self, ref: str) -> str:
        """Date of the earliest commit reachable from the ref."""
        try:
            dates = self.repo.git.log("--reverse", "--format=%ad", f"--date=format:{DATE_FORMAT}", ref, "--")
        except GitCommandError as err:
            logger.debug("No creation date for %s: %s", ref, err)
            return UNKNOWN
        first: Optional[str] = next((line for line in dates.splitlines() if line.strip()), None)
        return first.strip() if first else UNKNOWN

    def _count(self, revision_range: str) -> int:
        """Count commits in a revision range, 0 when git cannot resolve it."""
        try:
            return int(self.repo.git.rev_list("--count", revision_range, "--").strip())
        except (GitCommandError, ValueError) as err:
            logger.debug("Cannot count %s: %s", revision_range, err)
            return 0
