"""Branch deletion with per-branch safety checks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from lopper.logging_config import get_logger
from lopper.vcs import GitError, GitRepo

logger = get_logger(__name__)


class Outcome(Enum):
    """Result of trying to delete one branch."""

    DELETED = "deleted"
    NOT_FOUND = "not found"
    PROTECTED = "protected"
    CURRENT = "current branch"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        """Whether the branch was left alone by a safety check."""
        return self in (Outcome.NOT_FOUND, Outcome.PROTECTED, Outcome.CURRENT)


@dataclass(frozen=True)
class Check:
    """Result of a single validation check."""

    passed: bool
    outcome: Optional[Outcome] = None
    reason: str = ""


PASSED = Check(passed=True)


@dataclass(frozen=True)
class BranchOutcome:
    """What happened to one branch of a batch."""

    branch: str
    outcome: Outcome
    reason: str = ""


@dataclass
class DeletionReport:
    """Outcomes of one deletion batch."""

    outcomes: list[BranchOutcome] = field(default_factory=list)

    @property
    def deleted(self) -> int:
        """Number of branches deleted."""
        return sum(1 for o in self.outcomes if o.outcome is Outcome.DELETED)

    @property
    def failed(self) -> int:
        """Number of branches git failed to delete."""
        return sum(1 for o in self.outcomes if o.outcome is Outcome.FAILED)

    @property
    def skipped(self) -> int:
        """Number of branches skipped by a safety check."""
        return sum(1 for o in self.outcomes if o.outcome.is_skip)


def check_exists(repo: GitRepo, branch_name: str) -> Check:
    """The branch must still resolve to a local branch."""
    if repo.branch_exists(branch_name):
        return PASSED
    return Check(False, Outcome.NOT_FOUND, "branch no longer exists")


def check_not_protected(branch_name: str, protected: Sequence[str]) -> Check:
    """The branch must not be one of the protected names."""
    if branch_name in protected:
        return Check(False, Outcome.PROTECTED, "branch is protected")
    return PASSED


def check_not_current(repo: GitRepo, branch_name: str) -> Check:
    """The branch must not be checked out right now."""
    if branch_name == repo.get_current_branch_name():
        return Check(False, Outcome.CURRENT, "branch is checked out, switch to another branch first")
    return PASSED


def validate(repo: GitRepo, branch_name: str, protected: Sequence[str]) -> Check:
    """Run all safety checks in order, stopping at the first failure."""
    result = check_exists(repo, branch_name)
    if result.passed:
        result = check_not_protected(branch_name, protected)
    if result.passed:
        result = check_not_current(repo, branch_name)
    return result


def delete_branches(repo: GitRepo, branches: Iterable[str], protected: Sequence[str]) -> DeletionReport:
    """Delete branches one at a time, validating each right before deletion.

    A failure on one branch never stops the rest of the batch.
    """
    report = DeletionReport()
    for branch_name in branches:
        try:
            check = validate(repo, branch_name, protected)
        except GitError as err:
            logger.warning("Cannot validate %s: %s", branch_name, err)
            report.outcomes.append(BranchOutcome(branch_name, Outcome.FAILED, str(err)))
            continue

        if not check.passed:
            logger.info("Skipping %s: %s", branch_name, check.reason)
            report.outcomes.append(BranchOutcome(branch_name, check.outcome, check.reason))
            continue

        try:
            repo.delete_branch(branch_name)
        except GitError as err:
            logger.warning("Failed to delete %s: %s", branch_name, err)
            report.outcomes.append(BranchOutcome(branch_name, Outcome.FAILED, str(err)))
            continue

        logger.info("Deleted %s", branch_name)
        report.outcomes.append(BranchOutcome(branch_name, Outcome.DELETED))

    return report
