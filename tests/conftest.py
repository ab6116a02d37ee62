"""Test configuration and fixtures."""

import logging
from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

from lopper.config import Settings
from lopper.vcs import GitRepo
from lopper.logging_config import ColoredFormatter

AUTHOR = Actor("Test User", "test@example.com")


def commit_file(repo: Repo, name: str, content: str, message: str) -> None:
    """Write a file in the working tree and commit it."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message, author=AUTHOR, committer=AUTHOR)


@pytest.fixture
def repo_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with a few branches.

    - main: initial commit (checked out)
    - feature/a: two commits on top of main, unmerged
    - feature/b: same commit as main, merged
    - hotfix/1: one commit on top of main
    """
    path = tmp_path / "repo"
    path.mkdir()
    repo = Repo.init(path)
    repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    commit_file(repo, "README.md", "# Test Repository", "Initial commit")
    repo.git.branch("-M", "main")

    repo.git.checkout("-b", "feature/a")
    commit_file(repo, "src/a.py", "print('a')", "Add a")
    commit_file(repo, "docs/a.md", "# A", "Document a")

    repo.git.checkout("main")
    repo.git.branch("feature/b")

    repo.git.checkout("-b", "hotfix/1")
    commit_file(repo, "fix.txt", "fixed", "Fix it")

    repo.git.checkout("main")

    yield path


@pytest.fixture
def repo(repo_path: Path) -> GitRepo:
    return GitRepo(repo_path)


@pytest.fixture
def settings() -> Settings:
    return Settings(protected=("main",), exclude_patterns=("hotfix",))


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop console handlers installed by the CLI so they do not outlive a test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, ColoredFormatter):
            root.removeHandler(handler)
