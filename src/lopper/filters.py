"""Candidate branch filtering."""

import re
from typing import Iterable, Sequence


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile exclusion patterns.

    A pattern that is not a valid regular expression is matched literally.
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error:
            compiled.append(re.compile(re.escape(pattern)))
    return compiled


def is_excluded(branch_name: str, protected: Sequence[str], patterns: Sequence[re.Pattern[str]]) -> bool:
    """Check if a branch is protected or matches an exclusion pattern."""
    if branch_name in protected:
        return True
    return any(pattern.search(branch_name) for pattern in patterns)


def filter_candidates(branches: Iterable[str], protected: Sequence[str], patterns: Iterable[str]) -> list[str]:
    """Return branches eligible for deletion, keeping their original order."""
    compiled = compile_patterns(patterns)
    return [branch for branch in branches if not is_excluded(branch, protected, compiled)]
