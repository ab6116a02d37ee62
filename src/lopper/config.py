"""Run configuration for lopper."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

DEFAULT_PROTECTED = ("main", "master", "development", "develop", "staging", "production")

MAX_FILES_PREVIEW = 10
MAX_COMMITS_PREVIEW = 20


@dataclass(frozen=True)
class Palette:
    """Colours used for styled output."""

    primary: str = "#7D56F4"
    success: str = "#02BA84"
    error: str = "#D62828"
    warning: str = "#F77F00"
    info: str = "#0077B6"


@dataclass(frozen=True)
class Settings:
    """Immutable settings for a single run."""

    protected: tuple[str, ...] = DEFAULT_PROTECTED
    exclude_patterns: tuple[str, ...] = ()
    max_files_preview: int = MAX_FILES_PREVIEW
    max_commits_preview: int = MAX_COMMITS_PREVIEW
    palette: Palette = field(default_factory=Palette)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.max_files_preview <= 0:
            raise ValueError(f"max_files_preview must be positive, got {self.max_files_preview}")
        if self.max_commits_preview <= 0:
            raise ValueError(f"max_commits_preview must be positive, got {self.max_commits_preview}")
        if any(not name.strip() for name in self.protected):
            raise ValueError("protected branch names cannot be empty")

    @classmethod
    def from_patterns(cls, patterns: Optional[Iterable[str]] = None) -> "Settings":
        """Build settings from the exclusion patterns given on the command line.

        Empty patterns are dropped since they would match every branch.
        """
        cleaned = tuple(p for p in (patterns or ()) if p)
        return cls(exclude_patterns=cleaned)
