"""Version control protocol interface."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class StatusEntry:
    """One line of short status output.

    ``code`` is the two-character XY status (e.g. " M", "A ", "??", "UU").
    """
    code: str
    path: str
    orig_path: Optional[str] = None

    def __str__(self) -> str:
        if self.orig_path:
            return f"{self.code} {self.orig_path} -> {self.path}"
        return f"{self.code} {self.path}"


@runtime_checkable
class VersionControl(Protocol):
    """Operations the guardian needs from the config repository.

    Every path argument is relative to the repository root. Failures
    raise ``GitError``.
    """

    @property
    def repo_path(self) -> Path:
        """Repository working tree root."""
        ...

    def is_repository(self) -> bool:
        """True if repo_path is inside a git working tree."""
        ...

    def diff_worktree(self, paths: Sequence[str]) -> str:
        """Unified diff of the working tree against HEAD, limited to paths."""
        ...

    def diff_index(self, paths: Sequence[str]) -> str:
        """Unified diff of the index against HEAD, limited to paths."""
        ...

    def status(self, paths: Sequence[str]) -> list[StatusEntry]:
        """Short status limited to paths."""
        ...

    def unmerged_paths(self) -> list[str]:
        """All paths in the repository with unresolved merge status."""
        ...

    def stage(self, paths: Sequence[str]) -> None:
        """Add paths (including deletions) to the index."""
        ...

    def commit(self, message: str, paths: Optional[Sequence[str]] = None) -> str:
        """Commit the index, or only ``paths`` when given. Returns the new commit hash."""
        ...

    def push(self) -> None:
        """Push the current branch to its upstream."""
        ...
