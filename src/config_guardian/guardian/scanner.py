"""Change detection for tracked config paths."""
import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..vcs import StatusEntry, VersionControl

logger = logging.getLogger(__name__)

# Status codes that do not represent a change git can diff
_UNVERSIONED = ("??", "!!")


def path_in_entry(path: str, entry: str) -> bool:
    """True if ``path`` is the tracked entry itself or lives beneath it."""
    return path == entry or path.startswith(entry.rstrip("/") + "/")


@dataclass
class ChangeSet:
    """Tracked-path differences between working state and HEAD."""
    tracked_paths: tuple[str, ...]
    entries: list[StatusEntry] = field(default_factory=list)
    worktree_diff: str = ""
    index_diff: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.worktree_diff.strip() and not self.index_diff.strip()

    @property
    def diff(self) -> str:
        """Diff shown to the operator.

        The working tree diff already includes staged edits; the index
        diff only matters when the working tree was reverted to HEAD.
        """
        return self.worktree_diff if self.worktree_diff.strip() else self.index_diff

    def changed_tracked_paths(self) -> list[str]:
        """Tracked entries containing at least one versioned change, in whitelist order."""
        changed = []
        for entry in self.tracked_paths:
            for status in self.entries:
                if status.code in _UNVERSIONED:
                    continue
                candidates = [status.path] + ([status.orig_path] if status.orig_path else [])
                if any(path_in_entry(p, entry) for p in candidates):
                    changed.append(entry)
                    break
        return changed


class ChangeScanner:
    """Computes a ChangeSet for the tracked paths. Never mutates the repository."""

    def __init__(self, vcs: VersionControl, tracked_paths: Sequence[str]):
        self.vcs = vcs
        self.tracked_paths = tuple(tracked_paths)

    def scan(self) -> ChangeSet:
        paths = list(self.tracked_paths)
        worktree_diff = self.vcs.diff_worktree(paths)
        index_diff = self.vcs.diff_index(paths)

        change_set = ChangeSet(
            tracked_paths=self.tracked_paths,
            worktree_diff=worktree_diff,
            index_diff=index_diff,
        )
        if change_set.is_empty:
            logger.debug("No changes in tracked paths")
            return change_set

        # Status output must stay within the whitelist
        change_set.entries = [
            entry for entry in self.vcs.status(paths)
            if any(
                path_in_entry(entry.path, tracked) for tracked in self.tracked_paths
            )
        ]
        logger.info(
            f"Tracked changes detected: {len(change_set.entries)} status entries"
        )
        return change_set
