"""Version control access for the config repository."""
from .protocol import VersionControl, StatusEntry
from .git_manager import GitManager, GitError, parse_porcelain_status

__all__ = [
    "VersionControl",
    "StatusEntry",
    "GitManager",
    "GitError",
    "parse_porcelain_status",
]
