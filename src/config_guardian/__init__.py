"""Config Guardian - offers to commit pending edits in a personal config repository."""
from .config import GuardianConfig, ConfigError, load_config
from .guardian import ConfigGuardian, RunOutcome, RunStatus
from .vcs import GitManager, GitError, VersionControl

__version__ = "0.1.0"

__all__ = [
    "GuardianConfig",
    "ConfigError",
    "load_config",
    "ConfigGuardian",
    "RunOutcome",
    "RunStatus",
    "GitManager",
    "GitError",
    "VersionControl",
]
