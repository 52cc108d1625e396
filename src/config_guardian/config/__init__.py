"""Guardian configuration."""
from .settings import (
    GuardianConfig,
    ConfigError,
    DEFAULT_REPO_DIR,
    DEFAULT_TRACKED_PATHS,
    load_config,
)

__all__ = [
    "GuardianConfig",
    "ConfigError",
    "DEFAULT_REPO_DIR",
    "DEFAULT_TRACKED_PATHS",
    "load_config",
]
