"""Guardian configuration.

Environment variables:
- CONFIG_GUARDIAN_REPO: Config repository directory (default: ~/.claude)
- CONFIG_GUARDIAN_TRACKED: Comma-separated tracked paths
- CONFIG_GUARDIAN_PUSH: Set to "0" to skip publishing
- CONFIG_GUARDIAN_PUSH_ATTEMPTS: Push attempts before giving up (default: 2)
- CONFIG_GUARDIAN_PUSH_TIMEOUT: Seconds before a push is abandoned (default: 30)
- CONFIG_GUARDIAN_DISABLE: Set to "1" to turn the guardian off
- CONFIG_GUARDIAN_CONFIG: YAML config file location
"""
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_REPO_DIR = Path.home() / ".claude"

# Paths inside the config repository the guardian may observe and stage
DEFAULT_TRACKED_PATHS = (
    "CLAUDE.md",
    "plugins",
    "skills",
    "settings.json",
)

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "config-guardian" / "config.yaml"


class ConfigError(ValueError):
    """Raised for an invalid guardian configuration."""
    pass


def normalize_tracked_paths(paths: Iterable[str]) -> tuple[str, ...]:
    """Validate tracked paths and drop duplicates, keeping first-seen order.

    Raises:
        ConfigError: If the set is empty or a path escapes the repository
    """
    result: list[str] = []
    for raw in paths:
        path = str(raw).strip()
        if not path:
            continue
        pure = PurePosixPath(path)
        if pure.is_absolute() or ".." in pure.parts:
            raise ConfigError(f"Tracked path must stay inside the repository: {path}")
        normalized = str(pure)
        if normalized == ".":
            raise ConfigError("Tracking the whole repository is not allowed")
        if normalized not in result:
            result.append(normalized)

    if not result:
        raise ConfigError("At least one tracked path is required")
    return tuple(result)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class GuardianConfig:
    """Guardian configuration."""
    repo_path: Path = field(default_factory=lambda: DEFAULT_REPO_DIR)
    tracked_paths: tuple[str, ...] = DEFAULT_TRACKED_PATHS
    push: bool = True
    push_attempts: int = 2
    push_timeout: float = 30.0
    enabled: bool = True

    def __post_init__(self):
        self.repo_path = Path(self.repo_path).expanduser()
        self.tracked_paths = normalize_tracked_paths(self.tracked_paths)
        if self.push_attempts < 1:
            raise ConfigError(f"push_attempts must be at least 1, got {self.push_attempts}")
        if self.push_timeout <= 0:
            raise ConfigError(f"push_timeout must be positive, got {self.push_timeout}")

    def with_overrides(self, **overrides: Any) -> "GuardianConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_mapping(cls, data: dict, base: Optional["GuardianConfig"] = None) -> "GuardianConfig":
        """Apply a parsed YAML mapping on top of ``base`` (or the defaults)."""
        base = base or cls()
        unknown = set(data) - {
            "repo_path", "tracked_paths", "push", "push_attempts", "push_timeout", "enabled",
        }
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        tracked = data.get("tracked_paths")
        if tracked is not None and not isinstance(tracked, list):
            raise ConfigError("tracked_paths must be a list of paths")

        try:
            return base.with_overrides(
                repo_path=data.get("repo_path"),
                tracked_paths=tuple(tracked) if tracked is not None else None,
                push=_parse_bool(data["push"]) if "push" in data else None,
                push_attempts=int(data["push_attempts"]) if "push_attempts" in data else None,
                push_timeout=float(data["push_timeout"]) if "push_timeout" in data else None,
                enabled=_parse_bool(data["enabled"]) if "enabled" in data else None,
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e

    @classmethod
    def from_file(cls, path: Path, base: Optional["GuardianConfig"] = None) -> "GuardianConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        logger.debug(f"Loaded config file {path}")
        return cls.from_mapping(data, base)

    @classmethod
    def from_env(cls, base: Optional["GuardianConfig"] = None) -> "GuardianConfig":
        """Apply environment variables on top of ``base`` (or the defaults)."""
        base = base or cls()
        env = os.environ

        tracked = env.get("CONFIG_GUARDIAN_TRACKED")
        try:
            return base.with_overrides(
                repo_path=env.get("CONFIG_GUARDIAN_REPO") or None,
                tracked_paths=tuple(tracked.split(",")) if tracked else None,
                push=_parse_bool(env["CONFIG_GUARDIAN_PUSH"]) if "CONFIG_GUARDIAN_PUSH" in env else None,
                push_attempts=(
                    int(env["CONFIG_GUARDIAN_PUSH_ATTEMPTS"])
                    if "CONFIG_GUARDIAN_PUSH_ATTEMPTS" in env else None
                ),
                push_timeout=(
                    float(env["CONFIG_GUARDIAN_PUSH_TIMEOUT"])
                    if "CONFIG_GUARDIAN_PUSH_TIMEOUT" in env else None
                ),
                enabled=False if env.get("CONFIG_GUARDIAN_DISABLE", "0") == "1" else None,
            )
        except ConfigError:
            raise
        except ValueError as e:
            raise ConfigError(f"Invalid environment value: {e}") from e


def find_config_file(explicit: Optional[Path] = None) -> Optional[Path]:
    """Locate the YAML config file, if any.

    An explicitly requested file must exist; the default location is optional.
    """
    if explicit is not None:
        return Path(explicit).expanduser()

    env_path = os.environ.get("CONFIG_GUARDIAN_CONFIG")
    if env_path:
        return Path(env_path).expanduser()

    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> GuardianConfig:
    """Build the effective configuration.

    Precedence: overrides (CLI) > environment > config file > defaults.
    """
    config = GuardianConfig()

    path = find_config_file(config_file)
    if path is not None:
        config = GuardianConfig.from_file(path, config)

    config = GuardianConfig.from_env(config)
    return config.with_overrides(**overrides)
