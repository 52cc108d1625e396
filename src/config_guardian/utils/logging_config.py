"""Logging configuration for Config Guardian.

Provides configurable logging with:
- File-based logging with rotation
- Console output on stderr, quiet by default so shell startup stays clean
- A timing decorator for git calls

Environment Variables:
    CONFIG_GUARDIAN_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: ERROR)
    CONFIG_GUARDIAN_LOG_FILE: Path to log file (default: ~/.config-guardian/guardian.log)
                              An empty value disables the file handler.
    CONFIG_GUARDIAN_LOG_MAX_SIZE: Max log file size in MB (default: 5)
    CONFIG_GUARDIAN_LOG_BACKUPS: Number of backup files to keep (default: 3)

Usage:
    from config_guardian.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("git_push")
    def push(self):
        ...
"""
import functools
import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("config_guardian.perf")
main_logger = logging.getLogger("config_guardian")

_handlers: list[logging.Handler] = []


def get_log_level() -> int:
    """Get console log level from environment."""
    level_str = os.environ.get("CONFIG_GUARDIAN_LOG_LEVEL", "ERROR").upper()
    return getattr(logging, level_str, logging.ERROR)


def get_log_file() -> Optional[Path]:
    """Get log file path from environment, None when file logging is off."""
    default_path = Path.home() / ".config-guardian" / "guardian.log"
    path_str = os.environ.get("CONFIG_GUARDIAN_LOG_FILE", str(default_path))
    if not path_str.strip():
        return None
    return Path(path_str).expanduser()


def _env_int(name: str, default: int) -> int:
    """Read a non-negative integer from the environment, falling back to default."""
    try:
        value = int(os.environ.get(name, str(default)))
    except ValueError:
        return default
    return value if value >= 0 else default


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler on stderr (ERROR+ by default, DEBUG when verbose)
    - File handler with rotation (DEBUG level - captures everything)

    Calling it again replaces the handlers installed by the previous call.
    """
    log_level = logging.DEBUG if verbose else get_log_level()
    log_file = get_log_file()
    max_size_mb = _env_int("CONFIG_GUARDIAN_LOG_MAX_SIZE", 5)
    backup_count = _env_int("CONFIG_GUARDIAN_LOG_BACKUPS", 3)

    for handler in _handlers:
        main_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-32s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    _handlers.append(console_handler)

    file_error: Optional[OSError] = None
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
        except OSError as e:
            file_error = e
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(main_format)
            _handlers.append(file_handler)

    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    main_logger.propagate = False
    for handler in _handlers:
        main_logger.addHandler(handler)

    if file_error is not None:
        main_logger.warning(f"File logging disabled: {file_error}")

    main_logger.debug(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def timed(operation: str):
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "git_diff", "git_push")

    Usage:
        @timed("git_commit")
        def commit(self, message):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(f"{operation:20s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}")
                raise

        return wrapper

    return decorator
