"""Utility modules for logging and retries."""
from .logging_config import setup_logging, timed, perf_logger
from .retry import with_retry

__all__ = [
    "setup_logging",
    "timed",
    "perf_logger",
    "with_retry",
]
