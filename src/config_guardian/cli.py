#!/usr/bin/env python3
"""Config Guardian CLI.

Usage:
    config-guardian [--repo DIR] [--track PATH ...] [--config FILE] [--no-push] [-v]

Typically called from an interactive shell startup file:

    # ~/.zshrc
    config-guardian

Environment variables:
    CONFIG_GUARDIAN_REPO=~/.claude     Config repository to watch
    CONFIG_GUARDIAN_TRACKED=a,b        Tracked paths inside the repository
    CONFIG_GUARDIAN_PUSH=0             Commit without pushing
    CONFIG_GUARDIAN_DISABLE=1          Turn the guardian off
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigError, load_config
from .guardian import ConfigGuardian, TerminalPrompter
from .utils.logging_config import setup_logging
from .vcs import GitManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="config-guardian",
        description="Offer to commit and push pending edits in a config repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Watch ~/.claude with the default tracked paths
    config-guardian

    # Watch another repository and only one file
    config-guardian --repo ~/dotfiles --track .zshrc

    # Commit locally, never push
    config-guardian --no-push
""",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        help="Config repository directory (default: ~/.claude)",
    )
    parser.add_argument(
        "--track",
        action="append",
        metavar="PATH",
        help="Tracked path inside the repository; repeat to track several",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file (default: ~/.config/config-guardian/config.yaml)",
    )
    parser.add_argument(
        "--no-push",
        action="store_true",
        help="Commit without pushing to the upstream",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None, prompter: Optional[TerminalPrompter] = None) -> int:
    """Main entry point for the guardian CLI."""
    args = build_parser().parse_args(argv)
    prompter = prompter or TerminalPrompter()

    # Scripts, CI and non-login shells get no output and no log file
    if not prompter.is_interactive():
        return 0

    setup_logging(verbose=args.verbose)

    try:
        config = load_config(
            args.config,
            repo_path=args.repo,
            tracked_paths=tuple(args.track) if args.track else None,
            push=False if args.no_push else None,
        )
    except ConfigError as e:
        logger.error(f"Config Guardian disabled: {e}")
        return 0

    vcs = GitManager(config.repo_path, push_timeout=config.push_timeout)
    guardian = ConfigGuardian(config, vcs, prompter)

    try:
        outcome = guardian.run(interactive=True)
    except KeyboardInterrupt:
        prompter.say("")
        logger.debug("Interrupted by user")
        return 130

    logger.debug(f"Finished: {outcome.status.value} (exit {outcome.exit_code})")
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
