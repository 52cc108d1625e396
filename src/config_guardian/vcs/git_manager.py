"""Git-backed implementation of the VersionControl protocol.

All commands run as ``git -C <repo_path> ...`` so results never depend on
the directory the guardian was launched from.
"""
import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..utils.logging_config import timed
from .protocol import StatusEntry

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Exception raised for git operation failures."""

    def __init__(self, message: str, args: Sequence[str] = (), stderr: str = ""):
        super().__init__(message)
        self.git_args = tuple(args)
        self.stderr = stderr


class GitManager:
    """
    Runs git commands against the config repository.

    Only the capabilities the guardian needs are exposed; every path
    argument is passed after ``--`` so it is always read as a pathspec.
    """

    def __init__(self, repo_path: Path, push_timeout: Optional[float] = 30.0):
        """
        Initialize GitManager.

        Args:
            repo_path: Root of the config repository working tree
            push_timeout: Seconds before a push is abandoned (None waits forever)
        """
        self._repo_path = Path(repo_path)
        self.push_timeout = push_timeout

    @property
    def repo_path(self) -> Path:
        return self._repo_path

    def _run_git(
        self,
        *args: str,
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """Run a git command in the repo directory."""
        cmd = ["git", "-C", str(self._repo_path)] + list(args)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,  # We'll handle errors ourselves
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out after {timeout}s", args) from e
        except OSError as e:
            raise GitError(f"Could not run git: {e}", args) from e

        if check and result.returncode != 0:
            stderr = result.stderr.strip()
            logger.debug(f"Git command failed ({result.returncode}): {stderr}")
            raise GitError(f"git {args[0]} failed: {stderr}", args, stderr)

        return result

    def is_repository(self) -> bool:
        """Check that repo_path is the top level of a git working tree."""
        if not self._repo_path.is_dir():
            return False

        try:
            result = self._run_git("rev-parse", "--show-toplevel")
        except GitError:
            return False

        toplevel = Path(result.stdout.strip())
        return toplevel.resolve() == self._repo_path.resolve()

    @timed("git_diff_worktree")
    def diff_worktree(self, paths: Sequence[str]) -> str:
        """Diff working tree against HEAD for the given paths."""
        return self._run_git("diff", "HEAD", "--", *paths).stdout

    @timed("git_diff_index")
    def diff_index(self, paths: Sequence[str]) -> str:
        """Diff index against HEAD for the given paths."""
        return self._run_git("diff", "--cached", "HEAD", "--", *paths).stdout

    @timed("git_status")
    def status(self, paths: Sequence[str]) -> list[StatusEntry]:
        """Short status for the given paths."""
        result = self._run_git("status", "--porcelain", "-z", "--", *paths)
        return parse_porcelain_status(result.stdout)

    @timed("git_unmerged")
    def unmerged_paths(self) -> list[str]:
        """List every unmerged path in the repository."""
        result = self._run_git("diff", "--name-only", "-z", "--diff-filter=U")
        return [p for p in result.stdout.split("\0") if p]

    @timed("git_add")
    def stage(self, paths: Sequence[str]) -> None:
        """Stage additions, modifications and deletions under paths."""
        if not paths:
            return
        self._run_git("add", "--all", "--", *paths)
        logger.info(f"Staged: {', '.join(paths)}")

    @timed("git_commit")
    def commit(self, message: str, paths: Optional[Sequence[str]] = None) -> str:
        """
        Commit the index.

        Args:
            message: Commit message
            paths: Restrict the commit to these paths; other staged
                changes stay in the index uncommitted

        Returns:
            Full hash of the new commit
        """
        args = ["commit", "--quiet", "-m", message]
        if paths:
            args.extend(["--only", "--", *paths])
        self._run_git(*args)

        result = self._run_git("rev-parse", "HEAD")
        commit_hash = result.stdout.strip()

        logger.info(f"Committed: {commit_hash[:8]} - {message.splitlines()[0]}")
        return commit_hash

    @timed("git_push")
    def push(self) -> None:
        """Push the current branch to its configured upstream."""
        self._run_git("push", "--quiet", timeout=self.push_timeout)
        logger.info("Pushed to upstream")


def parse_porcelain_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain -z`` output.

    Renames and copies carry their original path in the following
    NUL-separated field.
    """
    entries = []
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        item = fields[i]
        i += 1
        if len(item) < 4:
            continue

        code, path = item[:2], item[3:]
        orig_path = None
        if ("R" in code or "C" in code) and i < len(fields):
            orig_path = fields[i]
            i += 1

        entries.append(StatusEntry(code=code, path=path, orig_path=orig_path))

    return entries
