"""Shared fixtures: a fake VersionControl, scripted prompts and real git repositories."""
import subprocess
from pathlib import Path
from typing import Optional, Sequence

import pytest

from config_guardian.vcs import GitError, StatusEntry


class FakeVersionControl:
    """In-memory VersionControl recording every mutating call."""

    def __init__(
        self,
        repo_path: Path,
        worktree_diff: str = "",
        index_diff: str = "",
        entries: Optional[list[StatusEntry]] = None,
        unmerged: Optional[list[str]] = None,
        is_repo: bool = True,
        fail_stage: bool = False,
        fail_commit: bool = False,
        push_failures: int = 0,
    ):
        self._repo_path = repo_path
        self.worktree_diff = worktree_diff
        self.index_diff = index_diff
        self.entries = entries or []
        self.unmerged = unmerged or []
        self.is_repo = is_repo
        self.fail_stage = fail_stage
        self.fail_commit = fail_commit
        self.push_failures = push_failures

        self.staged: list[list[str]] = []
        self.commits: list[tuple[str, Optional[list[str]]]] = []
        self.push_calls = 0
        self.calls: list[str] = []

    @property
    def repo_path(self) -> Path:
        return self._repo_path

    @property
    def mutated(self) -> bool:
        return bool(self.staged or self.commits or self.push_calls)

    def is_repository(self) -> bool:
        self.calls.append("is_repository")
        return self.is_repo

    def diff_worktree(self, paths: Sequence[str]) -> str:
        self.calls.append("diff_worktree")
        return self.worktree_diff

    def diff_index(self, paths: Sequence[str]) -> str:
        self.calls.append("diff_index")
        return self.index_diff

    def status(self, paths: Sequence[str]) -> list[StatusEntry]:
        self.calls.append("status")
        return list(self.entries)

    def unmerged_paths(self) -> list[str]:
        self.calls.append("unmerged_paths")
        return list(self.unmerged)

    def stage(self, paths: Sequence[str]) -> None:
        self.calls.append("stage")
        if self.fail_stage:
            raise GitError("git add failed: pathspec did not match", ["add"])
        self.staged.append(list(paths))

    def commit(self, message: str, paths: Optional[Sequence[str]] = None) -> str:
        self.calls.append("commit")
        if self.fail_commit:
            raise GitError("git commit failed: hook rejected", ["commit"])
        self.commits.append((message, list(paths) if paths is not None else None))
        return f"{len(self.commits):040x}"

    def push(self) -> None:
        self.calls.append("push")
        self.push_calls += 1
        if self.push_calls <= self.push_failures:
            raise GitError("git push failed: could not resolve host", ["push"])


class ScriptedPrompter:
    """Prompter answering from a list; raises EOFError when answers run out."""

    def __init__(self, answers: Sequence[str] = ()):
        self.answers = list(answers)
        self.questions: list[str] = []
        self.output: list[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError("No scripted answer left")
        return self.answers.pop(0)

    def say(self, text: str) -> None:
        self.output.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.output)


SAMPLE_DIFF = """diff --git a/skills/review.md b/skills/review.md
index 3b18e51..a2c4f1d 100644
--- a/skills/review.md
+++ b/skills/review.md
@@ -1 +1,2 @@
 # Review
+Check the tests first.
"""


@pytest.fixture
def fake_vcs(tmp_path):
    """Factory for FakeVersionControl rooted at an existing directory."""
    def make(**kwargs) -> FakeVersionControl:
        return FakeVersionControl(tmp_path, **kwargs)
    return make


@pytest.fixture
def prompter():
    """Factory for ScriptedPrompter."""
    def make(*answers: str) -> ScriptedPrompter:
        return ScriptedPrompter(answers)
    return make


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real home directory and git identity."""
    for name in (
        "CONFIG_GUARDIAN_REPO",
        "CONFIG_GUARDIAN_TRACKED",
        "CONFIG_GUARDIAN_PUSH",
        "CONFIG_GUARDIAN_PUSH_ATTEMPTS",
        "CONFIG_GUARDIAN_PUSH_TIMEOUT",
        "CONFIG_GUARDIAN_DISABLE",
        "CONFIG_GUARDIAN_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_GUARDIAN_LOG_FILE", "")
    monkeypatch.setattr(
        "config_guardian.config.settings.DEFAULT_CONFIG_FILE",
        tmp_path / "no-such-config.yaml",
    )
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Guardian Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "guardian@test.local")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Guardian Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "guardian@test.local")


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so streams don't leak between tests."""
    yield
    from config_guardian.utils import logging_config

    for handler in logging_config._handlers:
        logging_config.main_logger.removeHandler(handler)
        handler.close()
    logging_config._handlers.clear()
    logging_config.main_logger.propagate = True


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stdout, failing the test on error."""
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, f"git {' '.join(args)} failed: {result.stderr}"
    return result.stdout


@pytest.fixture
def config_repo(tmp_path):
    """A committed repository shaped like ~/.claude."""
    repo = tmp_path / "dot-claude"
    repo.mkdir()
    git(repo, "init", "--quiet")

    (repo / "CLAUDE.md").write_text("# Instructions\n")
    (repo / "settings.json").write_text('{"theme": "dark"}\n')
    (repo / "skills").mkdir()
    (repo / "skills" / "review.md").write_text("# Review\n")
    (repo / "notes.txt").write_text("scratch\n")

    git(repo, "add", ".")
    git(repo, "commit", "--quiet", "-m", "Initial config")
    return repo


@pytest.fixture
def config_repo_with_remote(tmp_path, config_repo):
    """config_repo with a bare upstream the current branch tracks."""
    remote = tmp_path / "remote.git"
    subprocess.run(
        ["git", "init", "--quiet", "--bare", str(remote)],
        check=True,
        capture_output=True,
    )
    git(config_repo, "remote", "add", "origin", str(remote))
    git(config_repo, "push", "--quiet", "-u", "origin", "HEAD")
    return config_repo, remote
