"""Commit and publish state machine.

States:
    AWAIT_CONSENT -> DONE                (declined)
    AWAIT_CONSENT -> AWAIT_MESSAGE       (accepted)
    AWAIT_MESSAGE -> FAILED              (empty message)
    AWAIT_MESSAGE -> STAGE -> COMMIT     (message given)
    STAGE / COMMIT -> FAILED             (git failure)
    COMMIT -> PUBLISH -> DONE            (push failure is only a warning)
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config import GuardianConfig
from ..utils.retry import with_retry
from ..vcs import GitError, VersionControl
from .prompt import Prompter
from .scanner import ChangeSet

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = frozenset({"y", "yes"})

EXIT_OK = 0
EXIT_FAILED = 1


class CommitState(Enum):
    """Commit workflow states."""
    AWAIT_CONSENT = "await_consent"
    AWAIT_MESSAGE = "await_message"
    STAGE = "stage"
    COMMIT = "commit"
    PUBLISH = "publish"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CommitRequest:
    """Operator consent and commit message."""
    consent: bool
    message: str = ""


@dataclass
class WorkflowResult:
    """Outcome of one pass through the workflow."""
    state: CommitState
    exit_code: int
    visited: list[CommitState] = field(default_factory=list)
    commit_hash: Optional[str] = None
    pushed: bool = False
    error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.commit_hash is not None


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


class CommitWorkflow:
    """Drives consent, staging, commit and push for a non-empty ChangeSet."""

    def __init__(
        self,
        vcs: VersionControl,
        prompter: Prompter,
        config: GuardianConfig,
        retry_min_wait: float = 0.5,
        retry_max_wait: float = 4,
    ):
        self.vcs = vcs
        self.prompter = prompter
        self.config = config
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait

    def run(self, change_set: ChangeSet) -> WorkflowResult:
        result = WorkflowResult(state=CommitState.AWAIT_CONSENT, exit_code=EXIT_OK)
        request: Optional[CommitRequest] = None
        paths: list[str] = []
        state = CommitState.AWAIT_CONSENT

        while True:
            result.visited.append(state)
            result.state = state

            if state is CommitState.AWAIT_CONSENT:
                consent = self._ask_consent()
                if not consent:
                    self.prompter.say("Skipping commit.")
                    state = CommitState.DONE
                    continue
                request = CommitRequest(consent=True)
                state = CommitState.AWAIT_MESSAGE

            elif state is CommitState.AWAIT_MESSAGE:
                message = self._ask_message()
                if not message:
                    self.prompter.say("❌ Empty commit message - aborting.")
                    result.error = "empty commit message"
                    state = CommitState.FAILED
                    continue
                request.message = message
                state = CommitState.STAGE

            elif state is CommitState.STAGE:
                paths = change_set.changed_tracked_paths()
                if not paths:
                    self.prompter.say("❌ Nothing to stage in tracked paths.")
                    result.error = "nothing to stage"
                    state = CommitState.FAILED
                    continue
                try:
                    self.vcs.stage(paths)
                except GitError as e:
                    logger.error(f"Staging failed: {e}")
                    self.prompter.say("❌ Staging failed. Check git status for details.")
                    result.error = str(e)
                    state = CommitState.FAILED
                    continue
                state = CommitState.COMMIT

            elif state is CommitState.COMMIT:
                try:
                    result.commit_hash = self.vcs.commit(request.message, paths)
                except GitError as e:
                    logger.error(f"Commit failed: {e}")
                    self.prompter.say("❌ Commit failed. Check git status for details.")
                    result.error = str(e)
                    state = CommitState.FAILED
                    continue
                self.prompter.say(
                    f"✅ Changes committed successfully! ({result.commit_hash[:8]})"
                )
                state = CommitState.PUBLISH if self.config.push else CommitState.DONE

            elif state is CommitState.PUBLISH:
                result.pushed = self._publish()
                state = CommitState.DONE

            elif state is CommitState.DONE:
                result.exit_code = EXIT_OK
                return result

            elif state is CommitState.FAILED:
                result.exit_code = EXIT_FAILED
                return result

    def _ask_consent(self) -> bool:
        try:
            answer = self.prompter.ask("Commit these changes? (y/n): ")
        except EOFError:
            self.prompter.say("")
            return False
        return is_affirmative(answer)

    def _ask_message(self) -> str:
        self.prompter.say("")
        try:
            return self.prompter.ask("Commit message: ").strip()
        except EOFError:
            self.prompter.say("")
            return ""

    def _publish(self) -> bool:
        push = with_retry(
            max_attempts=self.config.push_attempts,
            min_wait=self.retry_min_wait,
            max_wait=self.retry_max_wait,
            exceptions=(GitError,),
        )(self.vcs.push)

        try:
            push()
        except GitError as e:
            logger.warning(f"Push failed: {e}")
            self.prompter.say("⚠️  Push failed - the commit is saved locally.")
            self.prompter.say(
                f"   Run 'git -C {self.vcs.repo_path} push' manually to publish."
            )
            return False

        self.prompter.say("🚀 Pushed to remote.")
        return True
