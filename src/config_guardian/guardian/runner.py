"""Config Guardian: one pass over the config repository.

Phases:
1. PRECONDITIONS - enabled, interactive session, repository present
2. SCAN          - diff tracked paths against HEAD (staged and unstaged)
3. CONFLICTS     - stop if anything is unmerged
4. DISCLOSURE    - show tracked-path status and diff
5. COMMIT        - consent, message, stage, commit, push
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import GuardianConfig
from ..vcs import GitError, VersionControl
from .disclosure import render_disclosure
from .prompt import Prompter
from .scanner import ChangeScanner, ChangeSet
from .workflow import EXIT_OK, CommitWorkflow, WorkflowResult

logger = logging.getLogger(__name__)

CONFLICT_WARNING = "⚠️  Merge conflicts detected in {name} - resolve them first"


class Precondition(Enum):
    """Outcome of the precondition check."""
    PROCEED = "proceed"
    DISABLED = "disabled"
    NOT_INTERACTIVE = "not_interactive"
    MISSING_DIRECTORY = "missing_directory"
    NOT_A_REPOSITORY = "not_a_repository"


class RunStatus(Enum):
    """How a guardian run ended."""
    SKIPPED = "skipped"
    NO_CHANGES = "no_changes"
    CONFLICTS = "conflicts"
    COMPLETED = "completed"


@dataclass
class RunOutcome:
    """Result of a guardian run."""
    status: RunStatus
    exit_code: int = EXIT_OK
    precondition: Precondition = Precondition.PROCEED
    change_set: Optional[ChangeSet] = None
    workflow: Optional[WorkflowResult] = None


def check_preconditions(
    config: GuardianConfig,
    vcs: VersionControl,
    interactive: bool,
) -> Precondition:
    """Decide whether the guardian should run at all."""
    if not config.enabled:
        return Precondition.DISABLED
    if not interactive:
        return Precondition.NOT_INTERACTIVE
    if not config.repo_path.is_dir():
        return Precondition.MISSING_DIRECTORY
    if not vcs.is_repository():
        return Precondition.NOT_A_REPOSITORY
    return Precondition.PROCEED


class ConfigGuardian:
    """Watches tracked config paths and offers to commit pending edits."""

    def __init__(
        self,
        config: GuardianConfig,
        vcs: VersionControl,
        prompter: Prompter,
        workflow: Optional[CommitWorkflow] = None,
    ):
        self.config = config
        self.vcs = vcs
        self.prompter = prompter
        self.scanner = ChangeScanner(vcs, config.tracked_paths)
        self.workflow = workflow or CommitWorkflow(vcs, prompter, config)

    def run(self, interactive: bool) -> RunOutcome:
        precondition = check_preconditions(self.config, self.vcs, interactive)
        if precondition is not Precondition.PROCEED:
            logger.debug(f"Skipping: {precondition.value}")
            return RunOutcome(status=RunStatus.SKIPPED, precondition=precondition)

        try:
            change_set = self.scanner.scan()
            conflicts = self.vcs.unmerged_paths()
        except GitError as e:
            logger.warning(f"Could not inspect {self.config.repo_path}: {e}")
            return RunOutcome(status=RunStatus.SKIPPED)

        if conflicts:
            logger.info(f"Unmerged paths: {conflicts}")
            self.prompter.say(CONFLICT_WARNING.format(name=self.config.repo_path.name))
            return RunOutcome(status=RunStatus.CONFLICTS, change_set=change_set)

        if change_set.is_empty:
            return RunOutcome(status=RunStatus.NO_CHANGES, change_set=change_set)

        self.prompter.say(render_disclosure(change_set))

        result = self.workflow.run(change_set)
        return RunOutcome(
            status=RunStatus.COMPLETED,
            exit_code=result.exit_code,
            change_set=change_set,
            workflow=result,
        )
