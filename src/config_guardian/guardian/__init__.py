"""Change detection and commit workflow for the config repository.

This package provides:
- ConfigGuardian: Runs the precondition, scan, conflict, disclosure and commit phases
- ChangeScanner/ChangeSet: Tracked-path differences against HEAD
- CommitWorkflow: Consent, stage, commit and push state machine
- Prompter/TerminalPrompter: Operator I/O
"""
from .disclosure import render_disclosure
from .prompt import Prompter, TerminalPrompter
from .runner import (
    ConfigGuardian,
    Precondition,
    RunOutcome,
    RunStatus,
    check_preconditions,
)
from .scanner import ChangeScanner, ChangeSet
from .workflow import (
    CommitRequest,
    CommitState,
    CommitWorkflow,
    WorkflowResult,
)

__all__ = [
    "ConfigGuardian",
    "Precondition",
    "RunOutcome",
    "RunStatus",
    "check_preconditions",
    "ChangeScanner",
    "ChangeSet",
    "CommitRequest",
    "CommitState",
    "CommitWorkflow",
    "WorkflowResult",
    "Prompter",
    "TerminalPrompter",
    "render_disclosure",
]
