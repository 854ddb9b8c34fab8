"""Postcondition checkers run after parameters are gathered and before a deploy or retrieve."""

from deploy_guard.checks.base import (
    CompositePostconditionChecker,
    EmptyPostChecker,
    PostconditionChecker,
)
from deploy_guard.checks.batch_decision import (
    OverwriteChoice,
    apply_choice,
    build_dialog_message,
    build_dialog_options,
    fold_choices,
    prompt_overwrite,
)
from deploy_guard.checks.conflict_detection import (
    DEPLOY_MESSAGES,
    RETRIEVE_MESSAGES,
    ConflictChoice,
    ConflictDetectionChecker,
    ConflictDetectionMessages,
    TimestampConflictChecker,
)
from deploy_guard.checks.overwrite import OverwriteComponentPrompt

__all__ = [
    "CompositePostconditionChecker",
    "ConflictChoice",
    "ConflictDetectionChecker",
    "ConflictDetectionMessages",
    "DEPLOY_MESSAGES",
    "EmptyPostChecker",
    "OverwriteChoice",
    "OverwriteComponentPrompt",
    "PostconditionChecker",
    "RETRIEVE_MESSAGES",
    "TimestampConflictChecker",
    "apply_choice",
    "build_dialog_message",
    "build_dialog_options",
    "fold_choices",
    "prompt_overwrite",
]
