"""Conflict collaborators: contracts plus the default detector, loader and view."""

from deploy_guard.conflict.collaborators import (
    ChoicePrompt,
    DeployLock,
    DiffVisualizer,
    IdentityResolver,
    MetadataLookup,
    OutputChannel,
    PromptChoice,
    RemoteDiffCollaborator,
    SnapshotLoader,
    TelemetrySink,
    TimestampDiffBuilder,
)
from deploy_guard.conflict.detector import (
    ConflictDetector,
    DirectoryMirrorRetriever,
    RemoteRetriever,
)
from deploy_guard.conflict.directory_differ import DEFAULT_EXCLUDES, diff_directories
from deploy_guard.conflict.snapshot_loader import (
    FileSnapshotLoader,
    SnapshotLoadError,
    parse_snapshot,
)
from deploy_guard.conflict.timestamp_detector import TimestampConflictDetector
from deploy_guard.conflict.view import ConflictView, ViewState

__all__ = [
    "ChoicePrompt",
    "ConflictDetector",
    "ConflictView",
    "DEFAULT_EXCLUDES",
    "DeployLock",
    "DirectoryMirrorRetriever",
    "DiffVisualizer",
    "FileSnapshotLoader",
    "IdentityResolver",
    "MetadataLookup",
    "OutputChannel",
    "PromptChoice",
    "RemoteDiffCollaborator",
    "RemoteRetriever",
    "SnapshotLoadError",
    "SnapshotLoader",
    "TelemetrySink",
    "TimestampConflictDetector",
    "TimestampDiffBuilder",
    "ViewState",
    "diff_directories",
    "parse_snapshot",
]
