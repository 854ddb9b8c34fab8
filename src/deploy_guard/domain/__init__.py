"""Domain value types: check results, local components and the diff model."""

from deploy_guard.domain.diffs import (
    ComponentDiff,
    DirectoryDiffResults,
    SnapshotComponent,
    SnapshotResult,
)
from deploy_guard.domain.models import (
    CancelResponse,
    CheckResult,
    ConflictDetectionConfig,
    ContinueResponse,
    LocalComponent,
    OneOrMany,
    ResponseType,
    is_continue,
)

__all__ = [
    "CancelResponse",
    "CheckResult",
    "ComponentDiff",
    "ConflictDetectionConfig",
    "ContinueResponse",
    "DirectoryDiffResults",
    "LocalComponent",
    "OneOrMany",
    "ResponseType",
    "SnapshotComponent",
    "SnapshotResult",
    "is_continue",
]
