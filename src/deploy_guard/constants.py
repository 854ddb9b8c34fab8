"""Stable constants shared across the conflict gate."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
SNAPSHOT_SCHEMA_VERSION: Final[int] = 1

# Default runtime paths (relative to the workspace root unless overridden by config).
CACHE_DIR: Final[PurePosixPath] = PurePosixPath(".deploy_guard/cache")
LOG_DIR: Final[PurePosixPath] = PurePosixPath(".deploy_guard/logs")
SNAPSHOT_FILENAME: Final[str] = "snapshot.yaml"

# Overwrite prompt display window: entries listed after the current one.
OVERWRITE_PREVIEW_LIMIT: Final[int] = 10

# Every metadata component has a descriptor file named ``<name>.<suffix>-meta.xml``.
METADATA_DESCRIPTOR_TEMPLATE: Final[str] = ".{suffix}-meta.xml"

# Telemetry exception names.
OVERWRITE_PROMPT_EXCEPTION: Final[str] = "OverwriteComponentPromptException"
CONFLICT_DETECTION_EXCEPTION: Final[str] = "ConflictDetectionException"

__all__ = [
    "CACHE_DIR",
    "CONFIG_SCHEMA_VERSION",
    "CONFLICT_DETECTION_EXCEPTION",
    "LOG_DIR",
    "METADATA_DESCRIPTOR_TEMPLATE",
    "OVERWRITE_PREVIEW_LIMIT",
    "OVERWRITE_PROMPT_EXCEPTION",
    "SNAPSHOT_FILENAME",
    "SNAPSHOT_SCHEMA_VERSION",
]
