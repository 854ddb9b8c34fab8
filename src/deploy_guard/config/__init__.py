"""
deploy-guard config package public API.

File: src/deploy_guard/config/__init__.py
Last updated: 2026-10-19

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``deploy_guard.toml`` + ``DEPLOY_GUARD_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from deploy_guard.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    effective_config,
    load_config,
)
from deploy_guard.config.schema import (
    DEFAULT_CONFIG,
    PATH_FIELDS,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    GuardConfig,
    assert_valid_config,
    conflict_detection_enabled,
    default_config,
    dump_redacted,
    merge_config,
    migration_guidance,
    validate_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "GuardConfig",
    "PATH_FIELDS",
    "assert_valid_config",
    "conflict_detection_enabled",
    "default_config",
    "dump_redacted",
    "effective_config",
    "load_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
