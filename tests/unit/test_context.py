"""Unit tests for the workspace context (identity resolver)."""

from __future__ import annotations

from pathlib import Path

from deploy_guard.config import default_config
from deploy_guard.conflict import IdentityResolver
from deploy_guard.context import WorkspaceContext


def test_configured_username_wins() -> None:
    config = default_config()
    config["org"]["target_username"] = "cfg@example.com"

    context = WorkspaceContext.from_config(config, environ={"SF_TARGET_ORG": "env@example.com"})

    assert isinstance(context, IdentityResolver)
    assert context.username == "cfg@example.com"
    assert context.workspace_root == Path(".")
    assert context.cache_dir == Path(".deploy_guard/cache")


def test_falls_back_to_cli_environment() -> None:
    context = WorkspaceContext.from_config(
        default_config(),
        environ={"SF_TARGET_ORG": "  ", "SFDX_DEFAULTUSERNAME": "legacy@example.com"},
    )
    assert context.username == "legacy@example.com"


def test_missing_identity_is_none() -> None:
    context = WorkspaceContext.from_config(default_config(), environ={})
    assert context.username is None
    assert WorkspaceContext(Path("."), Path("c"), "").username is None
