"""Workspace context: where the project lives and which org it targets."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

USERNAME_ENV_VARS: Final[tuple[str, ...]] = ("SF_TARGET_ORG", "SFDX_DEFAULTUSERNAME")


@dataclass(frozen=True, slots=True)
class WorkspaceContext:
    """Implements ``IdentityResolver``; an empty username means no default org."""

    workspace_root: Path
    cache_dir: Path
    target_username: str | None = None

    @property
    def username(self) -> str | None:
        return self.target_username or None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        environ: Mapping[str, str] | None = None,
    ) -> WorkspaceContext:
        """Build from loaded config; falls back to the CLI's own default-org env vars."""

        env = os.environ if environ is None else environ
        paths = config.get("paths", {})
        username = str(config.get("org", {}).get("target_username", "")).strip()
        if not username:
            username = next(
                (env[name].strip() for name in USERNAME_ENV_VARS if env.get(name, "").strip()),
                "",
            )
        return cls(
            workspace_root=Path(paths.get("workspace_root", ".")),
            cache_dir=Path(paths.get("cache_dir", ".deploy_guard/cache")),
            target_username=username or None,
        )


__all__ = ["USERNAME_ENV_VARS", "WorkspaceContext"]
