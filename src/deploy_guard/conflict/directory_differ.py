"""Content comparison of a local project tree against a retrieved remote tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from deploy_guard.domain.diffs import ComponentDiff, DirectoryDiffResults
from deploy_guard.utils.hashing import PathLike, create_manifest

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = (
    ".deploy_guard/*",
    ".git/*",
    ".sfdx/*",
    ".sf/*",
    "*.DS_Store",
)


def diff_directories(
    local_root: PathLike,
    remote_root: PathLike,
    *,
    exclude: Sequence[str] = DEFAULT_EXCLUDES,
) -> DirectoryDiffResults:
    """Report every relative path present on both sides whose content hash differs.

    Files present on only one side are not conflicts: nothing would be clobbered.
    """

    local_path = Path(local_root)
    remote_path = Path(remote_root)
    local_manifest = create_manifest(local_path, exclude=exclude)
    remote_manifest = create_manifest(remote_path, exclude=exclude)

    different = frozenset(
        ComponentDiff(local_rel_path=rel_path, remote_rel_path=rel_path)
        for rel_path in sorted(local_manifest.keys() & remote_manifest.keys())
        if local_manifest[rel_path] != remote_manifest[rel_path]
    )
    logger.debug(
        "compared %d local and %d remote files: %d differ",
        len(local_manifest),
        len(remote_manifest),
        len(different),
    )
    return DirectoryDiffResults(
        different=different,
        scanned_local=len(local_manifest),
        scanned_remote=len(remote_manifest),
        local_root=local_path.as_posix(),
        remote_root=remote_path.as_posix(),
    )


__all__ = ["DEFAULT_EXCLUDES", "diff_directories"]
