"""
deploy-guard — content conflict detector

File: src/deploy_guard/conflict/detector.py
Last updated: 2026-10-19

Purpose
- Implement ``RemoteDiffCollaborator`` by retrieving the manifest's components
  into a per-user cache directory and diffing that tree against the project.

Functional requirements
- The cache directory for a user is emptied before every retrieve so stale
  files never produce phantom conflicts.
- Filesystem work runs off the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import re
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from deploy_guard.conflict.directory_differ import DEFAULT_EXCLUDES, diff_directories
from deploy_guard.domain.diffs import DirectoryDiffResults
from deploy_guard.domain.models import ConflictDetectionConfig

logger = logging.getLogger(__name__)

_UNSAFE_DIR_CHARS = re.compile(r"[^A-Za-z0-9._@-]")


@runtime_checkable
class RemoteRetriever(Protocol):
    """Fetches the components named by ``manifest`` into ``destination``.

    Returns the directory that mirrors the project layout.
    """

    async def retrieve(self, username: str, manifest: str, destination: Path) -> Path: ...


class ConflictDetector:
    def __init__(
        self,
        retriever: RemoteRetriever,
        *,
        project_root: str | Path,
        cache_dir: str | Path,
        exclude: Sequence[str] = DEFAULT_EXCLUDES,
    ) -> None:
        self._retriever = retriever
        self._project_root = Path(project_root)
        self._cache_dir = Path(cache_dir)
        self._exclude = tuple(exclude)

    def cache_path_for(self, username: str) -> Path:
        return self._cache_dir / _UNSAFE_DIR_CHARS.sub("_", username) / "remote"

    async def compare_for_conflicts(self, config: ConflictDetectionConfig) -> DirectoryDiffResults:
        destination = self.cache_path_for(config.username)
        await asyncio.to_thread(_reset_directory, destination)

        logger.info(
            "retrieving remote components for comparison",
            extra={"manifest": config.manifest, "cache_dir": destination.as_posix()},
        )
        remote_root = await self._retriever.retrieve(config.username, config.manifest, destination)

        return await asyncio.to_thread(
            diff_directories, self._project_root, remote_root, exclude=self._exclude
        )


class DirectoryMirrorRetriever:
    """Serves a tree that was retrieved earlier (by another tool) as the remote side."""

    def __init__(self, source_dir: str | Path) -> None:
        self._source_dir = Path(source_dir)

    async def retrieve(self, username: str, manifest: str, destination: Path) -> Path:
        if not self._source_dir.is_dir():
            raise NotADirectoryError(f"remote mirror is not a directory: {self._source_dir}")
        await asyncio.to_thread(
            shutil.copytree, self._source_dir, destination, dirs_exist_ok=True
        )
        return destination


def _reset_directory(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


__all__ = ["ConflictDetector", "DirectoryMirrorRetriever", "RemoteRetriever"]
