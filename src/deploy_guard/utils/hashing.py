"""
deploy-guard — hashing utilities

File: src/deploy_guard/utils/hashing.py
Last updated: 2026-10-19

Purpose
- Provide deterministic SHA-256 helpers for bytes and files.
- Build content manifests of a project tree for directory comparison.

Functional requirements
- Manifest paths are relative POSIX strings with deterministic ordering.
- Excluded paths (fnmatch patterns on the relative path) never reach the manifest.

Non-functional requirements
- Standard library only; behavior is cross-platform deterministic.
"""

from __future__ import annotations

import fnmatch
import hashlib
import os
import stat
from collections.abc import Sequence
from pathlib import Path

PathLike = str | os.PathLike[str]

_FILE_READ_CHUNK_BYTES = 1024 * 1024

__all__ = [
    "create_manifest",
    "sha256_bytes",
    "sha256_file",
]


def sha256_bytes(data: bytes) -> str:
    """Return SHA-256 hex digest for raw bytes."""

    return hashlib.sha256(data).hexdigest()


def sha256_file(path: PathLike, *, chunk_size: int = _FILE_READ_CHUNK_BYTES) -> str:
    """Return SHA-256 hex digest for a file read in chunks."""

    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    digest = hashlib.sha256()
    with Path(path).open("rb") as file_handle:
        while True:
            chunk = file_handle.read(chunk_size)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def create_manifest(
    directory: PathLike, *, exclude: Sequence[str] = ()
) -> dict[str, str]:
    """
    Build a deterministic file manifest for ``directory``.

    The returned mapping contains:
    - key: relative POSIX path (``classes/Foo.cls``)
    - value: lowercase SHA-256 hex digest
    """

    root = Path(directory).resolve(strict=True)
    if not root.is_dir():
        raise NotADirectoryError(f"{root!s} is not a directory")

    manifest: dict[str, str] = {}
    for current_dir, dir_names, file_names in os.walk(root, topdown=True, followlinks=False):
        dir_names.sort()
        file_names.sort()
        current = Path(current_dir)
        for file_name in file_names:
            file_path = current / file_name
            try:
                mode = file_path.lstat().st_mode
            except FileNotFoundError:
                # Vanished during traversal; a rerun gives a stable snapshot.
                continue
            if not stat.S_ISREG(mode):
                continue
            rel_path = file_path.relative_to(root).as_posix()
            if _is_excluded(rel_path, exclude):
                continue
            manifest[rel_path] = sha256_file(file_path)

    return dict(sorted(manifest.items(), key=lambda item: item[0]))


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch.fnmatchcase(rel_path, pattern) for pattern in patterns)
