"""
deploy-guard — diff model

File: src/deploy_guard/domain/diffs.py
Last updated: 2026-10-19

Purpose
- Immutable outcome of comparing a local and a remote snapshot of a component set.
- Snapshot records consumed by the timestamp diff builder.

Functional requirements
- ``DirectoryDiffResults.different`` is unique by local relative path.
- Iteration for display is deterministic (sorted by local relative path).
- A diff can never report more differences than items scanned on either side.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NoReturn


@dataclass(frozen=True, slots=True)
class ComponentDiff:
    """One file that differs between the local project and the remote org."""

    local_rel_path: str
    remote_rel_path: str
    local_last_modified: str | None = None
    remote_last_modified: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "local_rel_path",
            _as_rel_path(self.local_rel_path, "ComponentDiff.local_rel_path"),
        )
        object.__setattr__(
            self,
            "remote_rel_path",
            _as_rel_path(self.remote_rel_path, "ComponentDiff.remote_rel_path"),
        )


@dataclass(frozen=True, slots=True)
class DirectoryDiffResults:
    """Outcome of one comparison pass."""

    different: frozenset[ComponentDiff] = field(default_factory=frozenset)
    scanned_remote: int = 0
    scanned_local: int = 0
    local_root: str | None = None
    remote_root: str | None = None

    def __post_init__(self) -> None:
        items = frozenset(self.different)
        for index, item in enumerate(items):
            if not isinstance(item, ComponentDiff):
                _fail(
                    f"DirectoryDiffResults.different[{index}]",
                    f"expected ComponentDiff, got {type(item).__name__}",
                )
        seen: set[str] = set()
        for item in items:
            if item.local_rel_path in seen:
                _fail(
                    "DirectoryDiffResults.different",
                    f"duplicate local path {item.local_rel_path!r}",
                )
            seen.add(item.local_rel_path)
        object.__setattr__(self, "different", items)

        for name in ("scanned_remote", "scanned_local"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                _fail(f"DirectoryDiffResults.{name}", "must be a non-negative integer")
        if len(items) > min(self.scanned_local, self.scanned_remote):
            _fail(
                "DirectoryDiffResults.different",
                "cannot contain more entries than were scanned on either side",
            )

    @classmethod
    def empty(cls) -> DirectoryDiffResults:
        return cls()

    @property
    def size(self) -> int:
        return len(self.different)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.different)

    def sorted_different(self) -> tuple[ComponentDiff, ...]:
        return tuple(sorted(self.different, key=lambda item: item.local_rel_path))


@dataclass(frozen=True, slots=True)
class SnapshotComponent:
    """One component captured by the snapshot/cache collaborator."""

    type: str
    full_name: str
    local_rel_path: str
    remote_rel_path: str
    cached_last_modified: str | None = None
    remote_last_modified: str | None = None

    def __post_init__(self) -> None:
        for name in ("type", "full_name"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                _fail(f"SnapshotComponent.{name}", "must be a non-empty string")
            object.__setattr__(self, name, value.strip())
        object.__setattr__(
            self,
            "local_rel_path",
            _as_rel_path(self.local_rel_path, "SnapshotComponent.local_rel_path"),
        )
        object.__setattr__(
            self,
            "remote_rel_path",
            _as_rel_path(self.remote_rel_path, "SnapshotComponent.remote_rel_path"),
        )


@dataclass(frozen=True, slots=True)
class SnapshotResult:
    """Point-in-time view of cached local state against remote state."""

    components: tuple[SnapshotComponent, ...] = ()
    cache_root: str | None = None
    project_root: str | None = None
    is_manifest: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", _as_components(self.components))


def _as_components(values: Iterable[SnapshotComponent]) -> tuple[SnapshotComponent, ...]:
    parsed: list[SnapshotComponent] = []
    for index, item in enumerate(values):
        if not isinstance(item, SnapshotComponent):
            _fail(
                f"SnapshotResult.components[{index}]",
                f"expected SnapshotComponent, got {type(item).__name__}",
            )
        parsed.append(item)
    return tuple(parsed)


def _as_rel_path(value: object, path: str) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    normalized = value.strip().replace("\\", "/")
    if not normalized:
        _fail(path, "must not be empty")
    return normalized


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = [
    "ComponentDiff",
    "DirectoryDiffResults",
    "SnapshotComponent",
    "SnapshotResult",
]
