"""
deploy-guard — file snapshot loader

File: src/deploy_guard/conflict/snapshot_loader.py
Last updated: 2026-10-19

Purpose
- Implement ``SnapshotLoader`` over a YAML (or JSON) snapshot document written
  to the cache directory after the last successful sync.

What should be included in this file
- Strict document validation with path-qualified error messages.
- Selection filtering: a source-path selection keeps only the components under
  that path; a manifest selection keeps every recorded component.

Document shape
  schema_version: 1
  cache_root: <optional path>
  components:
    - type: ApexClass
      full_name: Foo
      local_rel_path: force-app/main/default/classes/Foo.cls
      remote_rel_path: classes/Foo.cls      # defaults to local_rel_path
      cached_last_modified: "2026-10-01T10:00:00.000Z"
      remote_last_modified: "2026-10-02T08:30:00.000Z"
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, NoReturn

import yaml

from deploy_guard.constants import CACHE_DIR, SNAPSHOT_FILENAME, SNAPSHOT_SCHEMA_VERSION
from deploy_guard.domain.diffs import SnapshotComponent, SnapshotResult

logger = logging.getLogger(__name__)


class SnapshotLoadError(RuntimeError):
    """Raised when a snapshot document is missing, unreadable or malformed."""


class FileSnapshotLoader:
    def __init__(self, snapshot_path: str | Path | None = None) -> None:
        self._snapshot_path = Path(snapshot_path) if snapshot_path is not None else None

    def resolve_path(self, workspace_root: str) -> Path:
        if self._snapshot_path is not None:
            return self._snapshot_path
        return Path(workspace_root) / Path(CACHE_DIR) / SNAPSHOT_FILENAME

    async def load_snapshot(
        self, selection: str, workspace_root: str, is_manifest: bool
    ) -> SnapshotResult:
        path = self.resolve_path(workspace_root)
        document = await asyncio.to_thread(_read_document, path)
        return parse_snapshot(
            document,
            selection=selection,
            workspace_root=workspace_root,
            is_manifest=is_manifest,
            source=path.as_posix(),
        )


def parse_snapshot(
    document: object,
    *,
    selection: str,
    workspace_root: str,
    is_manifest: bool,
    source: str = "<snapshot>",
) -> SnapshotResult:
    """Validate a decoded snapshot document and apply the selection filter."""

    if not isinstance(document, Mapping):
        _fail(source, "document must be a mapping")
    version = document.get("schema_version", SNAPSHOT_SCHEMA_VERSION)
    if version != SNAPSHOT_SCHEMA_VERSION:
        _fail(f"{source}.schema_version", f"unsupported version {version!r}")

    raw_components = document.get("components", [])
    if not isinstance(raw_components, list):
        _fail(f"{source}.components", "must be a list")

    components: list[SnapshotComponent] = []
    for index, raw in enumerate(raw_components):
        components.append(_parse_component(raw, f"{source}.components[{index}]"))

    if not is_manifest:
        prefix = _selection_prefix(selection, workspace_root)
        if prefix is not None:
            components = [item for item in components if _is_under(item.local_rel_path, prefix)]

    cache_root = document.get("cache_root")
    if cache_root is not None and not isinstance(cache_root, str):
        _fail(f"{source}.cache_root", "must be a string")

    logger.debug("loaded %d snapshot components from %s", len(components), source)
    return SnapshotResult(
        components=tuple(components),
        cache_root=cache_root,
        project_root=workspace_root,
        is_manifest=is_manifest,
    )


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SnapshotLoadError(f"snapshot not found: {path}") from exc
    except OSError as exc:
        raise SnapshotLoadError(f"unable to read snapshot {path}: {exc}") from exc
    try:
        # JSON is a YAML subset, so one parser covers both.
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SnapshotLoadError(f"invalid snapshot document {path}: {exc}") from exc


def _parse_component(raw: object, path: str) -> SnapshotComponent:
    if not isinstance(raw, Mapping):
        _fail(path, "must be a mapping")
    local_rel_path = _required_str(raw, "local_rel_path", path)
    try:
        return SnapshotComponent(
            type=_required_str(raw, "type", path),
            full_name=_required_str(raw, "full_name", path),
            local_rel_path=local_rel_path,
            remote_rel_path=_optional_str(raw, "remote_rel_path", path) or local_rel_path,
            cached_last_modified=_optional_timestamp(raw, "cached_last_modified", path),
            remote_last_modified=_optional_timestamp(raw, "remote_last_modified", path),
        )
    except ValueError as exc:
        raise SnapshotLoadError(f"{path}: {exc}") from exc


def _required_str(raw: Mapping[str, object], key: str, path: str) -> str:
    value = _optional_str(raw, key, path)
    if value is None:
        _fail(f"{path}.{key}", "is required")
    return value


def _optional_str(raw: Mapping[str, object], key: str, path: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        _fail(f"{path}.{key}", f"expected string, got {type(value).__name__}")
    stripped = value.strip()
    return stripped or None


def _optional_timestamp(raw: Mapping[str, object], key: str, path: str) -> str | None:
    """Normalize to ``YYYY-MM-DDTHH:MM:SS.mmmZ``; unparseable strings are kept as written."""

    value = raw.get(key)
    # Unquoted ISO timestamps come back from YAML as datetime objects.
    if isinstance(value, datetime):
        return _format_utc(value)
    if isinstance(value, date):
        return _format_utc(datetime(value.year, value.month, value.day))
    text = _optional_str(raw, key, path)
    if text is None:
        return None
    try:
        return _format_utc(datetime.fromisoformat(text))
    except ValueError:
        return text


def _format_utc(moment: datetime) -> str:
    # Naive values are UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def _selection_prefix(selection: str, workspace_root: str) -> str | None:
    candidate = Path(selection)
    if candidate.is_absolute():
        try:
            candidate = candidate.relative_to(Path(workspace_root))
        except ValueError:
            return None
    rel = PurePosixPath(candidate.as_posix()).as_posix().strip("/")
    if rel in {"", "."}:
        return None
    return rel


def _is_under(rel_path: str, prefix: str) -> bool:
    return rel_path == prefix or rel_path.startswith(f"{prefix}/")


def _fail(path: str, message: str) -> NoReturn:
    raise SnapshotLoadError(f"{path}: {message}")


__all__ = ["FileSnapshotLoader", "SnapshotLoadError", "parse_snapshot"]
