"""
deploy-guard — unit tests for the file snapshot loader

File: tests/unit/conflict/test_snapshot_loader.py
Last updated: 2026-10-19

Purpose
- Validate snapshot document parsing, error paths and selection filtering.

What this test file should cover
- YAML and JSON documents load into ``SnapshotResult``.
- Quoted and unquoted timestamps normalize to the same UTC millisecond form.
- Malformed documents raise ``SnapshotLoadError`` with a field path.
- Source-path selections filter by prefix; manifest selections keep everything.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from deploy_guard.conflict import (
    FileSnapshotLoader,
    SnapshotLoadError,
    TimestampConflictDetector,
    parse_snapshot,
)

_DOCUMENT = """\
schema_version: 1
cache_root: .deploy_guard/cache
components:
  - type: ApexClass
    full_name: Foo
    local_rel_path: force-app/main/default/classes/Foo.cls
    remote_rel_path: classes/Foo.cls
    cached_last_modified: "2026-10-01T10:00:00.000Z"
    remote_last_modified: 2026-10-02T08:30:00Z
  - type: CustomObject
    full_name: Account
    local_rel_path: other-app/objects/Account.object
"""


@pytest.mark.asyncio
async def test_load_yaml_snapshot_from_default_location(tmp_path: Path) -> None:
    cache = tmp_path / ".deploy_guard" / "cache"
    cache.mkdir(parents=True)
    (cache / "snapshot.yaml").write_text(_DOCUMENT, encoding="utf-8")

    snapshot = await FileSnapshotLoader().load_snapshot(
        "force-app", tmp_path.as_posix(), False
    )

    assert [item.full_name for item in snapshot.components] == ["Foo"]
    foo = snapshot.components[0]
    assert foo.remote_rel_path == "classes/Foo.cls"
    assert foo.cached_last_modified == "2026-10-01T10:00:00.000Z"
    assert foo.remote_last_modified == "2026-10-02T08:30:00.000Z"
    assert snapshot.cache_root == ".deploy_guard/cache"
    assert snapshot.project_root == tmp_path.as_posix()
    assert snapshot.is_manifest is False


@pytest.mark.asyncio
async def test_manifest_selection_keeps_every_component(tmp_path: Path) -> None:
    path = tmp_path / "snap.yaml"
    path.write_text(_DOCUMENT, encoding="utf-8")

    snapshot = await FileSnapshotLoader(path).load_snapshot(
        "manifest/package.xml", tmp_path.as_posix(), True
    )

    assert len(snapshot.components) == 2
    other = snapshot.components[1]
    assert other.remote_rel_path == other.local_rel_path
    assert snapshot.is_manifest is True


@pytest.mark.asyncio
async def test_json_document_is_accepted(tmp_path: Path) -> None:
    path = tmp_path / "snap.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": 1,
                "components": [
                    {
                        "type": "ApexClass",
                        "full_name": "Foo",
                        "local_rel_path": "classes/Foo.cls",
                        "remote_last_modified": "t2",
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    snapshot = await FileSnapshotLoader(path).load_snapshot(".", tmp_path.as_posix(), False)

    assert len(snapshot.components) == 1


@pytest.mark.asyncio
async def test_missing_snapshot_raises(tmp_path: Path) -> None:
    with pytest.raises(SnapshotLoadError, match="snapshot not found"):
        await FileSnapshotLoader(tmp_path / "absent.yaml").load_snapshot(
            ".", tmp_path.as_posix(), False
        )


@pytest.mark.asyncio
async def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "snap.yaml"
    path.write_text("components: [unclosed\n", encoding="utf-8")
    with pytest.raises(SnapshotLoadError, match="invalid snapshot document"):
        await FileSnapshotLoader(path).load_snapshot(".", tmp_path.as_posix(), False)


@pytest.mark.parametrize(
    ("document", "fragment"),
    [
        (["not", "a", "mapping"], "document must be a mapping"),
        ({"schema_version": 2}, "schema_version: unsupported version 2"),
        ({"components": {"a": 1}}, "components: must be a list"),
        ({"components": ["x"]}, "components[0]: must be a mapping"),
        (
            {"components": [{"type": "ApexClass", "local_rel_path": "a.cls"}]},
            "components[0].full_name: is required",
        ),
        (
            {
                "components": [
                    {"type": "ApexClass", "full_name": "A", "local_rel_path": 7}
                ]
            },
            "components[0].local_rel_path: expected string, got int",
        ),
        ({"cache_root": 5}, "cache_root: must be a string"),
    ],
)
def test_parse_errors_carry_field_paths(document: object, fragment: str) -> None:
    with pytest.raises(SnapshotLoadError) as excinfo:
        parse_snapshot(document, selection=".", workspace_root="/ws", is_manifest=True)
    assert fragment in str(excinfo.value)


def test_absolute_selection_inside_workspace_filters(tmp_path: Path) -> None:
    document = {
        "components": [
            {"type": "ApexClass", "full_name": "A", "local_rel_path": "force-app/classes/A.cls"},
            {"type": "ApexClass", "full_name": "B", "local_rel_path": "force-app-extra/B.cls"},
        ]
    }

    snapshot = parse_snapshot(
        document,
        selection=(tmp_path / "force-app").as_posix(),
        workspace_root=tmp_path.as_posix(),
        is_manifest=False,
    )

    assert [item.full_name for item in snapshot.components] == ["A"]


def test_selection_outside_workspace_keeps_everything(tmp_path: Path) -> None:
    document = {
        "components": [
            {"type": "ApexClass", "full_name": "A", "local_rel_path": "force-app/classes/A.cls"}
        ]
    }

    snapshot = parse_snapshot(
        document,
        selection="/somewhere/else",
        workspace_root=tmp_path.as_posix(),
        is_manifest=False,
    )

    assert len(snapshot.components) == 1


def _timestamps_document(cached: str, remote: str) -> object:
    return yaml.safe_load(
        "components:\n"
        "  - type: ApexClass\n"
        "    full_name: Foo\n"
        "    local_rel_path: classes/Foo.cls\n"
        f"    cached_last_modified: {cached}\n"
        f"    remote_last_modified: {remote}\n"
    )


@pytest.mark.parametrize(
    ("cached", "remote"),
    [
        ('"2026-10-01T10:00:00.000Z"', "2026-10-01T10:00:00.000Z"),
        ("2026-10-01T10:00:00.000Z", '"2026-10-01T10:00:00.000Z"'),
        ('"2026-10-01T10:00:00Z"', "2026-10-01 12:00:00+02:00"),
        ('"2026-10-01T10:00:00.000+00:00"', '"2026-10-01T10:00:00.000Z"'),
    ],
)
def test_quoting_does_not_change_a_timestamp(cached: str, remote: str) -> None:
    snapshot = parse_snapshot(
        _timestamps_document(cached, remote),
        selection=".",
        workspace_root="/ws",
        is_manifest=True,
    )

    component = snapshot.components[0]
    assert component.cached_last_modified == "2026-10-01T10:00:00.000Z"
    assert component.remote_last_modified == "2026-10-01T10:00:00.000Z"
    assert TimestampConflictDetector().create_diffs(snapshot).different == frozenset()


def test_opaque_timestamps_are_kept_as_written() -> None:
    snapshot = parse_snapshot(
        _timestamps_document("rev-1", "' rev-2 '"),
        selection=".",
        workspace_root="/ws",
        is_manifest=True,
    )

    component = snapshot.components[0]
    assert (component.cached_last_modified, component.remote_last_modified) == ("rev-1", "rev-2")
