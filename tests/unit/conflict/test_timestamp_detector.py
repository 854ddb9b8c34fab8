"""
deploy-guard — unit tests for the timestamp diff builder

File: tests/unit/conflict/test_timestamp_detector.py
Last updated: 2026-10-19

Purpose
- Pin the rule: a component differs when the org reports a timestamp and the
  cached one is missing or different.
"""

from __future__ import annotations

from deploy_guard.conflict import TimestampConflictDetector
from deploy_guard.domain import SnapshotComponent, SnapshotResult


def _component(
    name: str,
    cached: str | None,
    remote: str | None,
    *,
    local_rel_path: str | None = None,
) -> SnapshotComponent:
    path = local_rel_path or f"classes/{name}.cls"
    return SnapshotComponent(
        type="ApexClass",
        full_name=name,
        local_rel_path=path,
        remote_rel_path=f"remote/{name}.cls",
        cached_last_modified=cached,
        remote_last_modified=remote,
    )


def test_timestamp_rule() -> None:
    snapshot = SnapshotResult(
        components=(
            _component("Same", "t1", "t1"),
            _component("Changed", "t1", "t2"),
            _component("NeverCached", None, "t2"),
            _component("NoRemote", "t1", None),
        ),
        project_root="/ws",
        cache_root="/ws/.deploy_guard/cache",
    )

    results = TimestampConflictDetector().create_diffs(snapshot)

    by_path = {diff.local_rel_path: diff for diff in results.different}
    assert set(by_path) == {"classes/Changed.cls", "classes/NeverCached.cls"}
    changed = by_path["classes/Changed.cls"]
    assert changed.remote_rel_path == "remote/Changed.cls"
    assert (changed.local_last_modified, changed.remote_last_modified) == ("t1", "t2")
    assert results.scanned_local == results.scanned_remote == 4
    assert results.local_root == "/ws"
    assert results.remote_root == "/ws/.deploy_guard/cache"


def test_first_record_wins_for_shared_local_path() -> None:
    snapshot = SnapshotResult(
        components=(
            _component("First", "a", "b", local_rel_path="objects/Account.object"),
            _component("Second", "c", "d", local_rel_path="objects/Account.object"),
        )
    )

    results = TimestampConflictDetector().create_diffs(snapshot)

    assert results.size == 1
    (diff,) = results.different
    assert diff.remote_rel_path == "remote/First.cls"


def test_empty_snapshot_has_no_conflicts() -> None:
    results = TimestampConflictDetector().create_diffs(SnapshotResult())
    assert results.has_conflicts is False
    assert results.scanned_local == 0
