"""
deploy-guard — unit tests for the diff model

File: tests/unit/domain/test_diffs.py
Last updated: 2026-10-19

Purpose
- Pin the invariants of ``DirectoryDiffResults`` and the snapshot records.

What this test file should cover
- Entries are unique by local relative path.
- A diff never reports more entries than were scanned on either side.
- Display order is sorted by local relative path.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from deploy_guard.domain import (
    ComponentDiff,
    DirectoryDiffResults,
    SnapshotComponent,
    SnapshotResult,
)


def test_empty_results() -> None:
    results = DirectoryDiffResults.empty()
    assert results.size == 0
    assert results.has_conflicts is False
    assert results.sorted_different() == ()


def test_paths_are_normalized_to_posix() -> None:
    diff = ComponentDiff("classes\\Foo.cls", " classes/Foo.cls ")
    assert diff.local_rel_path == "classes/Foo.cls"
    assert diff.remote_rel_path == "classes/Foo.cls"


def test_duplicate_local_paths_are_rejected() -> None:
    with pytest.raises(ValueError, match="duplicate local path"):
        DirectoryDiffResults(
            different=frozenset(
                {ComponentDiff("a.cls", "x/a.cls"), ComponentDiff("a.cls", "y/a.cls")}
            ),
            scanned_local=5,
            scanned_remote=5,
        )


def test_cannot_exceed_scanned_counts() -> None:
    with pytest.raises(ValueError, match="more entries than were scanned"):
        DirectoryDiffResults(
            different=frozenset({ComponentDiff("a", "a"), ComponentDiff("b", "b")}),
            scanned_local=5,
            scanned_remote=1,
        )


@pytest.mark.parametrize("value", [-1, True, 1.5])
def test_scanned_counts_must_be_non_negative_integers(value: object) -> None:
    with pytest.raises(ValueError, match="scanned_local"):
        DirectoryDiffResults(scanned_local=value)  # type: ignore[arg-type]


def test_non_diff_entries_are_rejected() -> None:
    with pytest.raises(ValueError, match="expected ComponentDiff"):
        DirectoryDiffResults(different=frozenset({"a"}), scanned_local=1, scanned_remote=1)  # type: ignore[arg-type]


@settings(max_examples=100, derandomize=True, deadline=None)
@given(paths=st.sets(st.from_regex(r"[a-z]{1,8}/[a-z]{1,8}\.cls", fullmatch=True), max_size=20))
def test_sorted_different_is_ordered_and_complete(paths: set[str]) -> None:
    results = DirectoryDiffResults(
        different=frozenset(ComponentDiff(path, path) for path in paths),
        scanned_local=len(paths),
        scanned_remote=len(paths),
    )
    ordered = [diff.local_rel_path for diff in results.sorted_different()]
    assert ordered == sorted(paths)
    assert results.size == len(paths)


def test_snapshot_components_validate_fields() -> None:
    with pytest.raises(ValueError, match="SnapshotComponent.full_name"):
        SnapshotComponent(type="ApexClass", full_name=" ", local_rel_path="a", remote_rel_path="a")
    with pytest.raises(ValueError, match=r"SnapshotResult.components\[0\]"):
        SnapshotResult(components=("nope",))  # type: ignore[arg-type]
