"""Timestamp-based diff builder over a loaded snapshot."""

from __future__ import annotations

from deploy_guard.domain.diffs import ComponentDiff, DirectoryDiffResults, SnapshotResult


class TimestampConflictDetector:
    """Pure ``TimestampDiffBuilder``.

    A component differs when the org reports a modification timestamp and the
    cached one is either missing or not equal to it.
    """

    def create_diffs(self, snapshot: SnapshotResult) -> DirectoryDiffResults:
        by_local_path: dict[str, ComponentDiff] = {}
        for component in snapshot.components:
            remote = component.remote_last_modified
            if not remote:
                continue
            if component.cached_last_modified == remote:
                continue
            # First record wins when two components share a local file.
            by_local_path.setdefault(
                component.local_rel_path,
                ComponentDiff(
                    local_rel_path=component.local_rel_path,
                    remote_rel_path=component.remote_rel_path,
                    local_last_modified=component.cached_last_modified,
                    remote_last_modified=remote,
                ),
            )

        scanned = len(snapshot.components)
        return DirectoryDiffResults(
            different=frozenset(by_local_path.values()),
            scanned_local=scanned,
            scanned_remote=scanned,
            local_root=snapshot.project_root,
            remote_root=snapshot.cache_root,
        )


__all__ = ["TimestampConflictDetector"]
