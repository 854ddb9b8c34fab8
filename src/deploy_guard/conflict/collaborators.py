"""
deploy-guard — collaborator contracts

File: src/deploy_guard/conflict/collaborators.py
Last updated: 2026-10-19

Purpose
- Structural interfaces the checkers consume: identity, remote comparison,
  snapshot loading, prompting, output, telemetry, visualization and the deploy lock.

Functional requirements
- Prompts return symbolic choice ids, never display labels.
- Output, telemetry and visualization are fire-and-forget; they never decide control flow.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, runtime_checkable

from deploy_guard.domain.diffs import DirectoryDiffResults, SnapshotResult
from deploy_guard.domain.models import ConflictDetectionConfig
from deploy_guard.metadata.dictionary import MetadataInfo
from deploy_guard.metadata.path_strategies import PathStrategy

C = TypeVar("C")


@dataclass(frozen=True, slots=True)
class PromptChoice(Generic[C]):
    """One offered choice: the id the caller compares against and the label a user sees."""

    id: C
    label: str


@runtime_checkable
class IdentityResolver(Protocol):
    @property
    def username(self) -> str | None: ...


@runtime_checkable
class RemoteDiffCollaborator(Protocol):
    async def compare_for_conflicts(
        self, config: ConflictDetectionConfig
    ) -> DirectoryDiffResults: ...


@runtime_checkable
class SnapshotLoader(Protocol):
    async def load_snapshot(
        self, selection: str, workspace_root: str, is_manifest: bool
    ) -> SnapshotResult: ...


@runtime_checkable
class TimestampDiffBuilder(Protocol):
    def create_diffs(self, snapshot: SnapshotResult) -> DirectoryDiffResults: ...


@runtime_checkable
class ChoicePrompt(Protocol):
    async def show_warning_modal(
        self, message: str, choices: Sequence[PromptChoice[C]]
    ) -> C | None: ...

    def show_error_message(self, message: str) -> None: ...


@runtime_checkable
class OutputChannel(Protocol):
    def append_line(self, text: str) -> None: ...

    def show_channel_output(self) -> None: ...

    def show_command_with_timestamp(self, command_name: str) -> None: ...


@runtime_checkable
class TelemetrySink(Protocol):
    def send_exception(self, name: str, message: str) -> object: ...

    def send_event(self, name: str, properties: Mapping[str, object] | None = None) -> object: ...


@runtime_checkable
class DiffVisualizer(Protocol):
    def visualize_differences(
        self,
        title: str,
        identity: str,
        reveal: bool,
        results: DirectoryDiffResults | None = None,
    ) -> None: ...


@runtime_checkable
class DeployLock(Protocol):
    async def unlock(self) -> None: ...


@runtime_checkable
class MetadataLookup(Protocol):
    def get_info(self, metadata_type: str) -> MetadataInfo | None: ...

    def strategy_for(self, metadata_type: str) -> PathStrategy: ...


__all__ = [
    "ChoicePrompt",
    "DeployLock",
    "DiffVisualizer",
    "IdentityResolver",
    "MetadataLookup",
    "OutputChannel",
    "PromptChoice",
    "RemoteDiffCollaborator",
    "SnapshotLoader",
    "TelemetrySink",
    "TimestampDiffBuilder",
]
