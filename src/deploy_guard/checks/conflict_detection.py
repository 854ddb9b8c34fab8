"""
deploy-guard — remote conflict checkers

File: src/deploy_guard/checks/conflict_detection.py
Last updated: 2026-10-19

Purpose
- ``ConflictDetectionChecker``: compare a manifest's components against a live
  retrieve of the org and let the user override or inspect the differences.
- ``TimestampConflictChecker``: the same decision driven by cached versus remote
  modification timestamps; owns releasing the deploy lock on its cancel paths.

Functional requirements
- Disabled policy passes the input through without touching any collaborator.
- A missing org identity cancels with a message.
- No differences: the view is updated without being revealed and the input continues.
- Differences: the report goes to the output channel, then the user picks
  override (continue) or show conflicts (cancel, view revealed). Dismissal
  cancels without revealing.
- A failing comparison collaborator is reported to the channel and telemetry
  and the check cancels without a message. The timestamp checker also
  releases the deploy lock, once.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

from deploy_guard.conflict.collaborators import (
    ChoicePrompt,
    DeployLock,
    DiffVisualizer,
    IdentityResolver,
    OutputChannel,
    PromptChoice,
    RemoteDiffCollaborator,
    SnapshotLoader,
    TelemetrySink,
    TimestampDiffBuilder,
)
from deploy_guard.constants import CONFLICT_DETECTION_EXCEPTION
from deploy_guard.domain.diffs import DirectoryDiffResults
from deploy_guard.domain.models import (
    CancelResponse,
    CheckResult,
    ConflictDetectionConfig,
    ContinueResponse,
)
from deploy_guard.messages import has_message, localize

logger = logging.getLogger(__name__)


class ConflictChoice(StrEnum):
    OVERRIDE = "override"
    SHOW_CONFLICTS = "show_conflicts"


@dataclass(frozen=True, slots=True)
class ConflictDetectionMessages:
    """Operation-specific wording: the modal warning and how to inspect conflicts."""

    warning_message_key: str
    command_hint: Callable[[str], str]

    def __post_init__(self) -> None:
        if not has_message(self.warning_message_key):
            raise ValueError(
                f"ConflictDetectionMessages.warning_message_key: unknown key "
                f"{self.warning_message_key!r}"
            )
        if not callable(self.command_hint):
            raise ValueError("ConflictDetectionMessages.command_hint: must be callable")


def _preview_flag(target: str) -> str:
    return "--manifest" if target.endswith(".xml") else "--source-dir"


DEPLOY_MESSAGES = ConflictDetectionMessages(
    warning_message_key="conflict_detect_conflicts_during_deploy",
    command_hint=lambda target: f"sf project deploy preview {_preview_flag(target)} {target}",
)
RETRIEVE_MESSAGES = ConflictDetectionMessages(
    warning_message_key="conflict_detect_conflicts_during_retrieve",
    command_hint=lambda target: f"sf project retrieve preview {_preview_flag(target)} {target}",
)

_OVERRIDE = PromptChoice(ConflictChoice.OVERRIDE, localize("conflict_detect_override"))
_SHOW = PromptChoice(ConflictChoice.SHOW_CONFLICTS, localize("conflict_detect_show_conflicts"))


class _ConflictReporter:
    """Shared report-and-prompt step of both conflict checkers."""

    def __init__(
        self,
        messages: ConflictDetectionMessages,
        *,
        channel: OutputChannel,
        prompt: ChoicePrompt,
        visualizer: DiffVisualizer,
        decision_logger: Any | None = None,
    ) -> None:
        self._messages = messages
        self._channel = channel
        self._prompt = prompt
        self._visualizer = visualizer
        self._decision_logger = (
            decision_logger if decision_logger is not None else structlog.get_logger(__name__)
        )

    async def resolve(
        self,
        target: str,
        identity: str,
        results: DirectoryDiffResults,
        *,
        header: str,
        choices: Sequence[PromptChoice[ConflictChoice]],
    ) -> bool:
        """Report and prompt; ``True`` means the operation may proceed."""

        title = localize("conflict_detect_view_root", identity, results.size)
        if not results.has_conflicts:
            self._visualizer.visualize_differences(title, identity, False)
            return True

        self._channel.append_line(header)
        for diff in results.sorted_different():
            self._channel.append_line(posixpath.normpath(posixpath.basename(diff.local_rel_path)))
        self._channel.show_channel_output()

        raw = await self._prompt.show_warning_modal(
            localize(self._messages.warning_message_key), choices
        )
        choice = ConflictChoice(raw) if raw in set(ConflictChoice) else None
        self._log_decision(target, identity, results, choice)
        if choice is ConflictChoice.OVERRIDE:
            self._visualizer.visualize_differences(title, identity, False)
            return True

        self._channel.append_line(
            localize("conflict_detect_command_hint", self._messages.command_hint(target))
        )
        self._channel.show_channel_output()
        self._visualizer.visualize_differences(
            title, identity, choice is ConflictChoice.SHOW_CONFLICTS, results
        )
        return False

    def _log_decision(
        self,
        target: str,
        identity: str,
        results: DirectoryDiffResults,
        choice: ConflictChoice | None,
    ) -> None:
        self._decision_logger.info(
            "conflict_gate_decision",
            target=target,
            username=identity,
            conflicts=results.size,
            choice=choice.value if choice is not None else None,
            proceed=choice is ConflictChoice.OVERRIDE,
        )


class ConflictDetectionChecker:
    """Manifest conflict check against a fresh retrieve of the org."""

    def __init__(
        self,
        messages: ConflictDetectionMessages,
        *,
        identity: IdentityResolver,
        remote_diff: RemoteDiffCollaborator,
        channel: OutputChannel,
        prompt: ChoicePrompt,
        visualizer: DiffVisualizer,
        telemetry: TelemetrySink,
        enabled: bool = True,
        decision_logger: Any | None = None,
    ) -> None:
        self._enabled = enabled
        self._identity = identity
        self._remote_diff = remote_diff
        self._channel = channel
        self._telemetry = telemetry
        self._reporter = _ConflictReporter(
            messages,
            channel=channel,
            prompt=prompt,
            visualizer=visualizer,
            decision_logger=decision_logger,
        )

    async def check(self, inputs: CheckResult[str]) -> CheckResult[str]:
        if not self._enabled:
            return inputs
        if isinstance(inputs, CancelResponse):
            return inputs

        username = self._identity.username
        if not username:
            return CancelResponse(localize("conflict_detect_no_default_username"))

        manifest = inputs.data
        try:
            results = await self._remote_diff.compare_for_conflicts(
                ConflictDetectionConfig(username=username, manifest=manifest)
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("remote conflict comparison failed")
            message = localize("conflict_detect_error", str(exc))
            self._channel.append_line(message)
            self._channel.show_channel_output()
            self._telemetry.send_exception(CONFLICT_DETECTION_EXCEPTION, message)
            return CancelResponse()
        return await self.handle_conflicts(manifest, username, results)

    async def handle_conflicts(
        self, manifest: str, identity: str, results: DirectoryDiffResults
    ) -> CheckResult[str]:
        proceed = await self._reporter.resolve(
            manifest,
            identity,
            results,
            header=localize(
                "conflict_detect_conflict_header",
                results.size,
                results.scanned_remote,
                results.scanned_local,
            ),
            choices=(_OVERRIDE, _SHOW),
        )
        if proceed:
            return ContinueResponse(manifest)
        return CancelResponse()


class TimestampConflictChecker:
    """Conflict check from cached vs. remote timestamps; releases the deploy lock when it cancels."""

    def __init__(
        self,
        is_manifest: bool,
        messages: ConflictDetectionMessages,
        *,
        identity: IdentityResolver,
        snapshot_loader: SnapshotLoader,
        diff_builder: TimestampDiffBuilder,
        channel: OutputChannel,
        prompt: ChoicePrompt,
        visualizer: DiffVisualizer,
        telemetry: TelemetrySink,
        deploy_lock: DeployLock,
        workspace_root: str | Path,
        enabled: bool = True,
        decision_logger: Any | None = None,
    ) -> None:
        self._is_manifest = is_manifest
        self._enabled = enabled
        self._identity = identity
        self._snapshot_loader = snapshot_loader
        self._diff_builder = diff_builder
        self._channel = channel
        self._telemetry = telemetry
        self._deploy_lock = deploy_lock
        self._workspace_root = Path(workspace_root)
        self._reporter = _ConflictReporter(
            messages,
            channel=channel,
            prompt=prompt,
            visualizer=visualizer,
            decision_logger=decision_logger,
        )
        self._lock_released = False

    async def check(self, inputs: CheckResult[str]) -> CheckResult[str]:
        if not self._enabled:
            return inputs
        if isinstance(inputs, CancelResponse):
            return inputs

        self._lock_released = False
        execution_name = localize("conflict_detect_execution_name")
        self._channel.show_channel_output()
        self._channel.show_command_with_timestamp(
            f"{localize('channel_starting_message')}{execution_name}"
        )

        username = self._identity.username
        if not username:
            return CancelResponse(localize("conflict_detect_no_default_username"))

        component_path = inputs.data
        try:
            snapshot = await self._snapshot_loader.load_snapshot(
                component_path, self._workspace_root.as_posix(), self._is_manifest
            )
            diffs = self._diff_builder.create_diffs(snapshot)
            self._channel.show_command_with_timestamp(
                f"{localize('channel_end')} {execution_name}"
            )
            return await self.handle_conflicts(component_path, username, diffs)
        except Exception as exc:  # noqa: BLE001
            logger.exception("timestamp conflict detection failed")
            message = localize("conflict_detect_error", str(exc))
            self._channel.append_line(message)
            self._channel.show_channel_output()
            self._telemetry.send_exception(CONFLICT_DETECTION_EXCEPTION, message)
            await self._release_lock()
            return CancelResponse()

    async def handle_conflicts(
        self, component_path: str, identity: str, results: DirectoryDiffResults
    ) -> CheckResult[str]:
        proceed = await self._reporter.resolve(
            component_path,
            identity,
            results,
            header=localize("conflict_detect_conflict_header_timestamp", results.size),
            choices=(_SHOW, _OVERRIDE),
        )
        if proceed:
            return ContinueResponse(component_path)
        await self._release_lock()
        return CancelResponse()

    async def _release_lock(self) -> None:
        if self._lock_released:
            return
        self._lock_released = True
        await self._deploy_lock.unlock()


__all__ = [
    "ConflictChoice",
    "ConflictDetectionChecker",
    "ConflictDetectionMessages",
    "DEPLOY_MESSAGES",
    "RETRIEVE_MESSAGES",
    "TimestampConflictChecker",
]
