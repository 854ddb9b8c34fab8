"""
deploy-guard — local-existence overwrite checker

File: src/deploy_guard/checks/overwrite.py
Last updated: 2026-10-19

Purpose
- Before a retrieve writes files, find which requested components already exist
  in the workspace and ask which of them may be overwritten.

Functional requirements
- A component exists when any of its candidate files is present: the
  ``.<suffix>-meta.xml`` descriptor or one of the type's content extensions,
  located through the type's path strategy (default strategy for unknown types).
- A component whose suffix cannot be determined is reported (notification and
  telemetry) and treated as absent; it never blocks the retrieve.
- A component listed more than once is asked about once.
- Dismissal, or skipping every component that was found, cancels.
- A list input continues narrowed by the skip set; a single input continues unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

from deploy_guard.checks.batch_decision import prompt_overwrite
from deploy_guard.conflict.collaborators import ChoicePrompt, MetadataLookup, TelemetrySink
from deploy_guard.constants import (
    METADATA_DESCRIPTOR_TEMPLATE,
    OVERWRITE_PREVIEW_LIMIT,
    OVERWRITE_PROMPT_EXCEPTION,
)
from deploy_guard.domain.models import (
    CancelResponse,
    CheckResult,
    ContinueResponse,
    LocalComponent,
    OneOrMany,
)
from deploy_guard.messages import localize

logger = logging.getLogger(__name__)


class OverwriteComponentPrompt:
    def __init__(
        self,
        *,
        dictionary: MetadataLookup,
        workspace_root: str | Path,
        prompt: ChoicePrompt,
        telemetry: TelemetrySink,
        preview_limit: int = OVERWRITE_PREVIEW_LIMIT,
        decision_logger: Any | None = None,
    ) -> None:
        self._dictionary = dictionary
        self._workspace_root = Path(workspace_root)
        self._prompt = prompt
        self._telemetry = telemetry
        self._preview_limit = preview_limit
        self._decision_logger = (
            decision_logger if decision_logger is not None else structlog.get_logger(__name__)
        )

    async def check(self, inputs: CheckResult[OneOrMany]) -> CheckResult[OneOrMany]:
        if isinstance(inputs, CancelResponse):
            return inputs

        data = inputs.data
        is_list = not isinstance(data, LocalComponent)
        candidates: Sequence[LocalComponent] = list(data) if is_list else [data]
        # A component listed twice is asked about once.
        found = list(
            dict.fromkeys(
                component for component in candidates if self.component_exists(component)
            )
        )
        if not found:
            return inputs

        logger.info("%d of %d components already exist locally", len(found), len(candidates))
        skipped = await prompt_overwrite(found, self._prompt, preview_limit=self._preview_limit)
        self._decision_logger.info(
            "overwrite_prompt_decision",
            found=[component.label for component in found],
            skipped=None if skipped is None else sorted(component.label for component in skipped),
        )
        if skipped is None or skipped >= frozenset(found):
            return CancelResponse()

        if is_list:
            return ContinueResponse([item for item in candidates if item not in skipped])
        return inputs

    def component_exists(self, component: LocalComponent) -> bool:
        strategy = self._dictionary.strategy_for(component.metadata_type)
        for extension in self.file_extensions(component):
            relative = strategy.path_to_source(component.outputdir, component.file_name, extension)
            if (self._workspace_root / relative).is_file():
                return True
        return False

    def file_extensions(self, component: LocalComponent) -> tuple[str, ...]:
        """Candidate extensions; empty when the descriptor suffix is unknown."""

        info = self._dictionary.get_info(component.metadata_type)
        suffix = component.suffix or (info.suffix if info is not None else None)
        if not suffix:
            self._prompt.show_error_message(localize("error_overwrite_prompt"))
            self._telemetry.send_exception(
                OVERWRITE_PROMPT_EXCEPTION, f"Missing suffix for {component.metadata_type}"
            )
            return ()
        extensions = [METADATA_DESCRIPTOR_TEMPLATE.format(suffix=suffix)]
        if info is not None:
            extensions.extend(info.extensions)
        return tuple(extensions)


__all__ = ["OverwriteComponentPrompt"]
