"""
deploy-guard — batch overwrite decision procedure

File: src/deploy_guard/checks/batch_decision.py
Last updated: 2026-10-19

Purpose
- Walk the components that already exist locally, one prompt per component,
  and fold the answers into a skip set.

Functional requirements
- OVERWRITE keeps the component; SKIP adds it to the skip set.
- OVERWRITE_ALL (K) ends the walk with the current skip set.
- SKIP_ALL (K) ends the walk with the skip set plus every component from the
  current one to the end.
- Dismissal (or an answer that was not offered) ends the walk with ``None``,
  which is distinct from an empty skip set.
- The "all" choices are offered only while the current component is not the last;
  K counts the current component and every one after it.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from deploy_guard.conflict.collaborators import ChoicePrompt, PromptChoice
from deploy_guard.constants import OVERWRITE_PREVIEW_LIMIT
from deploy_guard.domain.models import LocalComponent
from deploy_guard.messages import localize

H = TypeVar("H", bound=Hashable)

logger = logging.getLogger(__name__)


class OverwriteChoice(StrEnum):
    OVERWRITE = "overwrite"
    SKIP = "skip"
    OVERWRITE_ALL = "overwrite_all"
    SKIP_ALL = "skip_all"


@dataclass(frozen=True, slots=True)
class FoldStep(Generic[H]):
    """Skip set after one answer; ``done`` means no further prompts are shown."""

    skipped: frozenset[H]
    done: bool = False


def remaining_count(total: int, index: int) -> int:
    """K shown on the "all" choices: the current item and everything after it."""

    return total - index


def build_dialog_options(
    found: Sequence[object], skipped: frozenset[object], index: int
) -> tuple[PromptChoice[OverwriteChoice], ...]:
    # Skip is offered at every position, including a single-item batch, so
    # ``skipped`` never narrows the options.
    options = [
        PromptChoice(OverwriteChoice.OVERWRITE, localize("warning_prompt_overwrite")),
        PromptChoice(OverwriteChoice.SKIP, localize("warning_prompt_skip")),
    ]
    if index < len(found) - 1:
        count = remaining_count(len(found), index)
        options.append(
            PromptChoice(
                OverwriteChoice.OVERWRITE_ALL,
                f"{localize('warning_prompt_overwrite_all')} ({count})",
            )
        )
        options.append(
            PromptChoice(
                OverwriteChoice.SKIP_ALL, f"{localize('warning_prompt_skip_all')} ({count})"
            )
        )
    return tuple(options)


def build_dialog_message(
    found: Sequence[LocalComponent],
    index: int,
    *,
    preview_limit: int = OVERWRITE_PREVIEW_LIMIT,
) -> str:
    """Describe ``found[index]`` and preview up to ``preview_limit`` of the ones after it."""

    if preview_limit < 1:
        raise ValueError("preview_limit must be >= 1")
    total = len(found)
    current = found[index]
    body: list[str] = []
    for position in range(index + 1, total):
        if position == index + 1 + preview_limit:
            body.append(
                localize("warning_prompt_other_not_shown", total - index - 1 - preview_limit)
            )
            break
        body.append(f"{found[position].type}:{found[position].file_name}\n")

    others = total - index - 1
    return localize(
        "warning_prompt_overwrite_message",
        current.type,
        current.file_name,
        localize("warning_prompt_other_existing", others) if others > 0 else "",
        "".join(body),
    )


def apply_choice(
    found: Sequence[H],
    skipped: frozenset[H],
    index: int,
    choice: OverwriteChoice | None,
) -> FoldStep[H] | None:
    """Pure fold step. ``None`` means the whole decision was cancelled."""

    if choice is OverwriteChoice.OVERWRITE:
        return FoldStep(skipped)
    if choice is OverwriteChoice.SKIP:
        return FoldStep(skipped | {found[index]})
    if choice is OverwriteChoice.OVERWRITE_ALL:
        return FoldStep(skipped, done=True)
    if choice is OverwriteChoice.SKIP_ALL:
        return FoldStep(skipped | frozenset(found[index:]), done=True)
    return None


def fold_choices(
    found: Sequence[H], choices: Iterable[OverwriteChoice | None]
) -> frozenset[H] | None:
    """Run the fold against pre-recorded answers (one per prompt actually shown)."""

    skipped: frozenset[H] = frozenset()
    answers = iter(choices)
    for index in range(len(found)):
        step = apply_choice(found, skipped, index, next(answers, None))
        if step is None:
            return None
        skipped = step.skipped
        if step.done:
            break
    return skipped


async def prompt_overwrite(
    found: Sequence[LocalComponent],
    prompt: ChoicePrompt,
    *,
    preview_limit: int = OVERWRITE_PREVIEW_LIMIT,
) -> frozenset[LocalComponent] | None:
    """Ask about each existing component in turn; returns the skip set or ``None``."""

    skipped: frozenset[LocalComponent] = frozenset()
    for index in range(len(found)):
        options = build_dialog_options(found, skipped, index)
        choice = await prompt.show_warning_modal(
            build_dialog_message(found, index, preview_limit=preview_limit), options
        )
        if choice is not None and choice not in {option.id for option in options}:
            logger.warning("prompt returned a choice that was not offered: %r", choice)
            choice = None
        step = apply_choice(
            found, skipped, index, OverwriteChoice(choice) if choice is not None else None
        )
        if step is None:
            return None
        skipped = step.skipped
        if step.done:
            break
    return skipped


__all__ = [
    "FoldStep",
    "OverwriteChoice",
    "apply_choice",
    "build_dialog_message",
    "build_dialog_options",
    "fold_choices",
    "prompt_overwrite",
    "remaining_count",
]
