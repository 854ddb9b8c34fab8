"""
deploy-guard — console prompts

File: src/deploy_guard/ui/prompts.py
Last updated: 2026-10-19

Purpose
- ``ConsoleChoicePrompt``: numbered choices rendered with rich, answered on stdin.
- ``ScriptedChoicePrompt``: answers supplied up front (CI and ``--answer`` flags).

Functional requirements
- Both return symbolic choice ids; an empty answer, ``c`` or end of input dismisses.
- Error notifications never raise.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from deploy_guard.conflict.collaborators import C, PromptChoice
from deploy_guard.messages import localize

logger = logging.getLogger(__name__)

_CANCEL_ANSWER = "c"


class ConsoleChoicePrompt:
    def __init__(self, *, console: Console | None = None) -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._errors: list[str] = []

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(self._errors)

    async def show_warning_modal(
        self, message: str, choices: Sequence[PromptChoice[C]]
    ) -> C | None:
        return await asyncio.to_thread(self._ask, message, choices)

    def show_error_message(self, message: str) -> None:
        self._errors.append(message)
        try:
            self._console.print(f"[bold red]error:[/] {escape(message)}", highlight=False)
        except Exception:  # noqa: BLE001
            logger.warning("failed to render error notification", exc_info=True)

    def _ask(self, message: str, choices: Sequence[PromptChoice[C]]) -> C | None:
        self._console.print(Panel(escape(message), border_style="yellow"))
        for number, choice in enumerate(choices, start=1):
            self._console.print(f"  [bold]{number}[/]  {escape(choice.label)}")
        self._console.print(f"  [bold]{_CANCEL_ANSWER}[/]  {localize('warning_prompt_cancel')}")

        allowed = [str(number) for number in range(1, len(choices) + 1)] + [_CANCEL_ANSWER]
        try:
            answer = Prompt.ask(
                "Choice",
                console=self._console,
                choices=allowed,
                default=_CANCEL_ANSWER,
                show_choices=False,
            )
        except EOFError:
            return None
        if answer == _CANCEL_ANSWER:
            return None
        return choices[int(answer) - 1].id


class ScriptedChoicePrompt:
    """Replays pre-recorded answers, matched against choice ids.

    Running out of answers, or an answer that matches no offered choice,
    dismisses the prompt.
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = [answer.strip() for answer in answers]
        self._asked: list[str] = []
        self._errors: list[str] = []

    @property
    def asked(self) -> tuple[str, ...]:
        return tuple(self._asked)

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(self._errors)

    async def show_warning_modal(
        self, message: str, choices: Sequence[PromptChoice[C]]
    ) -> C | None:
        self._asked.append(message)
        if not self._answers:
            return None
        answer = self._answers.pop(0)
        for choice in choices:
            if str(choice.id) == answer:
                return choice.id
        logger.warning("scripted answer %r matches no offered choice", answer)
        return None

    def show_error_message(self, message: str) -> None:
        self._errors.append(message)
        logger.error(message)


__all__ = ["ConsoleChoicePrompt", "ScriptedChoicePrompt"]
