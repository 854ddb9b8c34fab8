"""Choice dialog — modal warning with one button per offered choice.

File: src/deploy_guard/ui/choice_dialog.py

Used by the CLI's ``--dialog`` mode. The screen dismisses with the index of
the pressed button; escape dismisses with ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from deploy_guard.conflict.collaborators import C, PromptChoice
from deploy_guard.messages import localize


class ChoiceDialog(ModalScreen[int | None]):
    """Modal dialog asking the user to pick one of ``labels``."""

    DEFAULT_CSS = """
    ChoiceDialog {
        align: center middle;
    }
    #choice-dialog-box {
        width: 80;
        max-width: 90%;
        height: auto;
        max-height: 80%;
        background: #0b1020;
        border: solid #f5a623;
        padding: 1 2;
    }
    #choice-dialog-message {
        color: #e6e6e6;
        padding: 0 0 1 0;
    }
    #choice-dialog-actions {
        height: auto;
    }
    .choice-btn {
        margin: 0 1 0 0;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, message: str, labels: Sequence[str]) -> None:
        super().__init__()
        self._message = message
        self._labels = tuple(labels)

    def compose(self) -> ComposeResult:
        with Vertical(id="choice-dialog-box"):
            yield Static(self._message, id="choice-dialog-message", markup=False)
            with Horizontal(id="choice-dialog-actions"):
                for index, label in enumerate(self._labels):
                    yield Button(label, id=f"choice-{index}", classes="choice-btn")

    def on_mount(self) -> None:
        if self._labels:
            self.query_one("#choice-0", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("choice-"):
            self.dismiss(int(button_id.split("-")[-1]))

    def action_cancel(self) -> None:
        self.dismiss(None)


class ChoiceDialogApp(App[int | None]):
    """Single-screen app that shows one :class:`ChoiceDialog` and exits with its result."""

    def __init__(self, message: str, labels: Sequence[str]) -> None:
        super().__init__()
        self._dialog = ChoiceDialog(message, labels)

    def on_mount(self) -> None:
        self.push_screen(self._dialog, callback=self._finish)

    def _finish(self, result: int | None) -> None:
        self.exit(result)


class TextualChoicePrompt:
    """``ChoicePrompt`` backed by a textual modal dialog."""

    def __init__(self, *, console: Console | None = None) -> None:
        self._console = console if console is not None else Console(stderr=True)

    async def show_warning_modal(
        self, message: str, choices: Sequence[PromptChoice[C]]
    ) -> C | None:
        app = ChoiceDialogApp(
            f"{message}\n\n{_cancel_hint()}", [choice.label for choice in choices]
        )
        index = await app.run_async()
        if index is None or not 0 <= index < len(choices):
            return None
        return choices[index].id

    def show_error_message(self, message: str) -> None:
        self._console.print(f"[bold red]error:[/] {escape(message)}", highlight=False)


def _cancel_hint() -> str:
    return f"(esc: {localize('warning_prompt_cancel')})"


__all__ = ["ChoiceDialog", "ChoiceDialogApp", "TextualChoicePrompt"]
