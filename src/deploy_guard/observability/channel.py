"""
deploy-guard — output channel

File: src/deploy_guard/observability/channel.py
Last updated: 2026-10-19

Purpose
- Append-only, user-visible line sink for conflict reports and command hints.
- Lines are buffered so tests and the CLI can inspect what was written.

Functional requirements
- Every call is fire-and-forget; rendering failures never reach a checker.
- ``show_channel_output`` flushes pending lines to the console and marks the channel visible.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)


class ChannelService:
    """Line-buffered output channel rendered through a rich console."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        name: str = "deploy-guard",
        echo: bool = True,
    ) -> None:
        self._console = console if console is not None else Console(stderr=True, highlight=False)
        self._name = name
        self._echo = echo
        self._lines: list[str] = []
        self._rendered = 0
        self._show_count = 0
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def lines(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._lines)

    @property
    def show_count(self) -> int:
        return self._show_count

    def append_line(self, text: str) -> None:
        # Multi-line payloads are split so the buffer stays one entry per line.
        with self._lock:
            self._lines.extend(str(text).splitlines() or [""])

    def show_channel_output(self) -> None:
        """Bring the channel to the front by rendering everything not yet shown."""

        with self._lock:
            pending = self._lines[self._rendered :]
            self._rendered = len(self._lines)
            self._show_count += 1
        if not self._echo:
            return
        for line in pending:
            try:
                self._console.print(Text(line))
            except Exception:  # noqa: BLE001
                logger.warning("failed to render channel line", exc_info=True)
                return

    def show_command_with_timestamp(self, command_name: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self.append_line(f"{stamp} {command_name}")

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self._rendered = 0


__all__ = ["ChannelService"]
