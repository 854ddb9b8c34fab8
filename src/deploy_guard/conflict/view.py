"""Console conflict view implementing ``DiffVisualizer``."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from deploy_guard.domain.diffs import DirectoryDiffResults
from deploy_guard.messages import localize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewState:
    title: str
    identity: str
    reveal: bool
    results: DirectoryDiffResults | None


class ConflictView:
    """Keeps the latest comparison and renders it as a table when revealed."""

    def __init__(self, *, console: Console | None = None) -> None:
        self._console = console if console is not None else Console(stderr=True, highlight=False)
        self._state: ViewState | None = None

    @property
    def state(self) -> ViewState | None:
        return self._state

    def visualize_differences(
        self,
        title: str,
        identity: str,
        reveal: bool,
        results: DirectoryDiffResults | None = None,
    ) -> None:
        self._state = ViewState(title=title, identity=identity, reveal=reveal, results=results)
        if not reveal:
            return
        try:
            self._console.print(self._render(self._state))
        except Exception:  # noqa: BLE001
            logger.warning("failed to render conflict view", exc_info=True)

    def _render(self, state: ViewState) -> Table:
        count = state.results.size if state.results is not None else 0
        table = Table(title=localize("conflict_detect_view_root", state.identity, count))
        table.add_column("Local file")
        table.add_column("Remote file")
        table.add_column("Local modified")
        table.add_column("Remote modified")
        if state.results is not None:
            for diff in state.results.sorted_different():
                table.add_row(
                    diff.local_rel_path,
                    diff.remote_rel_path,
                    diff.local_last_modified or "-",
                    diff.remote_last_modified or "-",
                )
        table.caption = state.title
        return table


__all__ = ["ConflictView", "ViewState"]
