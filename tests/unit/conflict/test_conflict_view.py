"""Unit tests for the console conflict view."""

from __future__ import annotations

import io

from rich.console import Console

from deploy_guard.conflict import ConflictView, DiffVisualizer
from deploy_guard.domain import ComponentDiff, DirectoryDiffResults


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=160, force_terminal=False, color_system=None), buffer


def _results() -> DirectoryDiffResults:
    return DirectoryDiffResults(
        different=frozenset(
            {
                ComponentDiff(
                    "classes/Foo.cls",
                    "classes/Foo.cls",
                    local_last_modified="t1",
                    remote_last_modified="t2",
                )
            }
        ),
        scanned_local=3,
        scanned_remote=3,
    )


def test_view_satisfies_visualizer_protocol() -> None:
    assert isinstance(ConflictView(), DiffVisualizer)


def test_hidden_update_records_state_without_rendering() -> None:
    console, buffer = _console()
    view = ConflictView(console=console)

    view.visualize_differences("dev: 0 differences", "dev", False)

    assert view.state is not None
    assert view.state.reveal is False
    assert view.state.results is None
    assert buffer.getvalue() == ""


def test_reveal_renders_table_rows() -> None:
    console, buffer = _console()
    view = ConflictView(console=console)

    view.visualize_differences("dev: 1 differences", "dev", True, _results())

    output = buffer.getvalue()
    assert "classes/Foo.cls" in output
    assert "t2" in output
    assert "dev: 1 differences" in output
    assert view.state is not None
    assert view.state.results is not None
    assert view.state.results.size == 1
