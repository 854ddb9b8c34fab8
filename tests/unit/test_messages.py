"""Unit tests for the message catalog."""

from __future__ import annotations

import pytest

from deploy_guard.messages import has_message, localize


def test_localize_formats_positional_arguments() -> None:
    assert localize("conflict_detect_view_root", "dev@example.com", 3) == (
        "dev@example.com: 3 differences"
    )
    assert localize("warning_prompt_other_not_shown", 4) == "+4 more\n"


def test_localize_without_arguments_returns_template() -> None:
    assert localize("cli_cancelled") == "Operation cancelled."
    # Templates are returned untouched when nothing is substituted.
    assert "%s" in localize("conflict_detect_error")


def test_unknown_key() -> None:
    assert not has_message("nope")
    with pytest.raises(KeyError, match="unknown message key"):
        localize("nope")
