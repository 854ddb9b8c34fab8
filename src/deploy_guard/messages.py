"""User-facing message catalog.

Templates use ``%s`` positional placeholders. Dialog choices are compared by
their symbolic ids, never by the rendered label.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

_MESSAGES: Final[Mapping[str, str]] = MappingProxyType(
    {
        # Overwrite prompt
        "error_overwrite_prompt": (
            "Error checking workspace for existing components. "
            "Components without a known metadata suffix are retrieved without confirmation."
        ),
        "warning_prompt_overwrite": "Overwrite",
        "warning_prompt_skip": "Skip",
        "warning_prompt_overwrite_all": "Overwrite All",
        "warning_prompt_skip_all": "Skip All",
        "warning_prompt_overwrite_message": (
            "%s %s already exists in your local project. Do you want to overwrite it?%s%s"
        ),
        "warning_prompt_other_existing": "\n\n%s other existing components:\n",
        "warning_prompt_other_not_shown": "+%s more\n",
        "warning_prompt_cancel": "Cancel",
        # Conflict detection
        "conflict_detect_execution_name": "Conflict Detection",
        "conflict_detect_no_default_username": (
            "No default org is set. Set a target username before running conflict detection."
        ),
        "conflict_detect_view_root": "%s: %s differences",
        "conflict_detect_conflict_header": (
            "Conflicts detected: %s files differ (scanned %s remote and %s local files):"
        ),
        "conflict_detect_conflict_header_timestamp": (
            "Conflicts detected: %s files changed in the org since your last sync:"
        ),
        "conflict_detect_override": "Override Conflicts and Continue",
        "conflict_detect_show_conflicts": "Show Conflicts",
        "conflict_detect_command_hint": (
            "To review the conflicts before continuing, run: %s"
        ),
        "conflict_detect_error": "Conflict detection failed: %s",
        "conflict_detect_conflicts_during_deploy": (
            "Conflicts detected with the org. Deploying will overwrite remote changes."
        ),
        "conflict_detect_conflicts_during_retrieve": (
            "Conflicts detected with your local project. Retrieving will overwrite local changes."
        ),
        # Output channel
        "channel_starting_message": "Starting ",
        "channel_end": "Ended",
        # CLI
        "cli_cancelled": "Operation cancelled.",
        "cli_proceeding": "Proceeding with %s component(s).",
    }
)


def localize(key: str, *args: object) -> str:
    """Render message ``key`` with positional ``args``."""

    try:
        template = _MESSAGES[key]
    except KeyError as exc:
        raise KeyError(f"unknown message key: {key!r}") from exc
    if not args:
        return template
    return template % args


def has_message(key: str) -> bool:
    return key in _MESSAGES


__all__ = ["has_message", "localize"]
