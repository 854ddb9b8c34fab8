"""Unit tests for the output channel."""

from __future__ import annotations

import io
import re

from rich.console import Console

from deploy_guard.conflict import OutputChannel
from deploy_guard.observability import ChannelService


def _channel() -> tuple[ChannelService, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, force_terminal=False, color_system=None)
    return ChannelService(console=console), buffer


def test_lines_are_buffered_until_shown() -> None:
    channel, buffer = _channel()
    assert isinstance(channel, OutputChannel)

    channel.append_line("Conflicts detected:")
    channel.append_line("Foo.cls\nBar.cls")
    assert buffer.getvalue() == ""
    assert channel.lines == ("Conflicts detected:", "Foo.cls", "Bar.cls")

    channel.show_channel_output()
    channel.show_channel_output()

    assert buffer.getvalue().splitlines() == ["Conflicts detected:", "Foo.cls", "Bar.cls"]
    assert channel.show_count == 2


def test_markup_is_not_interpreted() -> None:
    channel, buffer = _channel()
    channel.append_line("[bold]literal[/bold]")
    channel.show_channel_output()
    assert buffer.getvalue().strip() == "[bold]literal[/bold]"


def test_timestamped_command_lines() -> None:
    channel = ChannelService(echo=False)
    channel.show_command_with_timestamp("Starting Conflict Detection")
    channel.show_command_with_timestamp("Ended Conflict Detection")

    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3} Starting Conflict Detection", channel.lines[0])
    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3} Ended Conflict Detection", channel.lines[1])


def test_clear_empties_buffer() -> None:
    channel = ChannelService(echo=False)
    channel.append_line("x")
    channel.clear()
    assert channel.lines == ()
