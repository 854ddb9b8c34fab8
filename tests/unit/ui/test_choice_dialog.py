"""Unit tests for the textual choice dialog (App.run_test harness)."""

from __future__ import annotations

import pytest

from deploy_guard.ui.choice_dialog import ChoiceDialogApp

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_button_press_returns_its_index() -> None:
    app = ChoiceDialogApp("ApexClass Foo already exists.", ["Overwrite", "Skip"])
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.click("#choice-1")
        await pilot.pause()
    assert app.return_value == 1


@pytest.mark.asyncio
async def test_enter_on_focused_first_button_returns_zero() -> None:
    app = ChoiceDialogApp("Conflicts detected.", ["Show Conflicts", "Override"])
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("enter")
        await pilot.pause()
    assert app.return_value == 0


@pytest.mark.asyncio
async def test_escape_dismisses_with_none() -> None:
    app = ChoiceDialogApp("Conflicts detected.", ["Show Conflicts", "Override"])
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("escape")
        await pilot.pause()
    assert app.return_value is None
