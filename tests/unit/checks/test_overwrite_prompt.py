"""
deploy-guard — unit tests for the local-existence overwrite checker

File: tests/unit/checks/test_overwrite_prompt.py
Last updated: 2026-10-19

Purpose
- Exercise ``OverwriteComponentPrompt`` against real files under a temporary workspace.

What this test file should cover
- Components that do not exist locally pass through without a prompt.
- List inputs are narrowed by the skip set; single inputs pass through unchanged.
- Dismissal and skipping every found component cancel.
- A component listed twice is asked about once.
- Path strategies decide where a component's files are looked up.
- An unknown suffix is reported and treated as absent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from deploy_guard.checks import OverwriteComponentPrompt
from deploy_guard.domain import CancelResponse, ContinueResponse, LocalComponent
from deploy_guard.metadata import MetadataDictionary
from deploy_guard.observability import TelemetryKind, TelemetryService
from deploy_guard.ui.prompts import ScriptedChoicePrompt

CLASSES = "force-app/main/default/classes"


@dataclass
class _RecordingLogger:
    events: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def info(self, event: str, **kwargs: object) -> None:
        self.events.append((event, dict(kwargs)))


def _touch(root: Path, relative: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("// body\n", encoding="utf-8")


def _apex(name: str, outputdir: str = CLASSES) -> LocalComponent:
    return LocalComponent(type="ApexClass", file_name=name, outputdir=outputdir)


def _checker(
    root: Path, prompt: ScriptedChoicePrompt, telemetry: TelemetryService | None = None
) -> OverwriteComponentPrompt:
    return OverwriteComponentPrompt(
        dictionary=MetadataDictionary(),
        workspace_root=root,
        prompt=prompt,
        telemetry=telemetry or TelemetryService(),
    )


@pytest.mark.asyncio
async def test_nothing_exists_continues_without_prompt(tmp_path: Path) -> None:
    prompt = ScriptedChoicePrompt()
    inputs = ContinueResponse([_apex("Foo"), _apex("Bar")])

    result = await _checker(tmp_path, prompt).check(inputs)

    assert result is inputs
    assert prompt.asked == ()


@pytest.mark.asyncio
async def test_cancelled_input_passes_through(tmp_path: Path) -> None:
    prompt = ScriptedChoicePrompt()
    cancel = CancelResponse("earlier step")
    assert await _checker(tmp_path, prompt).check(cancel) is cancel
    assert prompt.asked == ()


@pytest.mark.asyncio
async def test_list_input_is_narrowed_by_skip_set(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Foo.cls")
    _touch(tmp_path, f"{CLASSES}/Bar.cls-meta.xml")
    foo, bar, baz = _apex("Foo"), _apex("Bar"), _apex("Baz")
    prompt = ScriptedChoicePrompt(["skip", "overwrite"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse([foo, bar, baz]))

    assert result == ContinueResponse([bar, baz])
    assert len(prompt.asked) == 2
    assert prompt.asked[0].startswith("ApexClass Foo already exists")


@pytest.mark.asyncio
async def test_overwrite_all_keeps_every_component(tmp_path: Path) -> None:
    for name in ("A", "B", "C"):
        _touch(tmp_path, f"{CLASSES}/{name}.cls")
    components = [_apex("A"), _apex("B"), _apex("C")]
    prompt = ScriptedChoicePrompt(["overwrite_all"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse(components))

    assert result == ContinueResponse(components)
    assert len(prompt.asked) == 1


@pytest.mark.asyncio
async def test_skip_all_found_cancels(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/A.cls")
    _touch(tmp_path, f"{CLASSES}/B.cls")
    prompt = ScriptedChoicePrompt(["skip_all"])

    result = await _checker(tmp_path, prompt).check(
        ContinueResponse([_apex("A"), _apex("B"), _apex("New")])
    )

    assert isinstance(result, CancelResponse)
    assert result.message is None


@pytest.mark.asyncio
async def test_skipping_each_found_component_cancels(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/A.cls")
    _touch(tmp_path, f"{CLASSES}/B.cls")
    prompt = ScriptedChoicePrompt(["skip", "skip"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse([_apex("A"), _apex("B")]))

    assert isinstance(result, CancelResponse)


@pytest.mark.asyncio
@pytest.mark.parametrize("choice", ["skip_all", "skip"])
async def test_duplicated_component_skipped_cancels(tmp_path: Path, choice: str) -> None:
    _touch(tmp_path, f"{CLASSES}/Foo.cls")
    prompt = ScriptedChoicePrompt([choice])

    result = await _checker(tmp_path, prompt).check(
        ContinueResponse([_apex("Foo"), _apex("Foo")])
    )

    assert isinstance(result, CancelResponse)
    assert len(prompt.asked) == 1


@pytest.mark.asyncio
async def test_duplicated_component_overwrite_is_asked_once(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Foo.cls")
    components = [_apex("Foo"), _apex("Foo"), _apex("New")]
    prompt = ScriptedChoicePrompt(["overwrite"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse(components))

    assert result == ContinueResponse(components)
    assert len(prompt.asked) == 1


@pytest.mark.asyncio
async def test_dismissal_cancels(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/A.cls")
    prompt = ScriptedChoicePrompt()

    result = await _checker(tmp_path, prompt).check(ContinueResponse([_apex("A")]))

    assert isinstance(result, CancelResponse)
    assert len(prompt.asked) == 1


@pytest.mark.asyncio
async def test_single_input_overwrite_passes_through_unchanged(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Solo.cls")
    inputs = ContinueResponse(_apex("Solo"))
    prompt = ScriptedChoicePrompt(["overwrite"])

    assert await _checker(tmp_path, prompt).check(inputs) is inputs


@pytest.mark.asyncio
async def test_single_input_skip_cancels(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Solo.cls")
    prompt = ScriptedChoicePrompt(["skip"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse(_apex("Solo")))

    assert isinstance(result, CancelResponse)


@pytest.mark.asyncio
async def test_bundle_components_are_found_inside_their_folder(tmp_path: Path) -> None:
    _touch(tmp_path, "force-app/main/default/lwc/helloWorld/helloWorld.js-meta.xml")
    bundle = LocalComponent(
        type="LightningComponentBundle",
        file_name="helloWorld",
        outputdir="force-app/main/default/lwc",
    )
    checker = _checker(tmp_path, ScriptedChoicePrompt())

    assert checker.component_exists(bundle) is True
    assert checker.component_exists(
        LocalComponent(
            type="LightningComponentBundle",
            file_name="other",
            outputdir="force-app/main/default/lwc",
        )
    ) is False


def test_file_extensions_include_descriptor_and_content(tmp_path: Path) -> None:
    checker = _checker(tmp_path, ScriptedChoicePrompt())
    assert checker.file_extensions(_apex("Foo")) == (".cls-meta.xml", ".cls")


def test_explicit_suffix_covers_unknown_types(tmp_path: Path) -> None:
    _touch(tmp_path, "widgets/Gear.widget-meta.xml")
    component = LocalComponent(
        type="Widget", file_name="Gear", outputdir="widgets", suffix="widget"
    )
    prompt = ScriptedChoicePrompt()
    checker = _checker(tmp_path, prompt)

    assert checker.component_exists(component) is True
    assert prompt.errors == ()


@pytest.mark.asyncio
async def test_unknown_suffix_is_reported_and_treated_as_absent(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Known.cls")
    mystery = LocalComponent(type="MysteryType", file_name="Thing", outputdir="mystery")
    known = _apex("Known")
    telemetry = TelemetryService()
    prompt = ScriptedChoicePrompt(["overwrite"])

    result = await _checker(tmp_path, prompt, telemetry).check(
        ContinueResponse([mystery, known])
    )

    assert result == ContinueResponse([mystery, known])
    assert len(prompt.errors) == 1
    assert "Error checking workspace" in prompt.errors[0]
    events = telemetry.replay(kind=TelemetryKind.EXCEPTION)
    assert [event.name for event in events] == ["OverwriteComponentPromptException"]
    assert events[0].message == "Missing suffix for MysteryType"


@pytest.mark.asyncio
async def test_type_override_drives_dictionary_lookup(tmp_path: Path) -> None:
    _touch(tmp_path, "triggers/OnSave.trigger")
    component = LocalComponent(
        type="Code", file_name="OnSave", outputdir="triggers", type_override="ApexTrigger"
    )
    prompt = ScriptedChoicePrompt(["skip"])

    result = await _checker(tmp_path, prompt).check(ContinueResponse([component]))

    assert isinstance(result, CancelResponse)
    assert prompt.asked[0].startswith("Code OnSave already exists")


@pytest.mark.asyncio
async def test_prompt_outcome_is_logged_as_a_decision(tmp_path: Path) -> None:
    _touch(tmp_path, f"{CLASSES}/Foo.cls")
    _touch(tmp_path, f"{CLASSES}/Bar.cls")
    decisions = _RecordingLogger()
    checker = OverwriteComponentPrompt(
        dictionary=MetadataDictionary(),
        workspace_root=tmp_path,
        prompt=ScriptedChoicePrompt(["skip", "overwrite"]),
        telemetry=TelemetryService(),
        decision_logger=decisions,
    )

    await checker.check(ContinueResponse([_apex("Foo"), _apex("Bar"), _apex("Baz")]))

    assert decisions.events == [
        (
            "overwrite_prompt_decision",
            {"found": ["ApexClass:Foo", "ApexClass:Bar"], "skipped": ["ApexClass:Foo"]},
        )
    ]
