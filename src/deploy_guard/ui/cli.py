"""Command-line interface router for deploy-guard."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from deploy_guard.checks import (
    DEPLOY_MESSAGES,
    CompositePostconditionChecker,
    ConflictDetectionChecker,
    EmptyPostChecker,
    OverwriteComponentPrompt,
    PostconditionChecker,
    TimestampConflictChecker,
)
from deploy_guard.config import (
    ConfigLoadError,
    ConfigValidationError,
    conflict_detection_enabled,
    effective_config,
    load_config,
)
from deploy_guard.conflict import (
    ChoicePrompt,
    ConflictDetector,
    ConflictView,
    DirectoryMirrorRetriever,
    FileSnapshotLoader,
    TimestampConflictDetector,
)
from deploy_guard.constants import SNAPSHOT_FILENAME
from deploy_guard.context import WorkspaceContext
from deploy_guard.deploy_queue import DeployQueue
from deploy_guard.domain import CancelResponse, CheckResult, ContinueResponse, LocalComponent
from deploy_guard.main import ExitCode
from deploy_guard.messages import localize
from deploy_guard.metadata import MetadataDictionary
from deploy_guard.observability import (
    ChannelService,
    TelemetryService,
    correlation_scope,
    setup_logging,
    shutdown_logging,
)
from deploy_guard.ui.prompts import ConsoleChoicePrompt, ScriptedChoicePrompt


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 2

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class _Runtime:
    """Collaborators shared by one command invocation."""

    config: dict[str, Any]
    context: WorkspaceContext
    channel: ChannelService
    telemetry: TelemetryService
    view: ConflictView
    prompt: ChoicePrompt


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="deploy-guard",
        description=(
            "deploy-guard — conflict checks to run before a deploy or retrieve.\n\n"
            "Common workflows:\n"
            "  deploy-guard retrieve-check ApexClass:Foo --outputdir force-app/main/default/classes\n"
            "  deploy-guard deploy-check force-app --snapshot .deploy_guard/cache/snapshot.yaml\n"
            "  deploy-guard manifest-check package.xml --remote-dir /tmp/retrieved\n"
            "  deploy-guard config\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to TOML config (default: ./deploy_guard.toml if present).",
    )
    common.add_argument(
        "--workspace-root",
        default=None,
        help="Project root (overrides paths.workspace_root).",
    )
    common.add_argument(
        "--target-org",
        default=None,
        help="Org username or alias (overrides org.target_username).",
    )
    common.add_argument(
        "--answer",
        action="append",
        dest="answers",
        default=None,
        metavar="CHOICE",
        help="Pre-recorded prompt answer by choice id, e.g. skip, overwrite_all (repeatable).",
    )
    common.add_argument(
        "--dialog",
        action="store_true",
        default=False,
        help="Ask through a full-screen dialog instead of the console prompt.",
    )
    common.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log at DEBUG level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # retrieve-check ------------------------------------------------------
    retrieve_parser = subparsers.add_parser(
        "retrieve-check",
        parents=[common],
        help="Ask before a retrieve overwrites components that exist locally",
        description=(
            "Check which components a retrieve would write already exist in the workspace.\n\n"
            "Examples:\n"
            "  deploy-guard retrieve-check ApexClass:Foo ApexClass:Bar --outputdir classes\n"
            "  deploy-guard retrieve-check ApexClass:Foo --outputdir classes --answer skip\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    retrieve_parser.add_argument(
        "components", nargs="+", metavar="TYPE:NAME", help="Components to retrieve"
    )
    retrieve_parser.add_argument(
        "--outputdir", required=True, help="Directory the components are retrieved into"
    )
    retrieve_parser.set_defaults(handler=_cmd_retrieve_check)

    # deploy-check --------------------------------------------------------
    deploy_parser = subparsers.add_parser(
        "deploy-check",
        parents=[common],
        help="Compare cached and remote timestamps before a deploy",
        description=(
            "Detect components changed in the org since the last sync.\n\n"
            "Examples:\n"
            "  deploy-guard deploy-check force-app\n"
            "  deploy-guard deploy-check manifest/package.xml --manifest\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    deploy_parser.add_argument("target", help="Source path or manifest to deploy")
    deploy_parser.add_argument(
        "--manifest", action="store_true", default=False, help="TARGET is a manifest"
    )
    deploy_parser.add_argument(
        "--snapshot",
        default=None,
        help=f"Snapshot document (default: <cache_dir>/{SNAPSHOT_FILENAME})",
    )
    deploy_parser.set_defaults(handler=_cmd_deploy_check)

    # manifest-check ------------------------------------------------------
    manifest_parser = subparsers.add_parser(
        "manifest-check",
        parents=[common],
        help="Compare project files against a retrieved copy of the org",
        description=(
            "Diff the project against a tree retrieved from the org for the manifest.\n\n"
            "Examples:\n"
            "  deploy-guard manifest-check manifest/package.xml --remote-dir /tmp/org-copy\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    manifest_parser.add_argument("manifest", help="Manifest naming the components")
    manifest_parser.add_argument(
        "--remote-dir", required=True, help="Directory holding the retrieved org components"
    )
    manifest_parser.set_defaults(handler=_cmd_manifest_check)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective configuration (secrets redacted)",
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_retrieve_check(args: argparse.Namespace) -> int:
    runtime = _build_runtime(args)
    try:
        components = [
            LocalComponent.parse(spec, outputdir=args.outputdir) for spec in args.components
        ]
    except ValueError as exc:
        raise CLIError(str(exc)) from exc

    checker = CompositePostconditionChecker(
        OverwriteComponentPrompt(
            dictionary=MetadataDictionary(),
            workspace_root=runtime.context.workspace_root,
            prompt=runtime.prompt,
            telemetry=runtime.telemetry,
            preview_limit=int(runtime.config["conflict_detection"]["preview_limit"]),
        )
    )
    result = _run_chain(args, runtime, checker, ContinueResponse(components))

    payload: dict[str, object] = _result_payload("retrieve-check", result)
    if isinstance(result, ContinueResponse):
        payload["components"] = [component.label for component in result.data]
    return _finish(args, payload, result)


def _cmd_deploy_check(args: argparse.Namespace) -> int:
    runtime = _build_runtime(args)
    snapshot_path = (
        Path(args.snapshot) if args.snapshot else runtime.context.cache_dir / SNAPSHOT_FILENAME
    )
    queue = DeployQueue.get()
    checker: PostconditionChecker[Any]
    if conflict_detection_enabled(runtime.config):
        checker = TimestampConflictChecker(
            bool(args.manifest),
            DEPLOY_MESSAGES,
            identity=runtime.context,
            snapshot_loader=FileSnapshotLoader(snapshot_path),
            diff_builder=TimestampConflictDetector(),
            channel=runtime.channel,
            prompt=runtime.prompt,
            visualizer=runtime.view,
            telemetry=runtime.telemetry,
            deploy_lock=queue,
            workspace_root=runtime.context.workspace_root,
        )
    else:
        checker = EmptyPostChecker()

    async def guarded() -> CheckResult[Any]:
        await queue.lock()
        try:
            return await checker.check(ContinueResponse(args.target))
        finally:
            # The deploy itself runs elsewhere; release whatever the check left held.
            await queue.unlock()

    result = _run_async(args, runtime, guarded)
    payload = _result_payload("deploy-check", result)
    payload["target"] = args.target
    payload["conflicts"] = _conflict_paths(runtime.view)
    return _finish(args, payload, result)


def _cmd_manifest_check(args: argparse.Namespace) -> int:
    runtime = _build_runtime(args)
    detector = ConflictDetector(
        DirectoryMirrorRetriever(args.remote_dir),
        project_root=runtime.context.workspace_root,
        cache_dir=runtime.context.cache_dir,
    )
    checker = ConflictDetectionChecker(
        DEPLOY_MESSAGES,
        identity=runtime.context,
        remote_diff=detector,
        channel=runtime.channel,
        prompt=runtime.prompt,
        visualizer=runtime.view,
        telemetry=runtime.telemetry,
        enabled=conflict_detection_enabled(runtime.config),
    )
    result = _run_chain(args, runtime, checker, ContinueResponse(args.manifest))
    payload = _result_payload("manifest-check", result)
    payload["manifest"] = args.manifest
    payload["conflicts"] = _conflict_paths(runtime.view)
    return _finish(args, payload, result)


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    redacted = effective_config(config)
    if _flag(args, "json"):
        _emit_json({"command": "config", "config": redacted})
        return 0
    print(json.dumps(redacted, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_runtime(args: argparse.Namespace) -> _Runtime:
    config = _load_effective_config(args)
    context = WorkspaceContext.from_config(config)
    if not context.workspace_root.is_dir():
        raise CLIError(f"workspace root is not a directory: {context.workspace_root}")
    return _Runtime(
        config=config,
        context=context,
        channel=ChannelService(),
        telemetry=TelemetryService(),
        view=ConflictView(),
        prompt=_select_prompt(args),
    )


def _select_prompt(args: argparse.Namespace) -> ChoicePrompt:
    answers = getattr(args, "answers", None)
    if answers:
        return ScriptedChoicePrompt(answers)
    if _flag(args, "dialog"):
        from deploy_guard.ui.choice_dialog import TextualChoicePrompt

        return TextualChoicePrompt()
    if not sys.stdin.isatty():
        # Nobody can answer: every prompt is dismissed.
        return ScriptedChoicePrompt()
    return ConsoleChoicePrompt()


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "org.target_username": getattr(args, "target_org", None),
        "paths.workspace_root": getattr(args, "workspace_root", None),
    }
    if _flag(args, "verbose"):
        overrides["observability.log_level"] = "DEBUG"
    try:
        return load_config(getattr(args, "config_path", None), cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _run_chain(
    args: argparse.Namespace,
    runtime: _Runtime,
    checker: PostconditionChecker[Any],
    inputs: CheckResult[Any],
) -> CheckResult[Any]:
    async def run() -> CheckResult[Any]:
        return await checker.check(inputs)

    return _run_async(args, runtime, run)


def _run_async(
    args: argparse.Namespace,
    runtime: _Runtime,
    factory: Callable[[], Awaitable[CheckResult[Any]]],
) -> CheckResult[Any]:
    run_id = f"{datetime.now(tz=UTC).strftime('%Y%m%dT%H%M%SZ')}-{uuid.uuid4().hex[:8]}"
    logger = setup_logging(runtime.config["observability"], run_id=run_id)
    try:
        with correlation_scope(command=str(args.command), username=runtime.context.username):
            logger.info("running %s", args.command)
            result = asyncio.run(factory())
            logger.info("%s finished: %s", args.command, result.type.value)
            return result
    finally:
        shutdown_logging()


def _result_payload(command: str, result: CheckResult[Any]) -> dict[str, object]:
    payload: dict[str, object] = {"command": command, "status": result.type.value.lower()}
    if isinstance(result, CancelResponse) and result.message:
        payload["message"] = result.message
    return payload


def _conflict_paths(view: ConflictView) -> list[str]:
    state = view.state
    if state is None or state.results is None:
        return []
    return [diff.local_rel_path for diff in state.results.sorted_different()]


def _finish(
    args: argparse.Namespace, payload: Mapping[str, object], result: CheckResult[Any]
) -> int:
    cancelled = isinstance(result, CancelResponse)
    if _flag(args, "json"):
        _emit_json(payload)
    elif cancelled:
        message = payload.get("message")
        print(message if isinstance(message, str) else localize("cli_cancelled"), file=sys.stderr)
    else:
        components = payload.get("components")
        count = len(components) if isinstance(components, list) else 1
        print(localize("cli_proceeding", count))
        if isinstance(components, list):
            for label in components:
                print(f"  {label}")
    return int(ExitCode.CANCELLED if cancelled else ExitCode.SUCCESS)


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


__all__ = ["CLIError", "build_parser", "run_cli"]
