"""
deploy-guard — runtime config loader.

File: src/deploy_guard/config/loader.py
Last updated: 2026-10-19

Purpose
- Build the runtime config by layering defaults, ``deploy_guard.toml``,
  ``DEPLOY_GUARD_*`` variables and CLI overrides.

What should be included in this file
- Variable names derive from the config tree: ``[org] target_username`` is
  ``DEPLOY_GUARD_ORG_TARGET_USERNAME``. Values are coerced to the type the key
  already holds.
- Path fields resolve against the directory of the config file.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from deploy_guard.config.schema import (
    PATH_FIELDS,
    assert_valid_config,
    default_config,
    dump_redacted,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "deploy_guard.toml"
ENV_PREFIX: Final[str] = "DEPLOY_GUARD_"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated config; CLI beats env, env beats the file, the file beats defaults.

    Without ``config_path`` a ``deploy_guard.toml`` in the working directory is
    read when present. An explicit path must exist.
    """

    if config_path is None:
        path = (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    else:
        path = Path(config_path).expanduser().resolve()

    config = assert_valid_config(
        merge_config(default_config(), _read_toml(path, required=config_path is not None))
    )
    config = merge_config(config, _env_layer(config, os.environ if environ is None else environ))
    config = assert_valid_config(merge_config(config, _cli_layer(cli_overrides or {})))
    for field_path in PATH_FIELDS:
        _resolve_path_field(config, field_path, path.parent)
    return assert_valid_config(config)


def effective_config(config: Mapping[str, object]) -> dict[str, Any]:
    """Redacted copy of a loaded config, safe to print or log."""

    return dump_redacted(config)


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        if required:
            raise ConfigLoadError(f"config file not found: {path}") from exc
        return {}
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _env_layer(
    section: Mapping[str, object], environ: Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for key in sorted(section):
        current = section[key]
        name = f"{prefix}{key.upper()}"
        if isinstance(current, Mapping):
            nested = _env_layer(current, environ, f"{name}_")
            if nested:
                layer[key] = nested
        elif name in environ and isinstance(current, (bool, int, str)):
            layer[key] = _coerce(environ[name], current, name)
    return layer


def _coerce(raw: str, current: bool | int | str, name: str) -> bool | int | str:
    value = raw.strip()
    # bool first: it is a subclass of int.
    if isinstance(current, bool):
        lowered = value.lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        raise ConfigLoadError(
            f"{name} must be a boolean (true/false/1/0/yes/no/on/off), got {raw!r}"
        )
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigLoadError(f"{name} must be an integer, got {raw!r}") from exc
    return value


def _cli_layer(overrides: Mapping[str, object]) -> dict[str, Any]:
    """Expand dotted keys (``org.target_username``) into nested sections; ``None`` means unset."""

    layer: dict[str, Any] = {}
    for dotted in sorted(overrides):
        value = overrides[dotted]
        if value is None:
            continue
        *parents, leaf = [part for part in dotted.split(".") if part] or [""]
        if not leaf:
            raise ConfigLoadError(f"invalid CLI override key {dotted!r}")
        node = layer
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
    return layer


def _resolve_path_field(config: dict[str, Any], field_path: tuple[str, ...], base_dir: Path) -> None:
    *parents, leaf = field_path
    section: Any = config
    for key in parents:
        section = section.get(key)
        if not isinstance(section, dict):
            return
    raw = section.get(leaf)
    if not isinstance(raw, str):
        return
    candidate = Path(os.path.expandvars(raw)).expanduser()
    # An absolute candidate replaces base_dir in the join.
    section[leaf] = Path(os.path.normpath(base_dir / candidate)).as_posix()


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "effective_config",
    "load_config",
]
