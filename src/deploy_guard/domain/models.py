"""
deploy-guard — check result and component value types

File: src/deploy_guard/domain/models.py
Last updated: 2026-10-19

Purpose
- Define the tagged ``CheckResult`` union returned by every postcondition checker.
- Define the read-only ``LocalComponent`` and ``ConflictDetectionConfig`` inputs.

Functional requirements
- Values are immutable once produced; narrowing a payload builds a new collection.
- ``LocalComponent`` is hashable by value so skip sets can hold it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, NoReturn, TypeAlias, TypeVar

T = TypeVar("T")

_MAX_NAME_LENGTH = 1024
_MAX_PATH_LENGTH = 4096


class ResponseType(StrEnum):
    """Discriminator for the two ``CheckResult`` variants."""

    CONTINUE = "CONTINUE"
    CANCEL = "CANCEL"


@dataclass(frozen=True, slots=True)
class ContinueResponse(Generic[T]):
    """Checker outcome that lets the pipeline proceed with ``data``."""

    data: T

    @property
    def type(self) -> ResponseType:
        return ResponseType.CONTINUE


@dataclass(frozen=True, slots=True)
class CancelResponse:
    """Checker outcome that stops the pipeline, optionally with a user-facing message."""

    message: str | None = None

    def __post_init__(self) -> None:
        if self.message is not None and not isinstance(self.message, str):
            _fail("CancelResponse.message", f"expected string, got {type(self.message).__name__}")

    @property
    def type(self) -> ResponseType:
        return ResponseType.CANCEL


CheckResult: TypeAlias = ContinueResponse[T] | CancelResponse


def is_continue(result: ContinueResponse[T] | CancelResponse) -> bool:
    return isinstance(result, ContinueResponse)


@dataclass(frozen=True, slots=True)
class LocalComponent:
    """One local metadata artifact a retrieve would write to disk."""

    type: str
    file_name: str
    outputdir: str
    suffix: str | None = None
    type_override: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _as_str(self.type, "LocalComponent.type"))
        object.__setattr__(
            self, "file_name", _as_str(self.file_name, "LocalComponent.file_name")
        )
        object.__setattr__(
            self,
            "outputdir",
            _as_str(self.outputdir, "LocalComponent.outputdir", max_len=_MAX_PATH_LENGTH),
        )
        if self.suffix is not None:
            suffix = _as_str(self.suffix, "LocalComponent.suffix").lstrip(".")
            if not suffix:
                _fail("LocalComponent.suffix", "must not be only dots")
            object.__setattr__(self, "suffix", suffix)
        if self.type_override is not None:
            object.__setattr__(
                self,
                "type_override",
                _as_str(self.type_override, "LocalComponent.type_override"),
            )

    @property
    def metadata_type(self) -> str:
        """Type used for dictionary lookups; an explicit override wins."""

        return self.type_override or self.type

    @property
    def label(self) -> str:
        return f"{self.metadata_type}:{self.file_name}"

    @classmethod
    def parse(cls, spec: str, *, outputdir: str) -> LocalComponent:
        """Parse ``TYPE:NAME`` as written on the command line."""

        type_name, separator, file_name = spec.partition(":")
        if not separator:
            _fail("component", f"expected TYPE:NAME, got {spec!r}")
        return cls(type=type_name, file_name=file_name, outputdir=outputdir)


OneOrMany: TypeAlias = LocalComponent | Sequence[LocalComponent]


@dataclass(frozen=True, slots=True)
class ConflictDetectionConfig:
    """Inputs for one remote comparison pass."""

    username: str
    manifest: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "username", _as_str(self.username, "ConflictDetectionConfig.username")
        )
        object.__setattr__(
            self,
            "manifest",
            _as_str(
                self.manifest, "ConflictDetectionConfig.manifest", max_len=_MAX_PATH_LENGTH
            ),
        )


def _as_str(value: object, path: str, *, max_len: int = _MAX_NAME_LENGTH) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    parsed = value.strip()
    if not parsed:
        _fail(path, "must not be empty")
    if len(parsed) > max_len:
        _fail(path, f"must be <= {max_len} characters")
    return parsed


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = [
    "CancelResponse",
    "CheckResult",
    "ConflictDetectionConfig",
    "ContinueResponse",
    "LocalComponent",
    "OneOrMany",
    "ResponseType",
    "is_continue",
]
