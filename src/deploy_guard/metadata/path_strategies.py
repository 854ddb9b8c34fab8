"""Path-construction strategies for where a component's files live on disk."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final, Protocol, runtime_checkable

_WAVE_TEMPLATE_INFO: Final[str] = "template-info"


@runtime_checkable
class PathStrategy(Protocol):
    def path_to_source(self, dirpath: str, file_name: str, ext: str) -> str: ...


class DefaultPathStrategy:
    """``<dir>/<name><ext>``, e.g. ``classes/Foo.cls``."""

    def path_to_source(self, dirpath: str, file_name: str, ext: str) -> str:
        return str(PurePosixPath(dirpath) / f"{file_name}{ext}")


class BundlePathStrategy:
    """``<dir>/<name>/<name><ext>`` for bundle types (LWC, Aura)."""

    def path_to_source(self, dirpath: str, file_name: str, ext: str) -> str:
        return str(PurePosixPath(dirpath) / file_name / f"{file_name}{ext}")


class WaveTemplateBundlePathStrategy:
    """Wave templates keep their descriptor as ``<dir>/<name>/template-info<ext>``."""

    def path_to_source(self, dirpath: str, file_name: str, ext: str) -> str:
        return str(PurePosixPath(dirpath) / file_name / f"{_WAVE_TEMPLATE_INFO}{ext}")


def create_default_strategy() -> PathStrategy:
    return DefaultPathStrategy()


__all__ = [
    "BundlePathStrategy",
    "DefaultPathStrategy",
    "PathStrategy",
    "WaveTemplateBundlePathStrategy",
    "create_default_strategy",
]
