"""
deploy-guard — metadata dictionary

File: src/deploy_guard/metadata/dictionary.py
Last updated: 2026-10-19

Purpose
- Map a metadata type name to its descriptor suffix, content extensions and path strategy.
- Answer "which files would a component of this type occupy locally?".

Functional requirements
- Lookup is synchronous and side-effect free.
- Unknown types return ``None``; callers fall back to the default strategy.
- Extra registrations may be supplied at construction time and override built-ins.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from deploy_guard.metadata.path_strategies import (
    BundlePathStrategy,
    DefaultPathStrategy,
    PathStrategy,
    WaveTemplateBundlePathStrategy,
    create_default_strategy,
)


@dataclass(frozen=True, slots=True)
class MetadataInfo:
    """Registration for one metadata type."""

    suffix: str | None
    extensions: tuple[str, ...] = ()
    path_strategy: PathStrategy = field(default_factory=DefaultPathStrategy)

    def __post_init__(self) -> None:
        if self.suffix is not None:
            if not isinstance(self.suffix, str):
                raise ValueError("MetadataInfo.suffix: expected string")
            object.__setattr__(self, "suffix", self.suffix.strip().lstrip(".") or None)
        normalized: list[str] = []
        for index, ext in enumerate(self.extensions):
            if not isinstance(ext, str) or not ext.strip():
                raise ValueError(f"MetadataInfo.extensions[{index}]: must be a non-empty string")
            ext = ext.strip()
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        object.__setattr__(self, "extensions", tuple(normalized))
        if not isinstance(self.path_strategy, PathStrategy):
            raise ValueError("MetadataInfo.path_strategy: must implement path_to_source")


_BUNDLE: Final[PathStrategy] = BundlePathStrategy()

_BUILTIN_TYPES: Final[Mapping[str, MetadataInfo]] = MappingProxyType(
    {
        "ApexClass": MetadataInfo("cls", (".cls",)),
        "ApexTrigger": MetadataInfo("trigger", (".trigger",)),
        "ApexPage": MetadataInfo("page", (".page",)),
        "ApexComponent": MetadataInfo("component", (".component",)),
        "AuraDefinitionBundle": MetadataInfo("cmp", (".cmp", ".app", ".evt", ".intf"), _BUNDLE),
        "LightningComponentBundle": MetadataInfo("js", (".js", ".html"), _BUNDLE),
        "StaticResource": MetadataInfo("resource", (".resource",)),
        "CustomObject": MetadataInfo("object", ()),
        "CustomField": MetadataInfo("field", ()),
        "CustomLabels": MetadataInfo("labels", ()),
        "CustomTab": MetadataInfo("tab", ()),
        "Layout": MetadataInfo("layout", ()),
        "PermissionSet": MetadataInfo("permissionset", ()),
        "Profile": MetadataInfo("profile", ()),
        "Flow": MetadataInfo("flow", ()),
        "EmailTemplate": MetadataInfo("email", (".email",)),
        "WaveTemplateBundle": MetadataInfo("json", (), WaveTemplateBundlePathStrategy()),
    }
)


class MetadataDictionary:
    """Read-only registry of metadata type information."""

    def __init__(self, extra: Mapping[str, MetadataInfo] | None = None) -> None:
        entries = dict(_BUILTIN_TYPES)
        for name, info in (extra or {}).items():
            if not isinstance(info, MetadataInfo):
                raise ValueError(f"{name}: expected MetadataInfo, got {type(info).__name__}")
            entries[name] = info
        self._entries: Mapping[str, MetadataInfo] = MappingProxyType(entries)

    def get_info(self, metadata_type: str) -> MetadataInfo | None:
        return self._entries.get(metadata_type)

    def strategy_for(self, metadata_type: str) -> PathStrategy:
        info = self.get_info(metadata_type)
        return info.path_strategy if info is not None else create_default_strategy()


__all__ = ["MetadataDictionary", "MetadataInfo"]
