"""Metadata type registry and on-disk path strategies."""

from deploy_guard.metadata.dictionary import MetadataDictionary, MetadataInfo
from deploy_guard.metadata.path_strategies import (
    BundlePathStrategy,
    DefaultPathStrategy,
    PathStrategy,
    WaveTemplateBundlePathStrategy,
    create_default_strategy,
)

__all__ = [
    "BundlePathStrategy",
    "DefaultPathStrategy",
    "MetadataDictionary",
    "MetadataInfo",
    "PathStrategy",
    "WaveTemplateBundlePathStrategy",
    "create_default_strategy",
]
