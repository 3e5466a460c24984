"""Configuration parsing modules for zkbuild."""

from .build_config import BuildConfig, CyclePolicy
from .foundry_config import (
    ConfigNotFoundError,
    FoundryConfig,
    FoundryConfigError,
    Remapping,
    RemappingTable,
)

__all__ = [
    "BuildConfig",
    "CyclePolicy",
    "ConfigNotFoundError",
    "FoundryConfig",
    "FoundryConfigError",
    "Remapping",
    "RemappingTable",
]
