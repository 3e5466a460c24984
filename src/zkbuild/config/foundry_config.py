"""
foundry.toml configuration parser.

This module reads the parts of a Foundry project's foundry.toml that the
build driver needs: import remappings and the source/output directories of
a profile.

Example foundry.toml:
    [profile.default]
    src = "contracts"
    out = "out"
    remappings = [
        "@openzeppelin/=lib/openzeppelin-contracts/",
        "forge-std/=lib/forge-std/src/",
    ]
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
DEFAULT_SOURCE_DIR = "contracts"
DEFAULT_OUTPUT_DIR = "out"


class FoundryConfigError(Exception):
    """Exception raised for foundry.toml configuration errors."""

    pass


class ConfigNotFoundError(FoundryConfigError, FileNotFoundError):
    """Raised when the configuration file is required but missing."""

    pass


@dataclass(frozen=True)
class Remapping:
    """A single `prefix=target` remapping entry."""

    prefix: str
    target: Path

    @classmethod
    def parse(cls, entry: str, base_dir: Path) -> "Remapping":
        """
        Parse a `prefix=target` string.

        Args:
            entry: Raw remapping string from foundry.toml
            base_dir: Directory relative targets are anchored to

        Returns:
            Remapping with an absolute target directory

        Raises:
            FoundryConfigError: If the entry has no '=' or an empty prefix
        """
        if "=" not in entry:
            raise FoundryConfigError(f"Invalid remapping (expected prefix=target): {entry!r}")

        prefix, target = entry.split("=", 1)
        prefix = prefix.strip()
        target = target.strip()
        if not prefix:
            raise FoundryConfigError(f"Invalid remapping (empty prefix): {entry!r}")

        target_path = Path(target)
        if not target_path.is_absolute():
            target_path = base_dir / target_path
        return cls(prefix=prefix, target=target_path)


@dataclass(frozen=True)
class RemappingTable:
    """
    Ordered prefix -> target directory table.

    Lookup is first-match in table order; no longest-prefix selection is done.
    """

    entries: Tuple[Remapping, ...] = field(default_factory=tuple)

    @classmethod
    def from_entries(cls, entries: List[str], base_dir: Path) -> "RemappingTable":
        """Build a table from raw `prefix=target` strings, keeping the first of duplicate prefixes."""
        seen = set()
        remappings = []
        for entry in entries:
            remapping = Remapping.parse(entry, base_dir)
            if remapping.prefix in seen:
                logger.debug(f"Ignoring duplicate remapping prefix {remapping.prefix!r}")
                continue
            seen.add(remapping.prefix)
            remappings.append(remapping)
        return cls(entries=tuple(remappings))

    def match(self, import_string: str) -> Optional[Remapping]:
        """Return the first entry whose prefix starts `import_string`."""
        for remapping in self.entries:
            if import_string.startswith(remapping.prefix):
                return remapping
        return None

    def __iter__(self) -> Iterator[Remapping]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class FoundryConfig:
    """
    Parser for foundry.toml files.

    Remappings are read from `[profile.<name>].remappings` first and from a
    top-level `remappings` array otherwise.

    Usage:
        config = FoundryConfig(Path("foundry.toml"))
        table = config.get_remappings()
        src_dir = config.get_source_dir()
    """

    def __init__(self, toml_path: Path, profile: str = DEFAULT_PROFILE):
        """
        Initialize the parser with a foundry.toml file.

        Args:
            toml_path: Path to the foundry.toml file
            profile: Foundry profile to read settings from

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            FoundryConfigError: If the file cannot be parsed
        """
        self.toml_path = Path(toml_path)
        self.profile = profile

        if not self.toml_path.exists():
            raise ConfigNotFoundError(f"Configuration file not found: {self.toml_path}")

        try:
            with open(self.toml_path, "rb") as f:
                self.data: Dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise FoundryConfigError(f"Failed to parse {self.toml_path}: {e}") from e

    @property
    def root(self) -> Path:
        """Directory containing foundry.toml (project root)."""
        return self.toml_path.parent.resolve()

    def _profile_section(self) -> Dict[str, Any]:
        profiles = self.data.get("profile")
        if not isinstance(profiles, dict):
            return {}
        section = profiles.get(self.profile)
        return section if isinstance(section, dict) else {}

    def get_remappings(self) -> RemappingTable:
        """
        Parse the remapping entries for the configured profile.

        Returns:
            RemappingTable in file order (empty if none are declared)

        Raises:
            FoundryConfigError: If remappings is not a list of strings
        """
        raw = self._profile_section().get("remappings")
        if raw is None:
            raw = self.data.get("remappings", [])

        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            raise FoundryConfigError(f"'remappings' in {self.toml_path} must be a list of strings")

        return RemappingTable.from_entries(raw, self.root)

    def get_source_dir(self) -> Path:
        """Source directory for the profile (`src`, default 'contracts')."""
        return self.root / str(self._profile_section().get("src", DEFAULT_SOURCE_DIR))

    def get_output_dir(self) -> Path:
        """Artifact directory for the profile (`out`, default 'out')."""
        return self.root / str(self._profile_section().get("out", DEFAULT_OUTPUT_DIR))
