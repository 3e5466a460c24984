"""Run configuration for a zkbuild invocation."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

SOURCE_SUFFIX = ".sol"
DEFAULT_COMPILER = "forge"


class CyclePolicy(Enum):
    """What to do when the dependency graph contains a cycle."""

    ERROR = "error"  # abort the run with CycleDetectedError
    WARN = "warn"  # log a warning and emit a best-effort order


@dataclass
class BuildConfig:
    """Explicit settings for one build run.

    Directories left as None are filled in from foundry.toml (or the
    `contracts` / `out` fallbacks) by `resolved()`.
    """

    project_dir: Path
    source_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    bundle_dir: Optional[Path] = None
    compiler_binary: str = DEFAULT_COMPILER
    zksync: bool = True
    extra_compiler_args: List[str] = field(default_factory=list)
    fail_fast: bool = False
    timeout: Optional[float] = None
    cycle_policy: CyclePolicy = CyclePolicy.ERROR
    source_suffix: str = SOURCE_SUFFIX
    config_path: Optional[Path] = None
    require_config: bool = True
    profile: str = "default"
    dry_run: bool = False

    def __post_init__(self) -> None:
        self.project_dir = Path(self.project_dir).resolve()
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if isinstance(self.cycle_policy, str):
            self.cycle_policy = CyclePolicy(self.cycle_policy)

    def get_config_path(self) -> Path:
        """Path to foundry.toml (explicit, or inside the project directory)."""
        if self.config_path is not None:
            return self._anchor(self.config_path)
        return self.project_dir / "foundry.toml"

    def _anchor(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.project_dir / path

    def resolved(self, default_source_dir: Path, default_output_dir: Path) -> "BuildConfig":
        """
        Return a copy with every directory absolute.

        Args:
            default_source_dir: Used when source_dir is unset
            default_output_dir: Used when output_dir is unset
        """
        return BuildConfig(
            project_dir=self.project_dir,
            source_dir=self._anchor(self.source_dir or default_source_dir).resolve(),
            output_dir=self._anchor(self.output_dir or default_output_dir).resolve(),
            bundle_dir=self._anchor(self.bundle_dir).resolve() if self.bundle_dir else None,
            compiler_binary=self.compiler_binary,
            zksync=self.zksync,
            extra_compiler_args=list(self.extra_compiler_args),
            fail_fast=self.fail_fast,
            timeout=self.timeout,
            cycle_policy=self.cycle_policy,
            source_suffix=self.source_suffix,
            config_path=self.config_path,
            require_config=self.require_config,
            profile=self.profile,
            dry_run=self.dry_run,
        )
