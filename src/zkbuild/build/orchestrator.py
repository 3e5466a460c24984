"""
Build orchestration for zkbuild projects.

This module coordinates one build run:
- Configuration loading (foundry.toml remappings, src/out directories)
- Source discovery and dependency graph construction
- Build ordering
- Sequential compilation under a failure policy
- Artifact staging into a bundle directory
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import (
    BuildConfig,
    ConfigNotFoundError,
    FoundryConfig,
    FoundryConfigError,
    RemappingTable,
)
from ..config.foundry_config import DEFAULT_OUTPUT_DIR, DEFAULT_SOURCE_DIR
from .artifact_stager import ArtifactStager
from .batch_executor import BatchExecutor, BatchReport, FailurePolicy
from .compilation_executor import ForgeCompiler
from .compiler import ICompiler
from .dependency_graph import DependencyGraph, GraphBuilder
from .source_scanner import DirectoryUnreadableError
from .topological_orderer import CycleDetectedError, TopologicalOrderer

logger = logging.getLogger(__name__)


class BuildOrchestratorError(Exception):
    """Raised for fatal errors that abort a run before compilation."""
    pass


@dataclass
class BuildPlan:
    """Everything computed before compilation starts."""

    config: BuildConfig
    remappings: RemappingTable
    graph: DependencyGraph
    build_order: List[Path]
    cycles: List[List[Path]] = field(default_factory=list)


@dataclass
class BuildResult:
    """Result of a complete build run."""

    success: bool
    plan: BuildPlan
    report: Optional[BatchReport]
    staged_count: int
    build_time: float
    message: str

    @property
    def build_order(self) -> List[Path]:
        return self.plan.build_order

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation of the run (graph, order, report)."""
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "message": self.message,
            "build_order": [str(path) for path in self.build_order],
            "graph": self.plan.graph.to_dict(),
            "cycles": [[str(path) for path in cycle] for cycle in self.plan.cycles],
            "report": self.report.to_dict() if self.report is not None else None,
            "staged_count": self.staged_count,
            "build_time": round(self.build_time, 3),
        }


class BuildOrchestrator:
    """
    Orchestrates a complete zkbuild run.

    This class coordinates all phases of the build:
    1. Load remappings from foundry.toml
    2. Discover sources and build the dependency graph
    3. Compute the build order
    4. Compile each file in order
    5. Stage artifacts into the bundle directory (if configured)

    Example usage:
        orchestrator = BuildOrchestrator()
        result = orchestrator.build(BuildConfig(project_dir=Path(".")))
        if result.success:
            print(f"Compiled {len(result.build_order)} files")
    """

    def __init__(
        self,
        compiler: Optional[ICompiler] = None,
        executor: Optional[BatchExecutor] = None,
        stager: Optional[ArtifactStager] = None
    ):
        """
        Initialize build orchestrator.

        Args:
            compiler: Compiler to use (default: ForgeCompiler built from the config)
            executor: Batch executor (default: BatchExecutor())
            stager: Artifact stager (default: ArtifactStager())
        """
        self.compiler = compiler
        self.executor = executor or BatchExecutor()
        self.stager = stager or ArtifactStager()

    def plan(self, config: BuildConfig) -> BuildPlan:
        """
        Load configuration, build the graph and order it.

        Args:
            config: Run configuration

        Returns:
            BuildPlan with absolute directories filled in

        Raises:
            BuildOrchestratorError: On missing/invalid configuration, an
                unreadable source tree or (with CyclePolicy.ERROR) a cycle
        """
        try:
            remappings, config = self._load_config(config)

            logger.info(f"Scanning {config.source_dir} for *{config.source_suffix} files")
            graph = GraphBuilder(config.source_suffix).build(
                config.source_dir, remappings, project_dir=config.project_dir
            )

            orderer = TopologicalOrderer(config.cycle_policy)
            build_order = orderer.order(graph)
        except (FoundryConfigError, DirectoryUnreadableError, CycleDetectedError) as e:
            raise BuildOrchestratorError(str(e)) from e

        return BuildPlan(
            config=config,
            remappings=remappings,
            graph=graph,
            build_order=build_order,
            cycles=orderer.cycles,
        )

    def build(self, config: BuildConfig) -> BuildResult:
        """
        Execute a complete build run (plan, then execute).

        Args:
            config: Run configuration

        Returns:
            BuildResult; success only when every file compiled

        Raises:
            BuildOrchestratorError: If the run aborts before compilation
        """
        return self.execute(self.plan(config))

    def execute(self, plan: BuildPlan) -> BuildResult:
        """
        Compile a planned build order and stage the artifacts.

        Args:
            plan: Result of plan()

        Returns:
            BuildResult; success only when every file compiled
        """
        start_time = time.time()
        config = plan.config

        if config.dry_run:
            return BuildResult(
                success=True,
                plan=plan,
                report=None,
                staged_count=0,
                build_time=time.time() - start_time,
                message=f"Dry run: {len(plan.build_order)} files ordered",
            )

        compiler = self.compiler or ForgeCompiler(
            output_dir=config.output_dir,
            binary=config.compiler_binary,
            zksync=config.zksync,
            extra_args=config.extra_compiler_args,
            timeout=config.timeout,
            cwd=config.project_dir,
        )
        report = self.executor.run(plan.build_order, compiler, FailurePolicy(fail_fast=config.fail_fast))

        staged_count = 0
        if config.bundle_dir is not None:
            staged_count = self.stager.stage(config.output_dir, config.bundle_dir)

        return BuildResult(
            success=report.exit_code == 0,
            plan=plan,
            report=report,
            staged_count=staged_count,
            build_time=time.time() - start_time,
            message=f"Compilation {report.summary()}",
        )

    def _load_config(self, config: BuildConfig):
        config_path = config.get_config_path()
        try:
            foundry = FoundryConfig(config_path, profile=config.profile)
        except ConfigNotFoundError:
            if config.require_config:
                raise
            logger.warning(f"{config_path} not found, continuing without remappings")
            resolved = config.resolved(
                config.project_dir / DEFAULT_SOURCE_DIR,
                config.project_dir / DEFAULT_OUTPUT_DIR,
            )
            return RemappingTable(), resolved

        remappings = foundry.get_remappings()
        logger.info(f"Loaded {len(remappings)} remappings from {config_path}")
        resolved = config.resolved(foundry.get_source_dir(), foundry.get_output_dir())
        return remappings, resolved
