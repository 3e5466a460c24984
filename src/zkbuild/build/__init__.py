"""
Build system components for zkbuild.

This module provides the build pipeline:
- Source discovery and import extraction
- Import path resolution and dependency graph construction
- Build ordering
- Sequential compilation with a failure policy
- Artifact staging
"""

from .artifact_stager import ArtifactStager
from .batch_executor import (
    BatchDisposition,
    BatchExecutor,
    BatchReport,
    CompilationOutcome,
    FailurePolicy,
    OutcomeStatus,
)
from .compilation_executor import ForgeCompiler, kill_process_tree
from .compiler import CompileResult, CompilerError, ICompiler
from .dependency_graph import DependencyGraph, GraphBuilder
from .import_extractor import ImportExtractor, ImportScanResult
from .orchestrator import BuildOrchestrator, BuildOrchestratorError, BuildPlan, BuildResult
from .path_resolver import PathResolver
from .source_scanner import DirectoryUnreadableError, SourceScanner
from .topological_orderer import CycleDetectedError, TopologicalOrderer

__all__ = [
    'ArtifactStager',
    'BatchDisposition',
    'BatchExecutor',
    'BatchReport',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'BuildPlan',
    'BuildResult',
    'CompilationOutcome',
    'CompileResult',
    'CompilerError',
    'CycleDetectedError',
    'DependencyGraph',
    'DirectoryUnreadableError',
    'FailurePolicy',
    'ForgeCompiler',
    'GraphBuilder',
    'ICompiler',
    'ImportExtractor',
    'ImportScanResult',
    'OutcomeStatus',
    'PathResolver',
    'SourceScanner',
    'TopologicalOrderer',
    'kill_process_tree',
]
