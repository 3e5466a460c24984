"""
Dependency graph construction.

This module builds the file -> imported files graph for a source tree:
- Discovers source files with SourceScanner
- Extracts import directives with ImportExtractor
- Resolves them with PathResolver
- Keeps only edges to existing files with the source suffix
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..config.foundry_config import RemappingTable
from .import_extractor import ImportExtractor
from .path_resolver import PathResolver
from .source_scanner import SourceScanner

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Immutable mapping of source file -> files it imports.

    Keys keep discovery order and each edge list keeps import order with
    duplicates removed, so iteration is deterministic.
    """

    def __init__(self, edges: Mapping[Path, Sequence[Path]]):
        self._edges: Dict[Path, Tuple[Path, ...]] = {
            node: tuple(dict.fromkeys(deps)) for node, deps in edges.items()
        }

    @property
    def nodes(self) -> Tuple[Path, ...]:
        """Discovered files, in discovery order."""
        return tuple(self._edges)

    def dependencies(self, node: Path) -> Tuple[Path, ...]:
        """Files imported by node (empty for files outside the graph's keys)."""
        return self._edges.get(node, ())

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._edges.values())

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON-friendly representation."""
        return {str(node): [str(dep) for dep in deps] for node, deps in self._edges.items()}

    def __contains__(self, node: object) -> bool:
        return node in self._edges

    def __iter__(self) -> Iterator[Path]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={len(self)}, edges={self.edge_count})"


class GraphBuilder:
    """
    Builds a DependencyGraph for all source files under a root directory.

    Example usage:
        builder = GraphBuilder()
        graph = builder.build(Path("contracts"), remappings)
        for node in graph:
            print(node, graph.dependencies(node))
    """

    def __init__(
        self,
        source_suffix: str = ".sol",
        extractor: Optional[ImportExtractor] = None,
        scanner: Optional[SourceScanner] = None
    ):
        """
        Initialize graph builder.

        Args:
            source_suffix: Suffix of recognized source files
            extractor: Import extractor (default: ImportExtractor())
            scanner: Source scanner (default: SourceScanner(source_suffix))
        """
        self.source_suffix = source_suffix
        self.extractor = extractor or ImportExtractor()
        self.scanner = scanner or SourceScanner(source_suffix)

    def build(
        self,
        root_dir: Path,
        remappings: RemappingTable,
        project_dir: Optional[Path] = None
    ) -> DependencyGraph:
        """
        Discover sources under root_dir and resolve their imports.

        Args:
            root_dir: Source root directory
            remappings: Remapping table used to resolve aliased imports
            project_dir: Directory bare (non-relative, unmapped) imports are
                looked up in (default: root_dir)

        Returns:
            DependencyGraph keyed by every discovered file

        Raises:
            DirectoryUnreadableError: If the tree can't be listed
        """
        resolver = PathResolver(remappings)
        base_dir = Path(project_dir if project_dir is not None else root_dir).resolve()
        edges: Dict[Path, List[Path]] = {}

        for source in self.scanner.scan(root_dir):
            edges[source] = self._resolve_dependencies(source, resolver, base_dir)

        graph = DependencyGraph(edges)
        logger.info(f"Built dependency graph: {len(graph)} files, {graph.edge_count} edges")
        return graph

    def _resolve_dependencies(self, source: Path, resolver: PathResolver, base_dir: Path) -> List[Path]:
        try:
            contents = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {source}: {e}")
            return []

        dependencies = []
        for import_string in self.extractor.extract(contents, source):
            candidate = resolver.resolve(import_string, source)
            if not candidate.is_absolute():
                candidate = base_dir / candidate
            if candidate.name.endswith(self.source_suffix) and candidate.is_file():
                dependencies.append(candidate.resolve())
            else:
                logger.debug(f"{source.name}: dropping unresolved import {import_string!r}")
        return dependencies
