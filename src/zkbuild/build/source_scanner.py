"""
Source file discovery.

This module handles:
- Recursively scanning a source root for files with the source suffix
- Canonicalizing every discovered path (symlinks resolved)
- Terminating on symlinked directory cycles
- Reporting unreadable directories as fatal errors
"""

import logging
from pathlib import Path
from typing import List, Set

logger = logging.getLogger(__name__)


class DirectoryUnreadableError(Exception):
    """Raised when the source root or one of its subdirectories cannot be listed."""
    pass


class SourceScanner:
    """
    Scans a directory tree for source files.

    The scanner:
    1. Walks the tree depth-first in sorted name order
    2. Follows symlinked directories, but visits each real directory once
    3. Collects files ending with the source suffix as canonical paths
    4. Returns each file at most once, in discovery order
    """

    def __init__(self, source_suffix: str = ".sol"):
        """
        Initialize source scanner.

        Args:
            source_suffix: File name suffix of recognized source files
        """
        self.source_suffix = source_suffix

    def scan(self, root_dir: Path) -> List[Path]:
        """
        Find all source files under root_dir.

        Args:
            root_dir: Directory to scan

        Returns:
            Canonical absolute paths of discovered source files

        Raises:
            DirectoryUnreadableError: If root_dir or a subdirectory can't be listed
        """
        root_dir = Path(root_dir)
        if not root_dir.is_dir():
            raise DirectoryUnreadableError(f"Source directory not found: {root_dir}")

        sources: List[Path] = []
        seen_files: Set[Path] = set()
        visited_dirs: Set[Path] = set()
        self._walk(root_dir, sources, seen_files, visited_dirs)

        logger.info(f"Found {len(sources)} source files under {root_dir}")
        return sources

    def _walk(
        self,
        directory: Path,
        sources: List[Path],
        seen_files: Set[Path],
        visited_dirs: Set[Path]
    ) -> None:
        real_dir = directory.resolve()
        if real_dir in visited_dirs:
            logger.debug(f"Skipping already visited directory {directory}")
            return
        visited_dirs.add(real_dir)

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryUnreadableError(f"Cannot list directory {directory}: {e}") from e

        for entry in entries:
            if entry.is_dir():
                self._walk(entry, sources, seen_files, visited_dirs)
            elif entry.name.endswith(self.source_suffix) and entry.is_file():
                canonical = entry.resolve()
                if canonical not in seen_files:
                    seen_files.add(canonical)
                    sources.append(canonical)
