"""Artifact Stager.

This module copies the compiler's output directory into a bundle directory.

Design:
    - Creates the bundle directory (and parents) if needed
    - Copies each top-level entry of the output directory, replacing an
      existing entry of the same name
    - A failure on one entry is logged and the remaining entries are still
      staged
"""

import logging
import shutil
from pathlib import Path

from .build_utils import safe_rmtree

logger = logging.getLogger(__name__)


class ArtifactStager:
    """Copies build artifacts into a bundle directory."""

    def stage(self, output_dir: Path, bundle_dir: Path) -> int:
        """Stage every entry of output_dir into bundle_dir.

        Args:
            output_dir: Directory the compiler wrote artifacts to
            bundle_dir: Destination bundle directory

        Returns:
            Number of top-level entries staged
        """
        output_dir = Path(output_dir)
        bundle_dir = Path(bundle_dir)
        bundle_dir.mkdir(parents=True, exist_ok=True)

        if not output_dir.is_dir():
            logger.warning(f"Output directory {output_dir} does not exist, nothing to stage")
            return 0

        bundle_real = bundle_dir.resolve()
        if bundle_real == output_dir.resolve():
            logger.warning(f"Bundle directory {bundle_dir} is the output directory, nothing to stage")
            return 0

        try:
            entries = sorted(output_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.error(f"Cannot list output directory {output_dir}: {e}")
            return 0

        staged = 0
        for entry in entries:
            if entry.resolve() == bundle_real or entry.resolve() in bundle_real.parents:
                logger.debug(f"Skipping {entry}: contains the bundle directory")
                continue

            target = bundle_dir / entry.name
            try:
                self._copy_entry(entry, target)
                staged += 1
            except (OSError, shutil.Error) as e:
                logger.error(f"Failed to stage {entry.name}: {e}")

        logger.info(f"Staged {staged} of {len(entries)} artifacts into {bundle_dir}")
        return staged

    def _copy_entry(self, entry: Path, target: Path) -> None:
        if entry.is_dir():
            if target.is_symlink() or (target.exists() and not target.is_dir()):
                target.unlink()
            shutil.copytree(entry, target, dirs_exist_ok=True)
        else:
            if target.is_dir() and not target.is_symlink():
                safe_rmtree(target)
            shutil.copy2(entry, target)
