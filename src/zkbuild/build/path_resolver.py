"""Import path resolution.

Maps a raw import string to a candidate filesystem path using the remapping
table first, then relative-path rules. Existence is never checked here.
"""

from pathlib import Path

from ..config.foundry_config import RemappingTable


class PathResolver:
    """Resolves import strings against a RemappingTable."""

    def __init__(self, remappings: RemappingTable):
        """
        Initialize path resolver.

        Args:
            remappings: Ordered remapping table (first matching prefix wins)
        """
        self.remappings = remappings

    def resolve(self, import_string: str, importing_file: Path) -> Path:
        """
        Resolve an import string to a candidate path.

        Resolution order:
        1. First remapping whose prefix starts the import string: the
           target directory joined with the remainder, canonicalized.
        2. Strings starting with '.' are resolved against the directory
           containing the importing file.
        3. Anything else is returned as-is (external/library reference).

        Args:
            import_string: Raw path from an import directive
            importing_file: File the import was found in

        Returns:
            Candidate path; may not exist and may be relative for
            external references
        """
        remapping = self.remappings.match(import_string)
        if remapping is not None:
            remainder = import_string[len(remapping.prefix):].lstrip("/")
            return (remapping.target / remainder).resolve()

        if import_string.startswith("."):
            return (Path(importing_file).parent / import_string).resolve()

        return Path(import_string)
