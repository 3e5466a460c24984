"""Abstract base class for the compiler collaborator.

This module defines the interface the batch executor drives, so that a real
toolchain process and a deterministic test stub are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class CompileResult:
    """Result of compiling one source file."""
    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def diagnostic(self) -> str:
        """Best available failure text: stderr, then stdout, then the exit code."""
        text = self.stderr.strip() or self.stdout.strip()
        if text:
            return text
        return f"Compiler exited with code {self.returncode}"


class CompilerError(Exception):
    """Raised when the compiler cannot be invoked or does not finish."""
    pass


class ICompiler(ABC):
    """Interface for per-file compilers.

    Implementations:
    - ForgeCompiler (runs `forge build <file>` as a subprocess)
    - test stubs returning canned results
    """

    @abstractmethod
    def compile(self, source: Path) -> CompileResult:
        """Compile a single source file.

        Args:
            source: Path to the source file

        Returns:
            CompileResult; success is False for a non-zero exit

        Raises:
            CompilerError: If the compiler could not be run to completion
        """
        pass
