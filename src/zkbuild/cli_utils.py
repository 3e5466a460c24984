"""CLI utility functions for zkbuild.

This module provides common utilities used across CLI commands including:
- Error handling and formatting
- Project path validation
- Build order and batch report printing
"""

import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from zkbuild.build import BatchReport, BuildResult


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Build aborted")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message."""
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print()
        print(f"{ErrorFormatter.YELLOW}! {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_build_aborted(error: Exception) -> None:
        """Handle a fatal configuration, discovery or cycle error.

        Args:
            error: The BuildOrchestratorError that aborted the run
        """
        ErrorFormatter.print_error("Build aborted", str(error))
        if isinstance(error.__cause__, FileNotFoundError):
            print("Make sure the project directory contains a foundry.toml file, or pass --config / --no-config.")
        sys.exit(1)

    @staticmethod
    def handle_permission_error(error: PermissionError) -> None:
        """Handle PermissionError with standard formatting."""
        ErrorFormatter.print_error("Error: Permission denied", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)


class ReportPrinter:
    """Prints build orders and batch reports."""

    @staticmethod
    def _display(path: Path, base_dir: Optional[Path]) -> str:
        if base_dir is not None:
            try:
                return str(path.relative_to(base_dir))
            except ValueError:
                pass
        return str(path)

    @staticmethod
    def format_order(build_order: Sequence[Path], base_dir: Optional[Path] = None) -> List[str]:
        """Numbered lines for a build order (1-based)."""
        return [
            f"{index:>4}. {ReportPrinter._display(path, base_dir)}"
            for index, path in enumerate(build_order, start=1)
        ]

    @staticmethod
    def print_order(build_order: Sequence[Path], base_dir: Optional[Path] = None) -> None:
        """Print the compilation order."""
        print("Compilation order:")
        for line in ReportPrinter.format_order(build_order, base_dir):
            print(line)

    @staticmethod
    def print_report(report: BatchReport, base_dir: Optional[Path] = None) -> None:
        """Print a batch summary, listing every failed file."""
        print()
        print(f"Compiled: {report.success_count} succeeded, {report.failure_count} failed "
              f"({len(report.outcomes)} of {report.total} attempted)")

        if report.failure_count:
            print()
            print("Failed files:")
            for outcome in report.failures:
                print(f" - {ReportPrinter._display(outcome.source, base_dir)}")
                if outcome.message:
                    for line in outcome.message.splitlines():
                        print(f"     {line}")

        if report.exit_code == 0:
            ErrorFormatter.print_success(f"All {report.total} files compiled successfully")
        else:
            ErrorFormatter.print_error("Build failed!", f"Compilation {report.summary()}")

    @staticmethod
    def write_json(result: BuildResult, json_path: Path) -> None:
        """Write the graph, build order and batch report of a run as JSON."""
        json_path = Path(json_path)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
