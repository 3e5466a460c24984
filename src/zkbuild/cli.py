"""
Command-line interface for zkbuild.

This module provides the `zkbuild` CLI tool for compiling Solidity sources
one file at a time in dependency order.
"""

import argparse
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from zkbuild import __version__
from zkbuild.build import BuildOrchestrator, BuildOrchestratorError
from zkbuild.cli_utils import ErrorFormatter, PathValidator, ReportPrinter
from zkbuild.config import BuildConfig, CyclePolicy
from zkbuild.log import setup_logging


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    source_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    bundle_dir: Optional[Path] = None
    compiler: str = "forge"
    zksync: bool = True
    compiler_args: List[str] = field(default_factory=list)
    fail_fast: bool = False
    timeout: Optional[float] = None
    cycles: str = CyclePolicy.ERROR.value
    config: Optional[Path] = None
    no_config: bool = False
    dry_run: bool = False
    verbose: bool = False
    log_file: Optional[Path] = None
    json_report: Optional[Path] = None

    def to_config(self) -> BuildConfig:
        return BuildConfig(
            project_dir=self.project_dir,
            source_dir=self.source_dir,
            output_dir=self.output_dir,
            bundle_dir=self.bundle_dir,
            compiler_binary=self.compiler,
            zksync=self.zksync,
            extra_compiler_args=list(self.compiler_args),
            fail_fast=self.fail_fast,
            timeout=self.timeout,
            cycle_policy=CyclePolicy(self.cycles),
            config_path=self.config,
            require_config=not self.no_config,
            dry_run=self.dry_run,
        )


def build_command(args: BuildArgs) -> None:
    """Compile every source file in dependency order.

    Examples:
        zkbuild build                          # Build the current project
        zkbuild build path/to/project          # Build a specific project
        zkbuild build --fail-fast              # Stop at the first failure
        zkbuild build --bundle dist/artifacts  # Copy artifacts afterwards
        zkbuild build --dry-run                # Only print the build order
        zkbuild build --json-report build.json # Also write a machine-readable report
    """
    print(f"zkbuild v{__version__}")
    print()

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        orchestrator = BuildOrchestrator()
        plan = orchestrator.plan(args.to_config())
        config = plan.config

        ReportPrinter.print_order(plan.build_order, config.project_dir)
        if plan.cycles:
            ErrorFormatter.print_warning(
                f"{len(plan.cycles)} dependency cycle(s) found; order across them is best-effort"
            )
        print()

        start_time = time.time()
        result = orchestrator.execute(plan)
        build_time = time.time() - start_time

        if args.json_report is not None:
            ReportPrinter.write_json(result, args.json_report)

        if result.report is None:
            ErrorFormatter.print_success(result.message)
            sys.exit(0)

        ReportPrinter.print_report(result.report, config.project_dir)
        if config.bundle_dir is not None:
            print(f"Staged {result.staged_count} artifacts into {config.bundle_dir}")
        print(f"Build time: {build_time:.2f}s")
        sys.exit(result.exit_code)

    except BuildOrchestratorError as e:
        ErrorFormatter.handle_build_aborted(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def main(argv: Optional[List[str]] = None) -> None:
    """zkbuild - dependency-ordered Solidity compilation."""
    parser = argparse.ArgumentParser(
        prog="zkbuild",
        description="zkbuild - compile Solidity sources one file at a time in dependency order",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"zkbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Compile all sources in dependency order",
    )
    build_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory containing foundry.toml (default: current directory)",
    )
    build_parser.add_argument(
        "--src",
        dest="source_dir",
        type=Path,
        default=None,
        help="Source root to scan, relative to PROJECT_DIR (default: profile 'src' from foundry.toml, else contracts)",
    )
    build_parser.add_argument(
        "--out",
        dest="output_dir",
        type=Path,
        default=None,
        help="Compiler output directory, relative to PROJECT_DIR (default: profile 'out' from foundry.toml, else out)",
    )
    build_parser.add_argument(
        "--bundle",
        dest="bundle_dir",
        type=Path,
        default=None,
        help="Copy the output directory's entries here after compiling",
    )
    build_parser.add_argument(
        "--compiler",
        default="forge",
        help="Compiler binary (default: forge)",
    )
    build_parser.add_argument(
        "--no-zksync",
        action="store_true",
        help="Do not pass --zksync to the compiler",
    )
    build_parser.add_argument(
        "--compiler-arg",
        dest="compiler_args",
        action="append",
        default=[],
        help="Extra argument for every compiler invocation (repeatable)",
    )
    build_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that fails to compile",
    )
    build_parser.add_argument(
        "-t",
        "--timeout",
        type=_positive_float,
        default=None,
        help="Per-file compiler timeout in seconds (default: no timeout)",
    )
    build_parser.add_argument(
        "--cycles",
        choices=[policy.value for policy in CyclePolicy],
        default=CyclePolicy.ERROR.value,
        help="Dependency cycle handling: abort (error) or best-effort order (warn)",
    )
    build_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to foundry.toml (default: PROJECT_DIR/foundry.toml)",
    )
    build_parser.add_argument(
        "--no-config",
        action="store_true",
        help="Continue without remappings if foundry.toml is missing",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the build order without compiling",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    build_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file",
    )
    build_parser.add_argument(
        "--json-report",
        type=Path,
        default=None,
        help="Write the dependency graph, build order and per-file outcomes to this JSON file",
    )

    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command == "build":
        build_args = BuildArgs(
            project_dir=parsed_args.project_dir,
            source_dir=parsed_args.source_dir,
            output_dir=parsed_args.output_dir,
            bundle_dir=parsed_args.bundle_dir,
            compiler=parsed_args.compiler,
            zksync=not parsed_args.no_zksync,
            compiler_args=parsed_args.compiler_args,
            fail_fast=parsed_args.fail_fast,
            timeout=parsed_args.timeout,
            cycles=parsed_args.cycles,
            config=parsed_args.config,
            no_config=parsed_args.no_config,
            dry_run=parsed_args.dry_run,
            verbose=parsed_args.verbose,
            log_file=parsed_args.log_file,
            json_report=parsed_args.json_report,
        )
        build_command(build_args)


if __name__ == "__main__":
    main()
