"""
Pytest configuration for the zkbuild test suite.

This configuration enables the --full flag to run integration tests and
provides shared fixtures for building throwaway Solidity projects.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from zkbuild.build import CompileResult, ICompiler
from zkbuild.log import LOGGER_NAME


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Configure pytest based on command-line options."""
    if config.getoption("--full"):
        # Remove the default marker expression that excludes integration tests
        markexpr = config.getoption("-m", "")
        if markexpr == "not integration":
            config.option.markexpr = ""


@pytest.fixture(autouse=True)
def reset_zkbuild_logger():
    """Undo setup_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class StubCompiler(ICompiler):
    """Deterministic compiler: fails for the given file names, records every call."""

    def __init__(self, failing: Iterable[str] = (), raising: Optional[Dict[str, Exception]] = None):
        self.failing = set(failing)
        self.raising = dict(raising or {})
        self.calls: List[Path] = []

    def compile(self, source: Path) -> CompileResult:
        self.calls.append(source)
        if source.name in self.raising:
            raise self.raising[source.name]
        if source.name in self.failing:
            return CompileResult(success=False, stderr=f"Error: {source.name} failed", returncode=1)
        return CompileResult(success=True)


@pytest.fixture
def stub_compiler():
    """Factory for StubCompiler instances."""
    return StubCompiler


@pytest.fixture
def write_sources():
    """Write {relative path: contents} under a root directory, returning resolved paths."""

    def _write(root: Path, files: Dict[str, str]) -> Dict[str, Path]:
        written = {}
        for rel_path, contents in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(contents, encoding="utf-8")
            written[rel_path] = path.resolve()
        return written

    return _write
