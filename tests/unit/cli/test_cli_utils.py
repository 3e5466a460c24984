"""Unit tests for CLI utilities including ReportPrinter."""

import json
from pathlib import Path

import pytest

from zkbuild.build import (
    BatchDisposition,
    BatchReport,
    BuildPlan,
    BuildResult,
    CompilationOutcome,
    DependencyGraph,
    OutcomeStatus,
)
from zkbuild.cli_utils import ErrorFormatter, PathValidator, ReportPrinter
from zkbuild.config import BuildConfig, RemappingTable


class TestReportPrinter:
    """Tests for ReportPrinter class."""

    def test_format_order_numbered_from_one(self):
        """Test build order lines are 1-based and right-aligned."""
        lines = ReportPrinter.format_order([Path("/p/contracts/C.sol"), Path("/p/contracts/A.sol")], Path("/p"))

        assert lines == [
            f"   1. {Path('contracts/C.sol')}",
            f"   2. {Path('contracts/A.sol')}",
        ]

    def test_format_order_outside_base_dir(self):
        """Test paths outside the base directory are shown absolute."""
        lines = ReportPrinter.format_order([Path("/lib/oz/ERC20.sol")], Path("/p"))
        assert lines == [f"   1. {Path('/lib/oz/ERC20.sol')}"]

    def test_format_order_empty(self):
        assert ReportPrinter.format_order([]) == []

    def test_print_report_lists_failures(self, capsys):
        report = BatchReport(
            outcomes=[
                CompilationOutcome(Path("/p/A.sol"), OutcomeStatus.SUCCESS),
                CompilationOutcome(Path("/p/B.sol"), OutcomeStatus.FAILURE, "Error: line one\nline two"),
            ],
            disposition=BatchDisposition.ABORTED,
            total=3,
        )

        ReportPrinter.print_report(report, Path("/p"))

        out = capsys.readouterr().out
        assert "Compiled: 1 succeeded, 1 failed (2 of 3 attempted)" in out
        assert " - B.sol" in out
        assert "     Error: line one" in out
        assert "     line two" in out
        assert "Build failed!" in out
        assert "Compilation aborted after 2 of 3 files" in out

    def test_print_report_success(self, capsys):
        report = BatchReport(
            outcomes=[CompilationOutcome(Path("/p/A.sol"), OutcomeStatus.SUCCESS)],
            total=1,
        )

        ReportPrinter.print_report(report)

        out = capsys.readouterr().out
        assert "All 1 files compiled successfully" in out
        assert "Failed files" not in out

    def test_write_json_creates_parent_dirs(self, tmp_path):
        """Test the JSON report is written with the run's order and outcomes."""
        a, b = Path("/p/A.sol"), Path("/p/B.sol")
        config = BuildConfig(project_dir=tmp_path)
        plan = BuildPlan(
            config=config,
            remappings=RemappingTable(),
            graph=DependencyGraph({a: [b], b: []}),
            build_order=[b, a],
        )
        report = BatchReport(
            outcomes=[CompilationOutcome(b, OutcomeStatus.SUCCESS), CompilationOutcome(a, OutcomeStatus.SUCCESS)],
            total=2,
        )
        result = BuildResult(success=True, plan=plan, report=report, staged_count=0, build_time=0.25, message="ok")
        json_path = tmp_path / "nested" / "report.json"

        ReportPrinter.write_json(result, json_path)

        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["success"] is True
        assert data["build_order"] == [str(b), str(a)]
        assert data["report"]["disposition"] == "completed"
        assert data["build_time"] == 0.25


class TestErrorFormatter:
    """Tests for ErrorFormatter exit codes."""

    def test_print_error_colored(self, capsys):
        ErrorFormatter.print_error("Build aborted", "details")
        out = capsys.readouterr().out
        assert f"{ErrorFormatter.RED}✗ Build aborted{ErrorFormatter.RESET}" in out
        assert "details" in out

    def test_build_aborted_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_build_aborted(RuntimeError("Dependency cycle detected: A -> A"))

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "Dependency cycle detected" in out
        assert "foundry.toml" not in out

    def test_keyboard_interrupt_exits_130(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_keyboard_interrupt()
        assert exc_info.value.code == 130

    def test_permission_error_exits_1(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_permission_error(PermissionError("denied"))
        assert exc_info.value.code == 1

    def test_unexpected_error_verbose_traceback(self, capsys):
        try:
            raise ValueError("bad value")
        except ValueError as e:
            with pytest.raises(SystemExit):
                ErrorFormatter.handle_unexpected_error(e, verbose=True)

        out = capsys.readouterr().out
        assert "ValueError: bad value" in out
        assert "Traceback:" in out


class TestPathValidator:
    """Tests for PathValidator."""

    def test_valid_directory(self, tmp_path):
        PathValidator.validate_project_dir(tmp_path)

    def test_file_is_rejected(self, tmp_path):
        file_path = tmp_path / "foundry.toml"
        file_path.write_text("")

        with pytest.raises(SystemExit) as exc_info:
            PathValidator.validate_project_dir(file_path)

        assert exc_info.value.code == 2
