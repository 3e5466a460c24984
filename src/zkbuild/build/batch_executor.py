"""
Sequential batch compilation for zkbuild.

This module drives the compiler over a build order one file at a time and
records a per-file outcome. The failure policy decides whether the first
failure aborts the batch (fail-fast) or is recorded while the remaining
files are still compiled (continue-on-error).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .compiler import ICompiler

logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class BatchDisposition(Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class FailurePolicy:
    """How the batch reacts to a failed file."""

    fail_fast: bool = False


@dataclass(frozen=True)
class CompilationOutcome:
    """Result of one compile attempt."""

    source: Path
    status: OutcomeStatus
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


@dataclass
class BatchReport:
    """Outcomes in attempt order plus the overall disposition."""

    outcomes: List[CompilationOutcome] = field(default_factory=list)
    disposition: BatchDisposition = BatchDisposition.COMPLETED
    total: int = 0

    @property
    def failures(self) -> List[CompilationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def success_count(self) -> int:
        return len(self.outcomes) - self.failure_count

    @property
    def aborted(self) -> bool:
        return self.disposition is BatchDisposition.ABORTED

    @property
    def exit_code(self) -> int:
        """0 only for a completed batch without failures."""
        if self.aborted or self.failure_count:
            return 1
        return 0

    def summary(self) -> str:
        """One-line description of the disposition."""
        if self.aborted:
            return f"aborted after {len(self.outcomes)} of {self.total} files"
        noun = "failure" if self.failure_count == 1 else "failures"
        return f"completed with {self.failure_count} {noun}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "disposition": self.disposition.value,
            "total": self.total,
            "failures": self.failure_count,
            "outcomes": [
                {
                    "source": str(outcome.source),
                    "status": outcome.status.value,
                    "message": outcome.message,
                }
                for outcome in self.outcomes
            ],
        }


class BatchExecutor:
    """
    Compiles files strictly in build order.

    Each distinct file is attempted at most once per run; repeated entries in
    the build order are skipped. Any exception raised by the compiler
    (other than KeyboardInterrupt) is recorded as a failure of that file.

    Example usage:
        executor = BatchExecutor()
        report = executor.run(order, ForgeCompiler(Path("out")), FailurePolicy(fail_fast=True))
        print(report.summary())
    """

    def run(
        self,
        build_order: Sequence[Path],
        compiler: ICompiler,
        policy: FailurePolicy = FailurePolicy()
    ) -> BatchReport:
        """
        Compile every file in build_order.

        Args:
            build_order: Files in dependency order
            compiler: Compiler collaborator
            policy: Failure policy

        Returns:
            BatchReport with one outcome per attempted file
        """
        unique_order = list(dict.fromkeys(build_order))
        report = BatchReport(total=len(unique_order))
        mode = "fail-fast" if policy.fail_fast else "continue-on-error"
        logger.info(f"Compiling {len(unique_order)} files ({mode})")

        for index, source in enumerate(unique_order, start=1):
            logger.info(f"[{index}/{len(unique_order)}] Compiling {source}")
            outcome = self._compile_one(compiler, source)
            report.outcomes.append(outcome)

            if not outcome.succeeded:
                logger.error(f"Error compiling {source}: {outcome.message}")
                if policy.fail_fast:
                    report.disposition = BatchDisposition.ABORTED
                    logger.error(f"Aborting batch after first failure ({source.name})")
                    break

        logger.info(f"Batch {report.summary()}")
        return report

    def _compile_one(self, compiler: ICompiler, source: Path) -> CompilationOutcome:
        try:
            result = compiler.compile(source)
        except Exception as e:
            return CompilationOutcome(source, OutcomeStatus.FAILURE, str(e) or type(e).__name__)

        if result.success:
            return CompilationOutcome(source, OutcomeStatus.SUCCESS)
        return CompilationOutcome(source, OutcomeStatus.FAILURE, result.diagnostic)
