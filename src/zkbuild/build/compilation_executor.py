"""Compilation Executor.

This module runs the external toolchain for one source file at a time.

Design:
    - Wraps subprocess.Popen for `forge build <file> --out <dir> [--zksync]`
    - Captures stdout/stderr so failures carry the compiler's diagnostics
    - Optional per-invocation timeout; on expiry the whole process tree is
      terminated (forge spawns solc/zksolc children) with psutil
    - Ctrl-C terminates the running process tree before propagating
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

import psutil

from .compiler import CompileResult, CompilerError, ICompiler

logger = logging.getLogger(__name__)


def kill_process_tree(pid: int, grace_period: float = 3.0) -> int:
    """Terminate a process and all of its descendants.

    Children are signalled before their parents. Processes still alive after
    the grace period are killed.

    Args:
        pid: Root process id
        grace_period: Seconds to wait for graceful termination

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        children = root.children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    processes: List[psutil.Process] = list(reversed(children)) + [root]

    signalled = 0
    for proc in processes:
        try:
            proc.terminate()
            signalled += 1
            logger.debug(f"Terminated process {proc.pid}")
        except psutil.NoSuchProcess:
            pass

    _gone, alive = psutil.wait_procs(processes, timeout=grace_period)

    for proc in alive:
        try:
            proc.kill()
            logger.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass

    return signalled


class ForgeCompiler(ICompiler):
    """Compiles one file per invocation of the forge binary.

    Example usage:
        compiler = ForgeCompiler(output_dir=Path("out"), timeout=300)
        result = compiler.compile(Path("contracts/Token.sol"))
        if not result.success:
            print(result.diagnostic)
    """

    def __init__(
        self,
        output_dir: Path,
        binary: str = "forge",
        zksync: bool = True,
        extra_args: Optional[List[str]] = None,
        timeout: Optional[float] = None,
        cwd: Optional[Path] = None
    ):
        """Initialize the compiler.

        Args:
            output_dir: Directory passed to `--out`
            binary: Compiler executable name or path
            zksync: Whether to pass `--zksync`
            extra_args: Additional arguments appended to every invocation
            timeout: Seconds before an invocation is killed (None: no limit)
            cwd: Working directory for the process (the project root)
        """
        self.output_dir = Path(output_dir)
        self.binary = binary
        self.zksync = zksync
        self.extra_args = list(extra_args or [])
        self.timeout = timeout
        self.cwd = cwd

    def build_command(self, source: Path) -> List[str]:
        """Command line for compiling source."""
        cmd = [self.binary, "build", str(source), "--out", str(self.output_dir)]
        if self.zksync:
            cmd.append("--zksync")
        cmd.extend(self.extra_args)
        return cmd

    def compile(self, source: Path) -> CompileResult:
        """Compile a single source file.

        Args:
            source: Path to the source file

        Returns:
            CompileResult with captured output and exit code

        Raises:
            CompilerError: If the binary can't be started or times out
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(source)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except FileNotFoundError as e:
            raise CompilerError(
                f"Compiler not found: {self.binary}. Ensure it is installed and in PATH."
            ) from e
        except OSError as e:
            raise CompilerError(f"Failed to start {self.binary}: {e}") from e

        try:
            stdout, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            logger.error(f"Compilation of {source.name} timed out after {self.timeout}s, killing process tree")
            kill_process_tree(process.pid)
            process.communicate()
            raise CompilerError(f"Compilation timeout for {source.name} after {self.timeout}s") from e
        except KeyboardInterrupt:
            kill_process_tree(process.pid)
            raise

        return CompileResult(
            success=process.returncode == 0,
            stdout=stdout or "",
            stderr=stderr or "",
            returncode=process.returncode,
        )
