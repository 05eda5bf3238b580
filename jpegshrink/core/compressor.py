"""
Adapters for the external JPEG compression routine.

The routine itself lives outside this codebase, usually as a MATLAB script
named ``jpegcompress(input, output, targetSizeKB, resizeFactor)``. Each
backend only knows how to build an argument vector for it; spawning, waiting,
timeouts and cancellation are shared in :class:`Compressor`.

Arguments are always passed as a list to the process, never through a shell.
"""
import os
import shlex
import shutil
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from jpegshrink import config
from jpegshrink.core.errors import CompressorConfigurationError, CompressorProcessError
from jpegshrink.utils.metrics import PerformanceTimer

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class CompressionResult:
    """Outcome of a successful compressor run."""
    returncode: int
    stdout: str
    stderr: str
    elapsed: float


def format_target_size(target_size_kb: int) -> str:
    return str(int(target_size_kb))


def format_resize_factor(resize_factor: float) -> str:
    return f"{float(resize_factor):g}"


def matlab_string(value: str) -> str:
    """Quote a value as a MATLAB/Octave char literal."""
    return "'" + value.replace("'", "''") + "'"


class Compressor(ABC):
    """
    Runs the external compression routine for one input file.

    Subclasses provide :meth:`build_command`; :meth:`compress` spawns it,
    waits for it and translates failures into :class:`CompressorProcessError`.
    """

    name = "compressor"

    def __init__(self, timeout: Optional[float] = None):
        # Non-positive timeouts mean "wait forever"
        self.timeout = timeout if timeout and timeout > 0 else None

    @abstractmethod
    def build_command(
        self,
        input_path: str,
        output_path: str,
        target_size_kb: int,
        resize_factor: float
    ) -> List[str]:
        """Return the argument vector for one compression run."""

    @property
    @abstractmethod
    def executable(self) -> str:
        """Program looked up on PATH to decide availability."""

    def is_available(self) -> Tuple[bool, str]:
        """
        Check whether the backend executable can be found.

        Returns:
            Tuple of (available, resolved path or error message)
        """
        resolved = shutil.which(self.executable)
        if resolved is None:
            return False, f"{self.executable} not found on PATH"
        return True, resolved

    async def compress(
        self,
        input_path: str,
        output_path: str,
        target_size_kb: int,
        resize_factor: float
    ) -> CompressionResult:
        """
        Run the external routine and wait for it to exit.

        Args:
            input_path: Image to compress
            output_path: Where the routine must write the JPEG
            target_size_kb: Desired output size in kilobytes
            resize_factor: Scale multiplier in (0, 1]

        Returns:
            CompressionResult with the captured output

        Raises:
            CompressorProcessError: If the process cannot start, times out
                or exits non-zero
        """
        command = self.build_command(input_path, output_path, target_size_kb, resize_factor)
        logger.info(f"Executing {self.name} command: {shlex.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            logger.error(f"{self.name} could not be started: {e}")
            raise CompressorProcessError(f"{self.name} execution failed: {e}") from e

        timer = PerformanceTimer()
        try:
            with timer:
                raw_stdout, raw_stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self.timeout
                )
        except asyncio.TimeoutError:
            await _kill(process)
            logger.error(f"{self.name} timed out after {self.timeout} seconds")
            raise CompressorProcessError(
                f"{self.name} execution failed: timed out after {self.timeout:g} seconds"
            )
        except asyncio.CancelledError:
            # Request went away; do not leave the process orphaned
            await _kill(process)
            logger.warning(f"{self.name} run cancelled, process {process.pid} killed")
            raise

        stdout = raw_stdout.decode("utf-8", errors="replace")
        stderr = raw_stderr.decode("utf-8", errors="replace")
        logger.debug(f"{self.name} stdout: {stdout}")
        logger.debug(f"{self.name} stderr: {stderr}")

        if process.returncode != 0:
            reason = stderr.strip() or stdout.strip() or "no output"
            logger.error(f"{self.name} exited with code {process.returncode}: {reason}")
            raise CompressorProcessError(
                f"{self.name} execution failed: exit code {process.returncode}: {reason}",
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr
            )

        logger.info(f"{self.name} finished in {timer.execution_time:.2f}s")
        return CompressionResult(
            returncode=process.returncode,
            stdout=stdout,
            stderr=stderr,
            elapsed=timer.execution_time
        )


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


class ScriptCompressor(Compressor):
    """Shared statement building for interpreters that evaluate a script call."""

    def __init__(
        self,
        executable: str,
        script_dir: str,
        function: str = "jpegcompress",
        timeout: Optional[float] = None
    ):
        super().__init__(timeout)
        self._executable = executable
        self.script_dir = os.path.abspath(script_dir)
        self.function = function

    @property
    def executable(self) -> str:
        return self._executable

    def build_statement(
        self,
        input_path: str,
        output_path: str,
        target_size_kb: int,
        resize_factor: float
    ) -> str:
        return (
            f"cd({matlab_string(self.script_dir)}); "
            f"{self.function}({matlab_string(input_path)}, {matlab_string(output_path)}, "
            f"{format_target_size(target_size_kb)}, {format_resize_factor(resize_factor)})"
        )


class MatlabCompressor(ScriptCompressor):
    """Runs the routine with MATLAB in batch mode (non-zero exit on error)."""

    name = "MATLAB"

    def build_command(self, input_path, output_path, target_size_kb, resize_factor):
        statement = self.build_statement(input_path, output_path, target_size_kb, resize_factor)
        return [self.executable, "-nodisplay", "-nosplash", "-nodesktop", "-batch", statement]


class OctaveCompressor(ScriptCompressor):
    """Runs the routine with GNU Octave."""

    name = "Octave"

    def build_command(self, input_path, output_path, target_size_kb, resize_factor):
        statement = self.build_statement(input_path, output_path, target_size_kb, resize_factor)
        return [self.executable, "--no-gui", "--quiet", "--eval", statement]


class CommandCompressor(Compressor):
    """
    Runs an arbitrary command with four trailing positional arguments:
    ``<input> <output> <target size> <resize factor>``.
    """

    name = "Compressor command"

    def __init__(self, command: List[str], timeout: Optional[float] = None):
        if not command:
            raise ValueError("CommandCompressor needs a non-empty command")
        super().__init__(timeout)
        self.command = list(command)

    @property
    def executable(self) -> str:
        return self.command[0]

    def build_command(self, input_path, output_path, target_size_kb, resize_factor):
        return self.command + [
            input_path,
            output_path,
            format_target_size(target_size_kb),
            format_resize_factor(resize_factor),
        ]


def get_compressor() -> Compressor:
    """
    Build the compressor selected by ``COMPRESSOR_BACKEND``.

    Used as a FastAPI dependency by the compression endpoint.

    Raises:
        CompressorConfigurationError: If the backend name is unknown or misconfigured
    """
    backend = config.COMPRESSOR_BACKEND
    if backend == "matlab":
        return MatlabCompressor(
            config.MATLAB_EXECUTABLE,
            config.COMPRESSOR_SCRIPT_DIR,
            config.COMPRESSOR_FUNCTION,
            timeout=config.COMPRESSOR_TIMEOUT
        )
    if backend == "octave":
        return OctaveCompressor(
            config.OCTAVE_EXECUTABLE,
            config.COMPRESSOR_SCRIPT_DIR,
            config.COMPRESSOR_FUNCTION,
            timeout=config.COMPRESSOR_TIMEOUT
        )
    if backend == "command":
        command = shlex.split(config.COMPRESSOR_COMMAND)
        if not command:
            raise CompressorConfigurationError("COMPRESSOR_COMMAND must be set when COMPRESSOR_BACKEND=command")
        return CommandCompressor(command, timeout=config.COMPRESSOR_TIMEOUT)
    raise CompressorConfigurationError(f"Unknown compressor backend: {backend}")
