"""Command execution abstraction.

Operations never call subprocess directly. They ask an executor for a
process handle so that tests can substitute a fake process with scripted
output and exit status instead of running git.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import IO, Any, Optional, Protocol, Sequence, Union

from gitoperations.errors import CommandTimeoutError, EmptyCommandError, ExecutionError
from gitoperations.git.tracing import TraceConfig, maybe_trace

logger = logging.getLogger(__name__)

# Anything subprocess accepts for stdin/stdout/stderr.
Stream = Union[None, int, IO[Any]]

# Exit status reported when the program could not be started at all.
EXIT_NOT_FOUND = 127


class Process(Protocol):
    """A not-yet-started external process."""

    args: list[str]
    stdin: Stream
    stdout: Stream
    stderr: Stream

    def run(self) -> None:
        """Run to completion using the assigned streams.

        Raises:
            ExecutionError: If the process could not start or exited non-zero.
        """
        ...

    def combined_output(self) -> bytes:
        """Run to completion and return stdout and stderr interleaved.

        Raises:
            ExecutionError: If the process could not start or exited non-zero.
                The captured output is available on the exception.
        """
        ...


class Executor(Protocol):
    """Factory producing a process handle from a program name and arguments."""

    def __call__(self, name: str, *args: str) -> Process:
        ...


def _decode(output: Optional[bytes]) -> str:
    if not output:
        return ""
    return output.decode("utf-8", errors="replace")


class Command:
    """Process handle backed by subprocess.run."""

    def __init__(self, name: str, *args: str, timeout: Optional[float] = None):
        self.args = [name, *args]
        self.timeout = timeout
        self.stdin: Stream = None
        self.stdout: Stream = None
        self.stderr: Stream = None

    def __repr__(self) -> str:
        return f"Command({' '.join(self.args)!r})"

    def _spawn(self, **kwargs: Any) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(self.args, timeout=self.timeout, check=False, **kwargs)
        except subprocess.TimeoutExpired as e:
            raise CommandTimeoutError(self.args, e.timeout, _decode(e.output)) from e
        except OSError as e:
            raise ExecutionError(str(e), returncode=EXIT_NOT_FOUND) from e

    def run(self) -> None:
        result = self._spawn(stdin=self.stdin, stdout=self.stdout, stderr=self.stderr)
        if result.returncode != 0:
            raise ExecutionError.for_exit_status(result.returncode)

    def combined_output(self) -> bytes:
        result = self._spawn(
            stdin=self.stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        output = result.stdout or b""
        if result.returncode != 0:
            raise ExecutionError.for_exit_status(result.returncode, _decode(output))
        return output


def make_executor(timeout: Optional[float] = None) -> Executor:
    """Create the default executor, optionally applying a deadline to every process."""

    def command(name: str, *args: str) -> Process:
        return Command(name, *args, timeout=timeout)

    return command


default_executor: Executor = make_executor()


def run_loudly(process: Process) -> None:
    """Run a process with the caller's standard streams passed through."""
    process.stdin = sys.stdin
    process.stdout = sys.stdout
    process.stderr = sys.stderr
    process.run()


def run_and_get_combined_output(
    executor: Executor,
    command: Sequence[str],
    trace: Optional[TraceConfig] = None,
) -> bytes:
    """Trace and run a command, returning its combined stdout/stderr."""
    maybe_trace(command, trace)
    return executor(command[0], *command[1:]).combined_output()


def run_command_loudly(
    executor: Executor,
    command: Sequence[str],
    trace: Optional[TraceConfig] = None,
) -> None:
    """Trace and run a command with output streamed to the caller's terminal."""
    if not command:
        raise EmptyCommandError()
    maybe_trace(command, trace)
    logger.debug("Running %s loudly", command[0])
    run_loudly(executor(command[0], *command[1:]))
