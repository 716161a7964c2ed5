"""Scripted stand-ins for the executor, for use in test suites.

FakeExecutor hands out FakeProcess objects that emit a fixed output and exit
status without spawning anything. Every command line it is asked for is
recorded so tests can assert on argument vectors.
"""

from __future__ import annotations

from typing import Union

from gitoperations.errors import ExecutionError
from gitoperations.git.executor import Stream


class FakeProcess:
    """Process handle that replays scripted output."""

    def __init__(self, args: list[str], output: bytes, returncode: int):
        self.args = args
        self.output = output
        self.returncode = returncode
        self.stdin: Stream = None
        self.stdout: Stream = None
        self.stderr: Stream = None
        self.ran = False

    def run(self) -> None:
        self.ran = True
        if self.stdout is not None and hasattr(self.stdout, "write"):
            self.stdout.write(self.output.decode("utf-8", errors="replace"))
        if self.returncode != 0:
            raise ExecutionError.for_exit_status(self.returncode)

    def combined_output(self) -> bytes:
        self.ran = True
        if self.returncode != 0:
            raise ExecutionError.for_exit_status(
                self.returncode, self.output.decode("utf-8", errors="replace")
            )
        return self.output


class FakeExecutor:
    """Executor returning FakeProcess objects with the same scripted result."""

    def __init__(self, output: Union[str, bytes] = b"", returncode: int = 0):
        if isinstance(output, str):
            output = output.encode("utf-8")
        self.output = output
        self.returncode = returncode
        self.calls: list[list[str]] = []
        self.processes: list[FakeProcess] = []

    def __call__(self, name: str, *args: str) -> FakeProcess:
        command = [name, *args]
        self.calls.append(command)
        process = FakeProcess(command, self.output, self.returncode)
        self.processes.append(process)
        return process

    @property
    def last_call(self) -> list[str]:
        """The most recent command line, or an empty list if none ran."""
        return self.calls[-1] if self.calls else []
