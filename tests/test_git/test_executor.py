"""Tests for the command execution abstraction."""

import subprocess
import sys

import pytest
from unittest.mock import MagicMock, patch

from gitoperations.errors import CommandTimeoutError, EmptyCommandError, ExecutionError
from gitoperations.git.executor import (
    EXIT_NOT_FOUND,
    Command,
    default_executor,
    make_executor,
    run_and_get_combined_output,
    run_command_loudly,
    run_loudly,
)
from gitoperations.git.testing import FakeExecutor, FakeProcess


class TestCommand:
    """Tests for the subprocess-backed Command."""

    def test_args(self):
        command = Command("git", "rev-parse", "HEAD")

        assert command.args == ["git", "rev-parse", "HEAD"]
        assert command.stdin is None
        assert command.stdout is None
        assert command.stderr is None

    @patch("subprocess.run")
    def test_combined_output_success(self, mock_run):
        mock_run.return_value = MagicMock(stdout=b"main\n", returncode=0)

        output = Command("git", "rev-parse", "--abbrev-ref", "HEAD").combined_output()

        assert output == b"main\n"
        call_args = mock_run.call_args
        assert call_args[0][0] == ["git", "rev-parse", "--abbrev-ref", "HEAD"]
        assert call_args[1]["stdout"] == subprocess.PIPE
        assert call_args[1]["stderr"] == subprocess.STDOUT
        assert call_args[1]["timeout"] is None

    @patch("subprocess.run")
    def test_combined_output_failure(self, mock_run):
        mock_run.return_value = MagicMock(stdout=b"fatal: not a git repository\n", returncode=128)

        with pytest.raises(ExecutionError) as exc_info:
            Command("git", "status").combined_output()

        assert exc_info.value.message == "exit status 128"
        assert exc_info.value.returncode == 128
        assert exc_info.value.output == "fatal: not a git repository\n"

    @patch("subprocess.run")
    def test_run_passes_streams(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0)
        command = Command("git", "push")
        command.stdout = subprocess.DEVNULL

        command.run()

        assert mock_run.call_args[1]["stdout"] == subprocess.DEVNULL

    @patch("subprocess.run")
    def test_run_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1)

        with pytest.raises(ExecutionError) as exc_info:
            Command("git", "push").run()

        assert exc_info.value.message == "exit status 1"

    @patch("subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "git")

        with pytest.raises(ExecutionError) as exc_info:
            Command("git", "status").combined_output()

        assert exc_info.value.returncode == EXIT_NOT_FOUND

    @patch("subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=5, output=b"partial")

        with pytest.raises(CommandTimeoutError) as exc_info:
            Command("git", "fetch", timeout=5).combined_output()

        assert "timed out" in exc_info.value.message
        assert exc_info.value.output == "partial"
        assert mock_run.call_args[1]["timeout"] == 5


class TestMakeExecutor:
    """Tests for executor factories."""

    def test_default_executor_builds_command(self):
        process = default_executor("git", "status")

        assert isinstance(process, Command)
        assert process.args == ["git", "status"]
        assert process.timeout is None

    def test_timeout_applied(self):
        process = make_executor(timeout=2.5)("git", "fetch")

        assert process.timeout == 2.5


class TestRunLoudly:
    """Tests for run_loudly."""

    def test_inherits_standard_streams(self):
        process = FakeProcess(["git", "push"], b"", 0)

        run_loudly(process)

        assert process.stdin is sys.stdin
        assert process.stdout is sys.stdout
        assert process.stderr is sys.stderr
        assert process.ran

    def test_propagates_failure(self):
        with pytest.raises(ExecutionError):
            run_loudly(FakeProcess(["git", "push"], b"", 1))


class TestRunHelpers:
    """Tests for the traced run helpers."""

    def test_combined_output(self, trace, recorder):
        executor = FakeExecutor("abc\n")

        assert run_and_get_combined_output(executor, ["git", "rev-parse", "HEAD"], trace) == b"abc\n"
        assert recorder.lines == ["Running: git rev-parse HEAD"]

    def test_loud_empty_command(self, trace, recorder):
        with pytest.raises(EmptyCommandError):
            run_command_loudly(FakeExecutor(), [], trace)

        assert recorder.count == 0


class TestFakeExecutor:
    """Tests for the scripted executor."""

    def test_records_calls(self):
        executor = FakeExecutor("out")

        executor("git", "status")
        executor("git", "push")

        assert executor.calls == [["git", "status"], ["git", "push"]]
        assert executor.last_call == ["git", "push"]

    def test_failure_carries_output(self):
        process = FakeExecutor("fatal: oops\n", returncode=2)("git", "status")

        with pytest.raises(ExecutionError) as exc_info:
            process.combined_output()

        assert exc_info.value.output == "fatal: oops\n"
        assert exc_info.value.returncode == 2
