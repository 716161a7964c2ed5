"""Centralized exception hierarchy for gitoperations.

Every failure an operation can report derives from GitOperationsError.
Callers that need to distinguish failures should match on the exception
type first and on the message prefix second; the wording of each message
is documented on the operation that raises it.
"""

from __future__ import annotations

from typing import Any, Optional


class GitOperationsError(Exception):
    """Base exception for all gitoperations errors.

    Attributes:
        message: Human-readable error message.
        code: Optional error code for programmatic handling.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Execution Errors
# =============================================================================

class ExecutionError(GitOperationsError):
    """Raised when an external process could not run or exited non-zero.

    Attributes:
        returncode: Exit status of the process, if it ran.
        output: Combined stdout/stderr captured before the failure.
    """

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        output: str = "",
        code: str = "EXECUTION_FAILED",
    ):
        details: dict[str, Any] = {}
        if returncode is not None:
            details["returncode"] = returncode
        if output:
            details["output"] = output[:500]  # Truncate for safety
        super().__init__(message, code, details)
        self.returncode = returncode
        self.output = output

    @classmethod
    def for_exit_status(cls, returncode: int, output: str = "") -> "ExecutionError":
        """Build the generic error for a process that exited non-zero."""
        return cls(f"exit status {returncode}", returncode=returncode, output=output)

    def rewrap(self, message: str) -> "ExecutionError":
        """Return a new ExecutionError with a different message and the same context."""
        return ExecutionError(message, returncode=self.returncode, output=self.output)


class CommandTimeoutError(ExecutionError):
    """Raised when a process does not finish within its deadline."""

    def __init__(self, command: list[str], timeout: float, output: str = ""):
        super().__init__(
            f"Command timed out after {timeout}s: {' '.join(command)}",
            output=output,
            code="COMMAND_TIMEOUT",
        )
        self.details["timeout_seconds"] = timeout


class GitNotFoundError(GitOperationsError):
    """Raised when the git executable cannot be located on PATH."""

    def __init__(self, name: str = "git"):
        super().__init__(
            message=f'exec: "{name}": executable file not found in $PATH',
            code="GIT_NOT_FOUND",
            details={"executable": name},
        )


class EmptyCommandError(GitOperationsError):
    """Raised when an empty command line is handed to the runner."""

    def __init__(self):
        super().__init__(
            message="No command supplied to run",
            code="EMPTY_COMMAND",
        )


class CheckoutError(ExecutionError):
    """Raised when checking out a branch fails."""

    def __init__(self, current_branch: str, target_branch: str, returncode: Optional[int] = None):
        super().__init__(
            f"Failed to checkout {target_branch}. Repository will be left in "
            f"{current_branch} branch.",
            returncode=returncode,
            code="CHECKOUT_FAILED",
        )
        self.details["current_branch"] = current_branch
        self.details["target_branch"] = target_branch


# =============================================================================
# Output Errors
# =============================================================================

class OutputError(GitOperationsError):
    """Base exception for output that could not be turned into a value."""
    pass


class NoOutputError(OutputError):
    """Raised when a command succeeded but printed nothing."""

    def __init__(self, message: str):
        super().__init__(message, "NO_OUTPUT")


class OutputParseError(OutputError):
    """Raised when output is present but does not have the expected shape."""

    def __init__(self, message: str, line: Optional[str] = None, code: str = "PARSE_ERROR"):
        details = {}
        if line is not None:
            details["line"] = line
        super().__init__(message, code, details)


class UnrecognizedOutputError(OutputParseError):
    """Raised when a line holds a token the parser does not know."""

    def __init__(self, line: str):
        super().__init__(f"Unrecognized output: {line}", line=line, code="UNRECOGNIZED_OUTPUT")


# =============================================================================
# Tracking Errors
# =============================================================================

class TrackingError(GitOperationsError):
    """Base exception for upstream/tracking branch lookups."""
    pass


class NoUpstreamError(TrackingError):
    """Raised when a branch is found but has no upstream configured."""

    def __init__(self, message: str):
        super().__init__(message, "NO_UPSTREAM")


class NoTrackingBranchError(TrackingError):
    """Raised when a branch listing line carries no tracking clause."""

    def __init__(self, branch: str):
        super().__init__(
            message="No tracking branch available.",
            code="NO_TRACKING_BRANCH",
            details={"branch": branch},
        )


class UpstreamNotFoundError(TrackingError):
    """Raised when no branch in a listing is marked as current."""

    def __init__(self):
        super().__init__(
            message="Unable to locate upstream branch",
            code="UPSTREAM_NOT_FOUND",
        )


class BranchNotFoundError(TrackingError):
    """Raised when a branch is absent from a listing."""

    def __init__(self, branch: str, output: str):
        super().__init__(
            message=f"Unable to locate branch in git output.\nGit output:\n{output}",
            code="BRANCH_NOT_FOUND",
            details={"branch": branch},
        )
        self.output = output


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(GitOperationsError):
    """Raised when there's a configuration problem."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            message=f"Invalid configuration in '{source}': {reason}",
            code="INVALID_CONFIG",
            details={"source": source, "reason": reason},
        )
