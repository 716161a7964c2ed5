"""Parsers turning git porcelain output into typed values.

Each parser takes the captured output of a single command and either
returns a value or raises the exception documented for that command. None
of them run processes, so they can be tested on literal strings.
"""

from __future__ import annotations

import re
from itertools import islice
from typing import Iterator, NamedTuple, Optional, Union

from gitoperations.errors import (
    BranchNotFoundError,
    NoOutputError,
    NoTrackingBranchError,
    NoUpstreamError,
    OutputParseError,
    UnrecognizedOutputError,
    UpstreamNotFoundError,
)

Output = Union[bytes, str]

NOT_A_REPOSITORY = "fatal: Not a git repository"

# ASCII digits only; int() alone also takes underscores, padding and
# non-ASCII digits.
COUNT_RE = re.compile(r"[+-]?[0-9]+")

# Output of: git for-each-ref --format="%(upstream:track)" <ref>
# e.g. "[ahead 1, behind 2]"
AHEAD_RE = re.compile(r".*\[.*ahead (\d+).*\].*")
BEHIND_RE = re.compile(r".*\[.*behind (\d+).*\].*")

# Output of: git branch -vv
# e.g. "* mainline     01b37f4 [origin/mainline] Commit subject"
CURRENT_BRANCH_RE = re.compile(r"^\*\s")
CURRENT_UPSTREAM_RE = re.compile(r"^\*\s+\S+\s+\S+\s+\[([^\]:]+).*")


class AheadBehind(NamedTuple):
    """Commits on a ref but not its upstream, and the reverse."""

    ahead: int
    behind: int


def _to_text(output: Output) -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def scan_lines(output: Output) -> Iterator[str]:
    """Lazily yield the lines of command output.

    Lines are split on newlines with one trailing carriage return removed.
    A trailing newline does not produce an extra empty line, so "" yields
    nothing and "\\n" yields a single empty line.
    """
    text = _to_text(output)
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            line, start = text[start:], len(text)
        else:
            line, start = text[start:end], end + 1
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def first_line(output: Output) -> Optional[str]:
    """Return the first line of output, or None if there is none."""
    return next(scan_lines(output), None)


def parse_single_value(output: Output, no_output_message: str) -> str:
    """Return the first line with surrounding whitespace removed.

    Raises:
        NoOutputError: With no_output_message if the output has no lines.
    """
    line = first_line(output)
    if line is None:
        raise NoOutputError(no_output_message)
    return line.strip()


def parse_count(output: Output, no_output_message: str) -> int:
    """Parse the first line as a base-10 integer.

    Raises:
        NoOutputError: If the output has no lines.
        OutputParseError: If the line is not an integer.
    """
    line = first_line(output)
    if line is None:
        raise NoOutputError(no_output_message)
    if not COUNT_RE.fullmatch(line):
        raise OutputParseError(f"Invalid commit count: {line!r}", line=line)
    return int(line, 10)


def parse_is_inside_work_tree(output: Output) -> bool:
    """Interpret the output of ``git rev-parse --is-inside-work-tree``."""
    line = first_line(output)
    if line is None:
        raise NoOutputError("No output from git command.")
    if line == "true":
        return True
    if line == "false":
        return False
    if line.startswith(NOT_A_REPOSITORY):
        return False
    raise UnrecognizedOutputError(line)


def parse_ahead_behind(output: Output) -> AheadBehind:
    """Extract ahead/behind counts from an upstream tracking clause.

    Each count is optional; an empty clause gives (0, 0).
    """
    line = first_line(output)
    if line is None:
        raise NoOutputError("No output while determining branch ahead/behind tracking branch.")

    ahead = behind = 0
    match = AHEAD_RE.match(line)
    if match:
        ahead = int(match.group(1))
    match = BEHIND_RE.match(line)
    if match:
        behind = int(match.group(1))
    return AheadBehind(ahead, behind)


def parse_upstream_for_ref(output: Output, ref: str) -> str:
    """Interpret the output of ``git for-each-ref --format=%(upstream:short)``."""
    line = first_line(output)
    if line is None:
        raise NoOutputError(f"Could not identify upstream for ref {ref}")
    upstream = line.strip()
    if not upstream:
        raise NoUpstreamError(f"Unable to determine upstream for ref {ref}")
    return upstream


def parse_tracking_branch(output: Output) -> str:
    """Find the upstream of the current branch in ``git branch -vv`` output."""
    for line in scan_lines(output):
        match = CURRENT_UPSTREAM_RE.match(line)
        if match:
            return match.group(1)
        if CURRENT_BRANCH_RE.match(line):
            raise NoUpstreamError(f"Current branch has no upstream: {line}")
    raise UpstreamNotFoundError()


def parse_branch_ahead_of_origin(output: Output, branch: str) -> tuple[bool, str]:
    """Check ``git branch -vv`` output for an "ahead K" marker on a branch.

    Returns:
        (True, K) if the branch is ahead of its upstream, else (False, "").
    """
    name = re.escape(branch)
    location_re = re.compile(rf"^\*?\s+{name}\s+.*")
    has_upstream_re = re.compile(rf"^\*?\s+{name}\s+(\S+)\s+\[(.*)")
    ahead_re = re.compile(rf"^\*?\s+{name}\s+(\S+)\s+\[[^\]]+: ahead\s+([^\]]+)\]\s+.*")

    for line in scan_lines(output):
        if not location_re.match(line):
            continue
        if not has_upstream_re.match(line):
            raise NoTrackingBranchError(branch)
        match = ahead_re.match(line)
        if match:
            return True, match.group(2)
        return False, ""
    raise BranchNotFoundError(branch, _to_text(output))


def parse_graph(output: Output, num_lines: int = 0) -> str:
    """Join graph lines with newlines, keeping at most num_lines when positive."""
    lines = scan_lines(output)
    if num_lines > 0:
        lines = islice(lines, num_lines)
    return "\n".join(lines)
