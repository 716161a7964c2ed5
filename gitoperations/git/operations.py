"""Git operations built on an injectable executor.

Every function takes the executor as its first argument so that tests can
pass a fake one. Query operations capture combined stdout/stderr and hand
it to a parser; mutating operations run loudly so git's own progress output
reaches the user's terminal.

All functions accept an optional ``trace`` keyword; when omitted the
process-wide trace configuration is read at call time.
"""

from __future__ import annotations

import logging
import shutil
from typing import Optional, Sequence

from gitoperations.errors import CheckoutError, ExecutionError, GitNotFoundError
from gitoperations.git.executor import (
    Executor,
    run_and_get_combined_output,
    run_command_loudly,
)
from gitoperations.git.parsers import (
    AheadBehind,
    parse_ahead_behind,
    parse_branch_ahead_of_origin,
    parse_count,
    parse_graph,
    parse_is_inside_work_tree,
    parse_single_value,
    parse_tracking_branch,
    parse_upstream_for_ref,
)
from gitoperations.git.tracing import TraceConfig

logger = logging.getLogger(__name__)

GIT = "git"


# =============================================================================
# Environment
# =============================================================================

def which_git() -> str:
    """Return the absolute path of the git executable found on PATH.

    Raises:
        GitNotFoundError: If git is not on PATH.
    """
    path = shutil.which(GIT)
    if path is None:
        raise GitNotFoundError(GIT)
    return path


def git_can_execute(executor: Executor, *, trace: Optional[TraceConfig] = None) -> None:
    """Check that git runs a trivial command without failing.

    Raises:
        ExecutionError: If git could not run.
    """
    run_and_get_combined_output(executor, [GIT, "config", "--list"], trace)


def is_inside_work_tree(executor: Executor, *, trace: Optional[TraceConfig] = None) -> bool:
    """Check whether the current directory is inside a git working tree.

    A "fatal: Not a git repository" line counts as False rather than an error.

    Raises:
        ExecutionError: If git exits non-zero; the message is git's output.
        NoOutputError: If git printed nothing.
        UnrecognizedOutputError: If git printed something other than true/false.
    """
    command = [GIT, "rev-parse", "--is-inside-work-tree"]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(e.output) from e
    return parse_is_inside_work_tree(output)


def get_top_level(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the root directory of the working tree.

    Callers should check is_inside_work_tree first.
    """
    command = [GIT, "rev-parse", "--show-toplevel"]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(e.output) from e
    return parse_single_value(output, "No output from git command.")


# =============================================================================
# Refs and commits
# =============================================================================

def get_branch(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the short name of the current branch."""
    command = [GIT, "rev-parse", "--abbrev-ref", "HEAD"]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_single_value(output, "Could not find branch in output string.")


def get_ref_for_head(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the full ref HEAD points at, e.g. ``refs/heads/mainline``."""
    command = [GIT, "symbolic-ref", "-q", "HEAD"]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(f"Could not identify upstream for ref HEAD: {e.message}") from e
    return parse_single_value(output, "Could not identify branch in output string.")


def get_head_commit(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the hash of the HEAD commit."""
    command = [GIT, "rev-parse", "HEAD"]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(f"Failed to identify HEAD commit: {e.message}") from e
    return parse_single_value(output, "No revision found.")


def get_parent_commit(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the hash of HEAD's first parent (``HEAD~``).

    In a repository with a single commit git reports an unknown revision;
    the raised ExecutionError carries git's message after the prefix.
    """
    command = [GIT, "rev-parse", "HEAD~"]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(f"Failed to identify parent commit: {e.output}") from e
    return parse_single_value(output, "No revision found.")


def get_last_commit_on_branch(
    executor: Executor, branch: str, *, trace: Optional[TraceConfig] = None
) -> str:
    """Return the hash of the newest commit on a branch."""
    command = [GIT, "log", branch, "-n1", "--format=format:%H"]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_single_value(output, "Failed to identify final commit on branch.")


def get_merge_base(
    executor: Executor,
    parent_commit: str,
    target_branch: str,
    *,
    trace: Optional[TraceConfig] = None,
) -> str:
    """Return the common ancestor used if HEAD were merged into target_branch.

    Args:
        parent_commit: The sole parent of HEAD. The caller is responsible for
            making sure HEAD has a single parent.
        target_branch: The branch that would be merged into, e.g. origin/mainline.
    """
    command = [GIT, "merge-base", target_branch, parent_commit]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_single_value(output, "Failed to identify the merge base")


def count_commits_with_gt_one_parent(
    executor: Executor,
    current_branch: str,
    ancestor_commit: str,
    *,
    trace: Optional[TraceConfig] = None,
) -> int:
    """Count merge commits between ancestor_commit and HEAD on current_branch.

    A non-zero count means the history since the ancestor is not linear.

    Raises:
        ExecutionError: Prefixed with "Parent Count Check: ".
        NoOutputError: If git printed nothing.
        OutputParseError: If the count is not an integer.
    """
    command = [
        GIT,
        "rev-list",
        "--count",
        "--min-parents=2",
        f"--branches={current_branch}",
        "--ancestry-path",
        f"{ancestor_commit}..HEAD",
    ]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(f"Parent Count Check: {e.message}") from e
    return parse_count(output, f"Failed to identify path from {ancestor_commit} to head.")


def get_graph_to_head(
    executor: Executor,
    current_branch: str,
    merge_target: str,
    num_lines: int = 0,
    *,
    trace: Optional[TraceConfig] = None,
) -> str:
    """Return the decorated one-line graph from merge_target to HEAD.

    merge_target itself is excluded by git; using ``merge_target~`` instead
    would pull in unrelated descendants of the merge base.

    Args:
        num_lines: Keep at most this many lines; zero or less keeps all.
    """
    command = [
        GIT,
        "log",
        "--decorate",
        "--oneline",
        "--graph",
        "--all",
        f"--branches={current_branch}",
        "--ancestry-path",
        f"{merge_target}..HEAD",
    ]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_graph(output, num_lines)


# =============================================================================
# Working tree state
# =============================================================================

def has_uncommitted_changes(executor: Executor, *, trace: Optional[TraceConfig] = None) -> bool:
    """Check whether the working tree differs from the last commit.

    Diffing against HEAD includes both staged and unstaged changes. Any
    failure, including git being unable to run, is reported as True.
    """
    command = [GIT, "diff", "HEAD", "--exit-code"]
    try:
        run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        logger.debug("Treating %s as uncommitted changes: %s", " ".join(command), e.message)
        return True
    return False


# =============================================================================
# Upstream tracking
# =============================================================================

def get_upstream_for_ref(
    executor: Executor, ref: str, *, trace: Optional[TraceConfig] = None
) -> str:
    """Return the short name of a ref's upstream, e.g. ``origin/mainline``.

    Raises:
        ExecutionError: Prefixed with "Unable to identify upstream for <ref>: ".
        NoOutputError: If git printed nothing.
        NoUpstreamError: If the ref has no upstream configured.
    """
    command = [GIT, "for-each-ref", "--format=%(upstream:short)", ref]
    try:
        output = run_and_get_combined_output(executor, command, trace)
    except ExecutionError as e:
        raise e.rewrap(f"Unable to identify upstream for {ref}: {e.message}") from e
    return parse_upstream_for_ref(output, ref)


def get_tracking_branch(executor: Executor, *, trace: Optional[TraceConfig] = None) -> str:
    """Return the upstream of the current branch by scanning ``git branch -vv``.

    Deprecated: use get_upstream_for_ref, which reads plumbing output.

    Raises:
        NoUpstreamError: If the current branch has no upstream.
        UpstreamNotFoundError: If no branch is marked as current.
    """
    output = run_and_get_combined_output(executor, [GIT, "branch", "-vv"], trace)
    return parse_tracking_branch(output)


def ref_is_ahead_behind(
    executor: Executor, ref: str, *, trace: Optional[TraceConfig] = None
) -> AheadBehind:
    """Return how many commits ref is ahead of and behind its upstream.

    Args:
        ref: A ref with an upstream, e.g. ``refs/heads/mainline``.
    """
    # The quotes are part of the format token and appear in git's output.
    command = [GIT, "for-each-ref", '--format="%(upstream:track)"', ref]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_ahead_behind(output)


def branch_is_ahead_of_origin(
    executor: Executor, branch: str, *, trace: Optional[TraceConfig] = None
) -> tuple[bool, str]:
    """Check whether branch is ahead of its upstream by scanning ``git branch -vv``.

    Deprecated: use ref_is_ahead_behind.

    Returns:
        (True, count) when ahead, where count is the text after "ahead";
        (False, "") otherwise.

    Raises:
        NoTrackingBranchError: If the branch has no upstream.
        BranchNotFoundError: If the branch is not listed; the message embeds
            the full git output.
    """
    output = run_and_get_combined_output(executor, [GIT, "branch", "-vv"], trace)
    return parse_branch_ahead_of_origin(output, branch)


# =============================================================================
# Configuration
# =============================================================================

def get_global_config_setting(
    executor: Executor, setting: str, *, trace: Optional[TraceConfig] = None
) -> str:
    """Return a value from the user's global git configuration."""
    command = [GIT, "config", "--global", "--get", setting]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_single_value(output, "No setting found.")


def get_config_setting(
    executor: Executor, setting: str, *, trace: Optional[TraceConfig] = None
) -> str:
    """Return a value from the effective git configuration."""
    command = [GIT, "config", "--get", setting]
    output = run_and_get_combined_output(executor, command, trace)
    return parse_single_value(output, "No setting found.")


# =============================================================================
# Pass-through commands
# =============================================================================

def run_supplied_executable_with_args(
    executor: Executor, command: Sequence[str], *, trace: Optional[TraceConfig] = None
) -> None:
    """Run an arbitrary command line with the caller's standard streams.

    Raises:
        EmptyCommandError: If command is empty.
        ExecutionError: If the command fails.
    """
    run_command_loudly(executor, list(command), trace)


def checkout(
    executor: Executor,
    current_branch: str,
    target_branch: str,
    *,
    trace: Optional[TraceConfig] = None,
) -> None:
    """Check out target_branch.

    Raises:
        CheckoutError: Naming the target and the branch the tree is left on.
    """
    try:
        run_command_loudly(executor, [GIT, "checkout", target_branch], trace)
    except ExecutionError as e:
        raise CheckoutError(current_branch, target_branch, e.returncode) from e


def fetch(executor: Executor, branch: str, *, trace: Optional[TraceConfig] = None) -> None:
    """Fetch branch from origin into the local branch of the same name, pruning."""
    run_command_loudly(executor, [GIT, "fetch", "-p", "origin", f"{branch}:{branch}"], trace)


def pull(
    executor: Executor, src_branch: str, rebase: bool, *, trace: Optional[TraceConfig] = None
) -> None:
    """Pull src_branch from the local repository into the current branch.

    Without rebase an empty argument stands in the flag's position, so the
    argument count does not depend on the flag.
    """
    rebase_flag = "--rebase" if rebase else ""
    run_command_loudly(executor, [GIT, "pull", rebase_flag, ".", src_branch], trace)


def reset_target(
    executor: Executor, target_branch: str, *, trace: Optional[TraceConfig] = None
) -> None:
    """Hard-reset the current branch to origin/<target_branch>."""
    run_command_loudly(executor, [GIT, "reset", "--hard", f"origin/{target_branch}"], trace)


def delete_branch(
    executor: Executor, source_branch: str, *, trace: Optional[TraceConfig] = None
) -> None:
    """Force-delete a local branch."""
    run_command_loudly(executor, [GIT, "branch", "-D", source_branch], trace)


def merge_source_to_target(
    executor: Executor, source_branch: str, *, trace: Optional[TraceConfig] = None
) -> None:
    """Squash-merge source_branch into the current branch without committing."""
    run_command_loudly(executor, [GIT, "merge", "--squash", source_branch], trace)


def commit(executor: Executor, *, trace: Optional[TraceConfig] = None) -> None:
    """Run ``git commit``, letting git open the user's editor."""
    run_command_loudly(executor, [GIT, "commit"], trace)


def push(executor: Executor, *, trace: Optional[TraceConfig] = None) -> None:
    """Push the current branch to its upstream."""
    run_command_loudly(executor, [GIT, "push"], trace)
