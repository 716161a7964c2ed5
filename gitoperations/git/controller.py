"""Controller interface grouping every git operation.

Applications depend on Controller so their own tests can substitute a mock;
GitController is the implementation that actually runs git.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from gitoperations.config import get_settings
from gitoperations.git import operations
from gitoperations.git.executor import Executor, make_executor
from gitoperations.git.parsers import AheadBehind
from gitoperations.git.tracing import TraceConfig


class Controller(ABC):
    """Abstract interface for git operations.

    Each method mirrors the function of the same name in
    gitoperations.git.operations, minus the executor argument.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def which_git(self) -> str: ...

    @abstractmethod
    def git_can_execute(self) -> None: ...

    @abstractmethod
    def is_inside_work_tree(self) -> bool: ...

    @abstractmethod
    def get_top_level(self) -> str: ...

    @abstractmethod
    def get_branch(self) -> str: ...

    @abstractmethod
    def get_ref_for_head(self) -> str: ...

    @abstractmethod
    def get_head_commit(self) -> str: ...

    @abstractmethod
    def get_parent_commit(self) -> str: ...

    @abstractmethod
    def get_last_commit_on_branch(self, branch: str) -> str: ...

    @abstractmethod
    def get_merge_base(self, parent_commit: str, target_branch: str) -> str: ...

    @abstractmethod
    def count_commits_with_gt_one_parent(self, current_branch: str, ancestor_commit: str) -> int: ...

    @abstractmethod
    def get_graph_to_head(self, current_branch: str, merge_target: str, num_lines: int = 0) -> str: ...

    @abstractmethod
    def has_uncommitted_changes(self) -> bool: ...

    @abstractmethod
    def get_upstream_for_ref(self, ref: str) -> str:
        """Useful for extracting the tracking branch."""

    @abstractmethod
    def get_tracking_branch(self) -> str:
        """Deprecated: use get_upstream_for_ref."""

    @abstractmethod
    def ref_is_ahead_behind(self, ref: str) -> AheadBehind: ...

    @abstractmethod
    def branch_is_ahead_of_origin(self, branch: str) -> tuple[bool, str]:
        """Deprecated: use ref_is_ahead_behind."""

    @abstractmethod
    def get_global_config_setting(self, setting: str) -> str: ...

    @abstractmethod
    def get_config_setting(self, setting: str) -> str: ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def run_supplied_executable_with_args(self, command: Sequence[str]) -> None: ...

    @abstractmethod
    def checkout(self, current_branch: str, target_branch: str) -> None: ...

    @abstractmethod
    def fetch(self, branch: str) -> None: ...

    @abstractmethod
    def pull(self, src_branch: str, rebase: bool) -> None: ...

    @abstractmethod
    def reset_target(self, target_branch: str) -> None: ...

    @abstractmethod
    def delete_branch(self, source_branch: str) -> None: ...

    @abstractmethod
    def merge_source_to_target(self, source_branch: str) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def push(self) -> None: ...


class GitController(Controller):
    """Controller that runs the real git executable."""

    def __init__(
        self,
        executor: Optional[Executor] = None,
        trace: Optional[TraceConfig] = None,
    ):
        """Initialize a GitController.

        Args:
            executor: Process factory; defaults to subprocess with the
                configured timeout.
            trace: Trace configuration; defaults to the process-wide one,
                looked up on every call.
        """
        if executor is None:
            executor = make_executor(get_settings().git.timeout)
        self.executor = executor
        self.trace = trace

    def which_git(self) -> str:
        return operations.which_git()

    def git_can_execute(self) -> None:
        operations.git_can_execute(self.executor, trace=self.trace)

    def is_inside_work_tree(self) -> bool:
        return operations.is_inside_work_tree(self.executor, trace=self.trace)

    def get_top_level(self) -> str:
        return operations.get_top_level(self.executor, trace=self.trace)

    def get_branch(self) -> str:
        return operations.get_branch(self.executor, trace=self.trace)

    def get_ref_for_head(self) -> str:
        return operations.get_ref_for_head(self.executor, trace=self.trace)

    def get_head_commit(self) -> str:
        return operations.get_head_commit(self.executor, trace=self.trace)

    def get_parent_commit(self) -> str:
        return operations.get_parent_commit(self.executor, trace=self.trace)

    def get_last_commit_on_branch(self, branch: str) -> str:
        return operations.get_last_commit_on_branch(self.executor, branch, trace=self.trace)

    def get_merge_base(self, parent_commit: str, target_branch: str) -> str:
        return operations.get_merge_base(
            self.executor, parent_commit, target_branch, trace=self.trace
        )

    def count_commits_with_gt_one_parent(self, current_branch: str, ancestor_commit: str) -> int:
        return operations.count_commits_with_gt_one_parent(
            self.executor, current_branch, ancestor_commit, trace=self.trace
        )

    def get_graph_to_head(self, current_branch: str, merge_target: str, num_lines: int = 0) -> str:
        return operations.get_graph_to_head(
            self.executor, current_branch, merge_target, num_lines, trace=self.trace
        )

    def has_uncommitted_changes(self) -> bool:
        return operations.has_uncommitted_changes(self.executor, trace=self.trace)

    def get_upstream_for_ref(self, ref: str) -> str:
        return operations.get_upstream_for_ref(self.executor, ref, trace=self.trace)

    def get_tracking_branch(self) -> str:
        return operations.get_tracking_branch(self.executor, trace=self.trace)

    def ref_is_ahead_behind(self, ref: str) -> AheadBehind:
        return operations.ref_is_ahead_behind(self.executor, ref, trace=self.trace)

    def branch_is_ahead_of_origin(self, branch: str) -> tuple[bool, str]:
        return operations.branch_is_ahead_of_origin(self.executor, branch, trace=self.trace)

    def get_global_config_setting(self, setting: str) -> str:
        return operations.get_global_config_setting(self.executor, setting, trace=self.trace)

    def get_config_setting(self, setting: str) -> str:
        return operations.get_config_setting(self.executor, setting, trace=self.trace)

    def run_supplied_executable_with_args(self, command: Sequence[str]) -> None:
        operations.run_supplied_executable_with_args(self.executor, command, trace=self.trace)

    def checkout(self, current_branch: str, target_branch: str) -> None:
        operations.checkout(self.executor, current_branch, target_branch, trace=self.trace)

    def fetch(self, branch: str) -> None:
        operations.fetch(self.executor, branch, trace=self.trace)

    def pull(self, src_branch: str, rebase: bool) -> None:
        operations.pull(self.executor, src_branch, rebase, trace=self.trace)

    def reset_target(self, target_branch: str) -> None:
        operations.reset_target(self.executor, target_branch, trace=self.trace)

    def delete_branch(self, source_branch: str) -> None:
        operations.delete_branch(self.executor, source_branch, trace=self.trace)

    def merge_source_to_target(self, source_branch: str) -> None:
        operations.merge_source_to_target(self.executor, source_branch, trace=self.trace)

    def commit(self) -> None:
        operations.commit(self.executor, trace=self.trace)

    def push(self) -> None:
        operations.push(self.executor, trace=self.trace)


def make_controller() -> Controller:
    """Create a GitController configured from settings."""
    return GitController()
