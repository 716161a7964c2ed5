"""Git command line integration for gitoperations.

This package runs git through an injectable executor, parses its porcelain
output and groups the operations behind the Controller interface.
"""

from gitoperations.git.controller import Controller, GitController, make_controller
from gitoperations.git.executor import (
    Command,
    Executor,
    Process,
    default_executor,
    make_executor,
    run_loudly,
)
from gitoperations.git.operations import (
    branch_is_ahead_of_origin,
    checkout,
    commit,
    count_commits_with_gt_one_parent,
    delete_branch,
    fetch,
    get_branch,
    get_config_setting,
    get_global_config_setting,
    get_graph_to_head,
    get_head_commit,
    get_last_commit_on_branch,
    get_merge_base,
    get_parent_commit,
    get_ref_for_head,
    get_top_level,
    get_tracking_branch,
    get_upstream_for_ref,
    git_can_execute,
    has_uncommitted_changes,
    is_inside_work_tree,
    merge_source_to_target,
    pull,
    push,
    ref_is_ahead_behind,
    reset_target,
    run_supplied_executable_with_args,
    which_git,
)
from gitoperations.git.parsers import AheadBehind, scan_lines
from gitoperations.git.tracing import (
    TraceConfig,
    get_trace,
    get_trace_config,
    reset_trace_config,
    set_trace,
)

__all__ = [
    # Interface
    "Controller",
    "GitController",
    "make_controller",
    # Execution
    "Command",
    "Executor",
    "Process",
    "default_executor",
    "make_executor",
    "run_loudly",
    # Results
    "AheadBehind",
    "scan_lines",
    # Tracing
    "TraceConfig",
    "get_trace",
    "get_trace_config",
    "reset_trace_config",
    "set_trace",
    # Operations
    "branch_is_ahead_of_origin",
    "checkout",
    "commit",
    "count_commits_with_gt_one_parent",
    "delete_branch",
    "fetch",
    "get_branch",
    "get_config_setting",
    "get_global_config_setting",
    "get_graph_to_head",
    "get_head_commit",
    "get_last_commit_on_branch",
    "get_merge_base",
    "get_parent_commit",
    "get_ref_for_head",
    "get_top_level",
    "get_tracking_branch",
    "get_upstream_for_ref",
    "git_can_execute",
    "has_uncommitted_changes",
    "is_inside_work_tree",
    "merge_source_to_target",
    "pull",
    "push",
    "ref_is_ahead_behind",
    "reset_target",
    "run_supplied_executable_with_args",
    "which_git",
]
