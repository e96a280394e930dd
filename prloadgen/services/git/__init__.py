"""Git operations: branches, commits, push/pull."""

from prloadgen.services.git._run import GitRunnerError
from prloadgen.services.git.branches import (
    branch_name_for_iteration,
    checkout_branch,
    create_branch,
    is_inside_work_tree,
    is_valid_branch_name,
    local_branch_exists,
    sanitize_branch_name,
    sync_base_branch,
    timestamp,
)
from prloadgen.services.git.commits import commit, merge_branch, stage_paths
from prloadgen.services.git.push_pull import push_branch, run_git_pull

__all__ = [
    "GitRunnerError",
    "branch_name_for_iteration",
    "checkout_branch",
    "commit",
    "create_branch",
    "is_inside_work_tree",
    "is_valid_branch_name",
    "local_branch_exists",
    "merge_branch",
    "push_branch",
    "run_git_pull",
    "sanitize_branch_name",
    "stage_paths",
    "sync_base_branch",
    "timestamp",
]
