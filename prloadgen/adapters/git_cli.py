"""VersionControl backed by the git command line."""

import logging
from pathlib import Path
from typing import Iterable

from prloadgen.adapters.base import VersionControl
from prloadgen.services.git import (
    checkout_branch,
    commit,
    create_branch,
    is_inside_work_tree,
    merge_branch,
    push_branch,
    run_git_pull,
    stage_paths,
    sync_base_branch,
)


class GitCLI(VersionControl):
    """Run git in repo_dir against remote (default origin)."""

    def __init__(
        self,
        repo_dir: Path | None = None,
        remote: str = "origin",
        log: logging.Logger | None = None,
    ) -> None:
        self.repo_dir = Path(repo_dir) if repo_dir is not None else Path.cwd()
        self.remote = remote
        self._log = log or logging.getLogger("prloadgen.git")

    def is_repository(self) -> bool:
        return is_inside_work_tree(self.repo_dir, log=self._log)

    def sync_base_branch(self, base_branch: str) -> None:
        sync_base_branch(base_branch, remote=self.remote, repo_dir=self.repo_dir, log=self._log)

    def create_branch(self, branch_name: str, start_point: str) -> None:
        create_branch(branch_name, start_point, repo_dir=self.repo_dir, log=self._log)

    def stage(self, paths: Iterable[str]) -> None:
        stage_paths(paths, repo_dir=self.repo_dir, log=self._log)

    def commit(self, message: str) -> None:
        commit(message, repo_dir=self.repo_dir, log=self._log)

    def push(self, branch_name: str) -> None:
        push_branch(branch_name, remote=self.remote, repo_dir=self.repo_dir, log=self._log)

    def pull(self, branch_name: str) -> None:
        run_git_pull(branch_name, remote=self.remote, repo_dir=self.repo_dir, log=self._log)

    def checkout(self, branch_name: str) -> None:
        checkout_branch(branch_name, repo_dir=self.repo_dir, log=self._log)

    def merge(self, branch_name: str) -> None:
        merge_branch(branch_name, repo_dir=self.repo_dir, log=self._log)
