"""Pull from and push to remote (origin)."""

import logging
from pathlib import Path

from prloadgen.services.git._run import _run_git


def run_git_pull(
    branch: str,
    remote: str = "origin",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Run git pull <remote> <branch> in the repository."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["pull", remote, branch], cwd=cwd, log=log)
    if log:
        log.info("Pulled %s/%s", remote, branch)


def push_branch(
    branch_name: str,
    remote: str = "origin",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Push the given branch to remote, setting upstream tracking."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["push", "-u", remote, branch_name], cwd=cwd, log=log)
    if log:
        log.info("Pushed branch %s to %s", branch_name, remote)
