"""Stage, commit and merge changes."""

import logging
from pathlib import Path
from typing import Iterable

from prloadgen.services.git._run import _run_git


def stage_paths(
    paths: Iterable[Path | str],
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Stage the given paths (relative to repo_dir)."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    args = [str(p) for p in paths]
    if not args:
        return
    _run_git(["add", "--"] + args, cwd=cwd, log=log)


def commit(
    commit_message: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Commit staged changes with the given message.

    Uses the repository's configured identity. Raises GitRunnerError on
    failure, including when nothing is staged.
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["commit", "-m", commit_message], cwd=cwd, log=log)
    if log:
        log.info("Committed: %s", commit_message)


def merge_branch(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Merge branch_name into the checked-out branch with the generated
    merge message (no editor).

    Always records a merge commit, even when the branch is strictly ahead.
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["merge", "--no-ff", "--no-edit", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Merged %s", branch_name)
