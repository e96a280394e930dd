"""Branch naming, validation, and local branch operations (checkout, create,
base branch sync)."""

import logging
import re
from datetime import datetime
from pathlib import Path

from prloadgen.services.git._run import GitRunnerError, _run_git

# Git ref name rules: no "..", no space, no ~ ^ : ? * [ \ ; segments use only a-z, 0-9, dash
_INVALID_BRANCH_CHARS_RE = re.compile(r"[^a-z0-9\-]")
_DOUBLE_DASH_RE = re.compile(r"-+")
_SEGMENT_RE = re.compile(r"^[a-z0-9\-]+$")

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def timestamp(now: datetime) -> str:
    """Format a moment as YYYYmmdd-HHMMSS for branch and file names."""
    return now.strftime(TIMESTAMP_FORMAT)


def sanitize_branch_name(text: str, max_length: int = 100) -> str:
    """Sanitize a string for use as one segment of a branch name.

    Replaces spaces, dots and underscores with dashes, removes invalid
    characters, lowercases, collapses and strips dashes, and truncates to
    max_length without leaving a trailing dash.

    Args:
        text: Raw string (e.g. a configured branch prefix).
        max_length: Maximum length of the result (default 100).

    Returns:
        Sanitized string safe for branch names; may be empty if input
        had no valid characters.
    """
    if not text or not text.strip():
        return ""
    s = text.lower().strip()
    for char in " ._":
        s = s.replace(char, "-")
    s = _INVALID_BRANCH_CHARS_RE.sub("", s)
    s = _DOUBLE_DASH_RE.sub("-", s).strip("-")
    if len(s) > max_length:
        s = s[:max_length].rstrip("-")
    return s


def is_valid_branch_name(name: str) -> bool:
    """Check that a generated branch name is valid.

    Valid: non-empty, slash-separated segments of lowercase letters,
    digits and dashes; no ".."; no segment with a leading or trailing dash.
    """
    if not name or not name.strip():
        return False
    if ".." in name:
        return False
    for segment in name.split("/"):
        if not segment or segment.startswith("-") or segment.endswith("-"):
            return False
        if not _SEGMENT_RE.match(segment):
            return False
    return True


def branch_name_for_iteration(prefix: str, stamp: str, suffix: int, kind: str) -> str:
    """Build the feature branch name: {prefix}/{stamp}-{suffix}-{kind}.

    Args:
        prefix: Branch namespace (e.g. "pr-test"); sanitized per segment.
        stamp: Timestamp from timestamp().
        suffix: Random number distinguishing branches created in the same second.
        kind: Change kind value (docs, code, config).

    Returns:
        Branch name like "pr-test/20240115-100000-4242-docs".

    Raises:
        ValueError: If the resulting name is invalid.
    """
    segments = [sanitize_branch_name(p) for p in prefix.split("/")]
    segments = [s for s in segments if s]
    segments.append(f"{stamp}-{suffix}-{kind}")
    name = "/".join(segments)
    if not is_valid_branch_name(name):
        raise ValueError(f"Branch name transformation produced invalid name: {name!r}")
    return name


def is_inside_work_tree(repo_dir: Path | None = None, log: logging.Logger | None = None) -> bool:
    """Return True if repo_dir is inside a git repository."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        _run_git(["rev-parse", "--git-dir"], cwd=cwd, log=None)
    except GitRunnerError:
        return False
    return True


def local_branch_exists(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> bool:
    """Return True if refs/heads/<branch_name> exists locally."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        _run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], cwd=cwd, log=None)
    except GitRunnerError:
        return False
    return True


def checkout_branch(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Checkout the given local branch."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["checkout", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Checked out branch %s", branch_name)


def create_branch(
    branch_name: str,
    start_point: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Create (or reset) branch_name at start_point and check it out."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["checkout", "-B", branch_name, start_point], cwd=cwd, log=log)
    if log:
        log.info("Created branch %s from %s", branch_name, start_point)


def sync_base_branch(
    base_branch: str,
    remote: str = "origin",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Bring the local base branch up to date with the remote.

    Fetch failures are tolerated. A missing local branch is created from
    <remote>/<base_branch>; an existing one is checked out and
    fast-forwarded. Raises GitRunnerError if the fast-forward is not
    possible (diverged history).
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        _run_git(["fetch", remote, base_branch], cwd=cwd, log=log)
    except GitRunnerError as e:
        if log:
            log.warning("Fetch of %s/%s failed, continuing: %s", remote, base_branch, e)
    if not local_branch_exists(base_branch, repo_dir=cwd, log=log):
        _run_git(["checkout", "-B", base_branch, f"{remote}/{base_branch}"], cwd=cwd, log=log)
    else:
        _run_git(["checkout", base_branch], cwd=cwd, log=log)
        _run_git(["pull", "--ff-only", remote, base_branch], cwd=cwd, log=log)
    if log:
        log.info("Base branch %s is up to date with %s", base_branch, remote)
