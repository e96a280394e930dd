"""Abstract bases for the version control and PR hosting collaborators."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable


class HostError(Exception):
    """Raised when a PR hosting call (CLI or API) fails."""

    pass


class VersionControl(ABC):
    """Git operations the PR loop needs, bound to one working tree."""

    repo_dir: Path

    @abstractmethod
    def is_repository(self) -> bool:
        """Return True if repo_dir is inside a git work tree."""
        ...

    @abstractmethod
    def sync_base_branch(self, base_branch: str) -> None:
        """Fetch, then create or fast-forward the local base branch."""
        ...

    @abstractmethod
    def create_branch(self, branch_name: str, start_point: str) -> None:
        """Create branch_name at start_point and check it out."""
        ...

    @abstractmethod
    def stage(self, paths: Iterable[str]) -> None:
        """Stage paths relative to repo_dir."""
        ...

    @abstractmethod
    def commit(self, message: str) -> None:
        """Commit staged changes."""
        ...

    @abstractmethod
    def push(self, branch_name: str) -> None:
        """Push branch to the remote with upstream tracking."""
        ...

    @abstractmethod
    def pull(self, branch_name: str) -> None:
        """Pull branch from the remote into the checked-out branch."""
        ...

    @abstractmethod
    def checkout(self, branch_name: str) -> None:
        """Checkout an existing local branch."""
        ...

    @abstractmethod
    def merge(self, branch_name: str) -> None:
        """Merge branch into the checked-out branch (auto-generated message)."""
        ...


class PRHost(ABC):
    """Pull request hosting service (GitHub via gh CLI or REST API)."""

    missing_message: str = "Error: PR hosting tool not available"
    unauthenticated_message: str = "Error: PR hosting tool is not authenticated"

    @abstractmethod
    def is_installed(self) -> bool:
        """Return True if the host can be reached at all (binary, token)."""
        ...

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Return True if the host reports an authenticated session."""
        ...

    @abstractmethod
    def create_pr(self, base: str, head: str, title: str, body: str) -> str:
        """Open a pull request; return its reference (URL)."""
        ...
