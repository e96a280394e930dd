"""Version control and PR hosting adapters."""

import logging
from pathlib import Path

from prloadgen.adapters.base import HostError, PRHost, VersionControl
from prloadgen.adapters.gh_cli import GhCLIHost
from prloadgen.adapters.git_cli import GitCLI
from prloadgen.adapters.github import GitHubAPIHost
from prloadgen.config import AppConfig


def create_host(config: AppConfig, repo_dir: Path, log: logging.Logger | None = None) -> PRHost:
    """Build the PR host selected by config.host.backend.

    Raises:
        ValueError: If the api backend is selected without host.repository.
    """
    host = config.host
    if host.backend == "api":
        if not host.repository:
            raise ValueError("host.repository (owner/repo) is required for the api backend")
        return GitHubAPIHost(
            token=config.github_token_resolved,
            repository=host.repository,
            api_url=host.api_url,
            log=log,
        )
    return GhCLIHost(command=host.command, repo_dir=repo_dir, log=log)


__all__ = [
    "GhCLIHost",
    "GitCLI",
    "GitHubAPIHost",
    "HostError",
    "PRHost",
    "VersionControl",
    "create_host",
]
