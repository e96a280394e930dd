"""Checks that must pass before the run touches the repository."""

import logging

from prloadgen.adapters.base import PRHost, VersionControl

LOG = logging.getLogger("prloadgen.preflight")


class PreconditionError(Exception):
    """Raised when the environment cannot support a run."""

    pass


def check_preconditions(host: PRHost, vcs: VersionControl) -> None:
    """Verify hosting tool, hosting auth, and git work tree, in that order.

    Raises:
        PreconditionError: With the message for the first failing check.
    """
    if not host.is_installed():
        raise PreconditionError(host.missing_message)
    if not host.is_authenticated():
        raise PreconditionError(host.unauthenticated_message)
    if not vcs.is_repository():
        raise PreconditionError("Error: Not in a git repository")
    LOG.debug("Preconditions passed for %s", vcs.repo_dir)
