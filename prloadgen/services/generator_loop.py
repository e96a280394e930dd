"""PR generator loop: N sequential create-PR-and-merge cycles.

Each iteration forks a fresh branch from the base branch, adds one generated
change, commits, pushes, opens a PR through the host, then merges the branch
back into the base and pushes it. The run is fail-fast: the first git, host
or artifact failure aborts the whole run. Earlier iterations stay merged and
pushed branches are left in place.
"""

import logging
import time
from datetime import datetime
from typing import Callable

from prloadgen.adapters.base import HostError, PRHost, VersionControl
from prloadgen.config import ArtifactConfig, RunConfig
from prloadgen.models import IterationState, PRIteration, RunSummary
from prloadgen.services.artifacts import ArtifactError, generate_artifact
from prloadgen.services.git import GitRunnerError, branch_name_for_iteration, timestamp
from prloadgen.services.preflight import check_preconditions
from prloadgen.services.random_source import RandomSource
from prloadgen.templates import PR_BODIES, PR_TITLES

SEPARATOR = "=" * 42

# Failures that abort the run
ABORTING_ERRORS = (GitRunnerError, HostError, ArtifactError, OSError)


class RunAborted(Exception):
    """Raised when an iteration fails; carries the partial RunSummary."""

    def __init__(self, summary: RunSummary) -> None:
        super().__init__(summary.error or "run aborted")
        self.summary = summary


class PRGeneratorLoop:
    """Drive a run against one working tree and one PR host."""

    def __init__(
        self,
        vcs: VersionControl,
        host: PRHost,
        run: RunConfig,
        artifacts: ArtifactConfig | None = None,
        rng: RandomSource | None = None,
        now: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
        log: logging.Logger | None = None,
    ) -> None:
        self.vcs = vcs
        self.host = host
        self.run_config = run
        self.artifacts = artifacts or ArtifactConfig()
        self.rng = rng or RandomSource(seed=run.seed)
        self._now = now
        self._sleep = sleep
        self._log = log or logging.getLogger("prloadgen.loop")

    def prepare(self) -> None:
        """Check preconditions, then sync the base branch.

        Raises PreconditionError before any mutation, or GitRunnerError if
        the base branch cannot be fast-forwarded.
        """
        check_preconditions(self.host, self.vcs)
        self.vcs.sync_base_branch(self.run_config.base_branch)

    def new_iteration(self, index: int) -> PRIteration:
        """Draw kind, branch name, title and body for iteration index."""
        kind = self.rng.pick_change_kind()
        branch = branch_name_for_iteration(
            self.run_config.branch_prefix,
            timestamp(self._now()),
            self.rng.suffix(),
            kind.value,
        )
        return PRIteration(
            index=index,
            total=self.run_config.number,
            branch=branch,
            kind=kind,
            title=self.rng.choice(PR_TITLES),
            body=self.rng.choice(PR_BODIES),
        )

    def run_iteration(self, iteration: PRIteration) -> None:
        """Take one iteration from IDLE to MERGED_TO_BASE."""
        base = self.run_config.base_branch
        self._log.info(
            "[%d/%d] Creating branch: %s (kind: %s)",
            iteration.index,
            iteration.total,
            iteration.branch,
            iteration.kind.value,
        )
        self.vcs.create_branch(iteration.branch, base)
        iteration.advance(IterationState.BRANCH_CREATED)

        iteration.artifact = generate_artifact(
            iteration.kind, self.vcs.repo_dir, self.artifacts, self.rng, self._now()
        )
        self.vcs.stage([iteration.artifact.path])
        self.vcs.commit(iteration.title)
        iteration.advance(IterationState.COMMITTED)

        self.vcs.push(iteration.branch)
        iteration.advance(IterationState.PUSHED)

        self._log.info("Opening PR...")
        iteration.pr_url = self.host.create_pr(base, iteration.branch, iteration.title, iteration.body)
        iteration.advance(IterationState.PR_OPENED)
        self._log.info("PR created: %s", iteration.pr_url)

        self._log.info("Auto-merging branch '%s' into '%s'...", iteration.branch, base)
        self.vcs.pull(base)
        self.vcs.checkout(base)
        self.vcs.merge(iteration.branch)
        self.vcs.push(base)
        iteration.advance(IterationState.MERGED_TO_BASE)
        self._log.info("Merged '%s' into '%s' and pushed.", iteration.branch, base)

    def run(self) -> RunSummary:
        """Run all iterations.

        Returns:
            RunSummary with every completed iteration.

        Raises:
            PreconditionError: Environment check failed; nothing was changed.
            GitRunnerError: Base branch sync failed; no iteration started.
            RunAborted: An iteration failed; summary lists the completed ones.
        """
        cfg = self.run_config
        self.prepare()

        self._log.info("Starting PR creation")
        self._log.info("Base branch: %s", cfg.base_branch)
        self._log.info("Number of PRs: %d", cfg.number)
        self._log.info("Wait seconds: %d", cfg.wait_seconds)
        self._log.info(SEPARATOR)

        summary = RunSummary(base_branch=cfg.base_branch, requested=cfg.number)
        for index in range(1, cfg.number + 1):
            iteration = self.new_iteration(index)
            try:
                self.run_iteration(iteration)
            except ABORTING_ERRORS as e:
                reached = iteration.state
                iteration.abort()
                summary.aborted = iteration.to_record()
                summary.error = str(e)
                self._log.error(
                    "[%d/%d] Aborting run after state %s: %s",
                    index,
                    cfg.number,
                    reached.value,
                    e,
                )
                raise RunAborted(summary) from e
            summary.completed.append(iteration.to_record())
            if index < cfg.number:
                self._log.info("Waiting %d seconds before next PR...", cfg.wait_seconds)
                self._sleep(cfg.wait_seconds)

        self._log.info(SEPARATOR)
        self._log.info("Done. Created %d PR(s).", cfg.number)
        return summary
