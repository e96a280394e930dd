"""Tests for prloadgen.services.generator_loop (PR loop against fakes)."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from prloadgen.config import ArtifactConfig, RunConfig
from prloadgen.models import ChangeKind, IterationState
from prloadgen.services.generator_loop import PRGeneratorLoop, RunAborted
from prloadgen.services.git import GitRunnerError
from prloadgen.services.preflight import PreconditionError
from prloadgen.templates import PR_BODIES, PR_TITLES
from prloadgen.testing import FakePRHost, FakeVersionControl, ScriptedRandom

ITERATION_OPS = ["create_branch", "stage", "commit", "push", "pull", "checkout", "merge", "push"]


class Clock:
    """Advances one second per call."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def make_loop(
    repo_dir: Path,
    number: int = 3,
    wait: int = 2,
    vcs: FakeVersionControl | None = None,
    host: FakePRHost | None = None,
    rng: ScriptedRandom | None = None,
) -> tuple[PRGeneratorLoop, FakeVersionControl, FakePRHost, list[float]]:
    vcs = vcs or FakeVersionControl(repo_dir)
    host = host or FakePRHost()
    sleeps: list[float] = []
    loop = PRGeneratorLoop(
        vcs=vcs,
        host=host,
        run=RunConfig(number=number, wait_seconds=wait),
        artifacts=ArtifactConfig(),
        rng=rng or ScriptedRandom(seed=42),
        now=Clock(),
        sleep=sleeps.append,
    )
    return loop, vcs, host, sleeps


class TestSuccessfulRun:
    """Every command succeeds."""

    def test_runs_n_iterations_and_merges(self, tmp_path: Path) -> None:
        """N iterations produce N PRs and N merges into the base branch."""
        loop, vcs, host, _ = make_loop(tmp_path, number=3)
        summary = loop.run()
        assert summary.succeeded
        assert len(summary.completed) == 3
        assert len(host.created) == 3
        assert len(vcs.merges) == 3
        assert all(base == "main" for base, _ in vcs.merges)
        assert [r.state for r in summary.completed] == [IterationState.MERGED_TO_BASE] * 3
        assert [r.pr_url for r in summary.completed] == [
            "https://github.com/acme/demo/pull/1",
            "https://github.com/acme/demo/pull/2",
            "https://github.com/acme/demo/pull/3",
        ]

    def test_operation_order(self, tmp_path: Path) -> None:
        """Preflight, sync, then the fixed per-iteration sequence."""
        loop, vcs, _, _ = make_loop(tmp_path, number=2)
        loop.run()
        assert vcs.ops() == ["is_repository", "sync_base_branch"] + ITERATION_OPS * 2

    def test_branch_forks_from_base_and_is_pushed(self, tmp_path: Path) -> None:
        """Feature branch starts at main; both it and main are pushed."""
        loop, vcs, host, _ = make_loop(tmp_path, number=1)
        summary = loop.run()
        record = summary.completed[0]
        assert ("create_branch", (record.branch, "main")) in vcs.calls
        assert vcs.pushed == [record.branch, "main"]
        assert vcs.merges == [("main", record.branch)]
        assert host.created[0]["base"] == "main"
        assert host.created[0]["head"] == record.branch

    def test_commit_title_matches_pr_title(self, tmp_path: Path) -> None:
        """Commit message and PR title are the same drawn title; body comes from the body set."""
        loop, vcs, host, _ = make_loop(tmp_path, number=4)
        loop.run()
        for (_, message, _), pr in zip(vcs.commits, host.created):
            assert message == pr["title"]
            assert pr["title"] in PR_TITLES
            assert pr["body"] in PR_BODIES

    def test_scripted_picks(self, tmp_path: Path) -> None:
        """Injected kinds, suffixes and picks determine branch, title and body."""
        rng = ScriptedRandom(kinds=[ChangeKind.CODE], suffixes=[11, 22], picks=[2, 1])
        loop, vcs, host, _ = make_loop(tmp_path, number=1, rng=rng)
        summary = loop.run()
        record = summary.completed[0]
        assert record.branch == "pr-test/20240115-100001-11-code"
        assert record.kind is ChangeKind.CODE
        assert record.artifact.path == "scripts/examples/util_20240115_100002_22.sh"
        assert host.created[0]["title"] == PR_TITLES[2]
        assert host.created[0]["body"] == PR_BODIES[1]
        assert vcs.commits[0][2] == [record.artifact.path]

    def test_sleeps_between_but_not_after(self, tmp_path: Path) -> None:
        """N iterations sleep N-1 times for wait_seconds."""
        loop, _, _, sleeps = make_loop(tmp_path, number=3, wait=5)
        loop.run()
        assert sleeps == [5, 5]

    def test_zero_iterations(self, tmp_path: Path) -> None:
        """N=0 syncs the base branch and does nothing else."""
        loop, vcs, host, sleeps = make_loop(tmp_path, number=0)
        summary = loop.run()
        assert summary.completed == []
        assert summary.succeeded
        assert vcs.ops() == ["is_repository", "sync_base_branch"]
        assert host.created == []
        assert sleeps == []

    def test_artifacts_unique_across_run(self, tmp_path: Path) -> None:
        """No two iterations write the same file or config entry."""
        loop, _, _, _ = make_loop(tmp_path, number=40, wait=0, rng=ScriptedRandom(seed=9))
        summary = loop.run()
        keys = []
        for record in summary.completed:
            if record.kind is ChangeKind.CONFIG:
                keys.append(record.artifact.content)
            else:
                keys.append(record.artifact.path)
        assert len(keys) == len(set(keys)) == 40
        assert len({r.branch for r in summary.completed}) == 40


class TestFailures:
    """Fail-fast behavior."""

    def test_precondition_failure_touches_nothing(self, tmp_path: Path) -> None:
        loop, vcs, host, _ = make_loop(tmp_path, host=FakePRHost(authenticated=False))
        with pytest.raises(PreconditionError):
            loop.run()
        assert vcs.calls == []
        assert not (tmp_path / "docs").exists()

    def test_diverged_base_aborts_before_any_branch(self, tmp_path: Path) -> None:
        """Failed fast-forward: no branch, no artifact, no PR."""
        vcs = FakeVersionControl(tmp_path, diverged=True)
        loop, _, host, _ = make_loop(tmp_path, vcs=vcs)
        with pytest.raises(GitRunnerError, match="fast-forward"):
            loop.run()
        assert vcs.ops() == ["is_repository", "sync_base_branch"]
        assert host.created == []
        assert list(tmp_path.iterdir()) == []

    def test_push_failure_aborts_run(self, tmp_path: Path) -> None:
        """Failure in iteration 2 leaves iteration 1 merged and stops."""
        # push #1: iteration 1 branch, push #2: main, push #3: iteration 2 branch
        vcs = FakeVersionControl(tmp_path, fail_on={"push": 3})
        loop, _, host, sleeps = make_loop(tmp_path, number=5, vcs=vcs)
        with pytest.raises(RunAborted) as exc_info:
            loop.run()
        summary = exc_info.value.summary
        assert len(summary.completed) == 1
        assert summary.aborted.index == 2
        assert summary.aborted.state is IterationState.ABORTED
        assert "simulated failure" in summary.error
        assert len(host.created) == 1
        assert len(vcs.merges) == 1
        assert sleeps == [2]
        assert isinstance(exc_info.value.__cause__, GitRunnerError)

    def test_pr_create_failure_leaves_pushed_branch(self, tmp_path: Path) -> None:
        """Host failure after push: branch stays pushed, nothing merged, no retry."""
        vcs = FakeVersionControl(tmp_path)
        loop, _, host, _ = make_loop(tmp_path, number=2, vcs=vcs, host=FakePRHost(fail_at=1))
        with pytest.raises(RunAborted) as exc_info:
            loop.run()
        summary = exc_info.value.summary
        assert summary.completed == []
        assert vcs.pushed == [summary.aborted.branch]
        assert vcs.merges == []
        assert vcs.ops().count("create_branch") == 1

    def test_merge_failure(self, tmp_path: Path) -> None:
        vcs = FakeVersionControl(tmp_path, fail_on={"merge": 1})
        loop, _, host, _ = make_loop(tmp_path, number=3, vcs=vcs)
        with pytest.raises(RunAborted) as exc_info:
            loop.run()
        assert exc_info.value.summary.aborted.pr_url == "https://github.com/acme/demo/pull/1"
        assert len(host.created) == 1
