"""In-memory collaborators for exercising the PR loop without git or a
network (kept in the package so tests and downstream users can import them).
"""

import random
from pathlib import Path
from typing import Iterable, Sequence, TypeVar

from prloadgen.adapters.base import HostError, PRHost, VersionControl
from prloadgen.models import ChangeKind
from prloadgen.services.git import GitRunnerError
from prloadgen.services.random_source import RandomSource

T = TypeVar("T")


class FakeVersionControl(VersionControl):
    """Records git operations and simulates branch/merge bookkeeping.

    fail_on maps an operation name to the 1-based call number that should
    raise GitRunnerError (e.g. {"push": 3}). diverged makes
    sync_base_branch fail as a rejected fast-forward would.
    """

    def __init__(
        self,
        repo_dir: Path,
        is_repo: bool = True,
        diverged: bool = False,
        fail_on: dict[str, int] | None = None,
    ) -> None:
        self.repo_dir = Path(repo_dir)
        self.is_repo = is_repo
        self.diverged = diverged
        self.fail_on = dict(fail_on or {})
        self.calls: list[tuple[str, tuple]] = []
        self._counts: dict[str, int] = {}
        self.branches: set[str] = set()
        self.current_branch: str | None = None
        self.staged: list[str] = []
        self.commits: list[tuple[str, str, list[str]]] = []
        self.pushed: list[str] = []
        self.merges: list[tuple[str, str]] = []

    def _record(self, op: str, *args: object) -> None:
        self.calls.append((op, args))
        self._counts[op] = self._counts.get(op, 0) + 1
        if self.fail_on.get(op) == self._counts[op]:
            raise GitRunnerError(f"git {op}: simulated failure", returncode=1)

    def ops(self) -> list[str]:
        """Operation names in call order."""
        return [op for op, _ in self.calls]

    def is_repository(self) -> bool:
        self._record("is_repository")
        return self.is_repo

    def sync_base_branch(self, base_branch: str) -> None:
        self._record("sync_base_branch", base_branch)
        if self.diverged:
            raise GitRunnerError(
                f"git pull --ff-only origin {base_branch}: fatal: Not possible to fast-forward, aborting.",
                returncode=128,
            )
        self.branches.add(base_branch)
        self.current_branch = base_branch

    def create_branch(self, branch_name: str, start_point: str) -> None:
        self._record("create_branch", branch_name, start_point)
        self.branches.add(branch_name)
        self.current_branch = branch_name

    def stage(self, paths: Iterable[str]) -> None:
        paths = list(paths)
        self._record("stage", *paths)
        self.staged.extend(paths)

    def commit(self, message: str) -> None:
        self._record("commit", message)
        self.commits.append((self.current_branch or "", message, list(self.staged)))
        self.staged.clear()

    def push(self, branch_name: str) -> None:
        self._record("push", branch_name)
        self.pushed.append(branch_name)

    def pull(self, branch_name: str) -> None:
        self._record("pull", branch_name)

    def checkout(self, branch_name: str) -> None:
        self._record("checkout", branch_name)
        if branch_name not in self.branches:
            raise GitRunnerError(f"git checkout {branch_name}: pathspec did not match", returncode=1)
        self.current_branch = branch_name

    def merge(self, branch_name: str) -> None:
        self._record("merge", branch_name)
        self.merges.append((self.current_branch or "", branch_name))


class FakePRHost(PRHost):
    """Hands out sequential PR URLs; fail_at makes the Nth create_pr fail."""

    missing_message = "Error: GitHub CLI (gh) not found in PATH"
    unauthenticated_message = "Error: gh CLI is not authenticated. Run: gh auth login"

    def __init__(
        self,
        installed: bool = True,
        authenticated: bool = True,
        fail_at: int | None = None,
        repository: str = "acme/demo",
    ) -> None:
        self.installed = installed
        self.authenticated = authenticated
        self.fail_at = fail_at
        self.repository = repository
        self.created: list[dict[str, str]] = []
        self.checks: list[str] = []

    def is_installed(self) -> bool:
        self.checks.append("installed")
        return self.installed

    def is_authenticated(self) -> bool:
        self.checks.append("authenticated")
        return self.authenticated

    def create_pr(self, base: str, head: str, title: str, body: str) -> str:
        if self.fail_at is not None and len(self.created) + 1 == self.fail_at:
            raise HostError("gh pr create: simulated failure")
        self.created.append({"base": base, "head": head, "title": title, "body": body})
        return f"https://github.com/{self.repository}/pull/{len(self.created)}"


class ScriptedRandom(RandomSource):
    """RandomSource returning queued values first, then seeded draws."""

    def __init__(
        self,
        kinds: Sequence[ChangeKind] = (),
        suffixes: Sequence[int] = (),
        picks: Sequence[int] = (),
        seed: int = 0,
    ) -> None:
        super().__init__(rng=random.Random(seed))
        self._kinds = list(kinds)
        self._suffixes = list(suffixes)
        self._picks = list(picks)

    def pick_change_kind(self) -> ChangeKind:
        if self._kinds:
            return self._kinds.pop(0)
        return super().pick_change_kind()

    def suffix(self) -> int:
        if self._suffixes:
            return self._suffixes.pop(0)
        return super().suffix()

    def choice(self, options: Sequence[T]) -> T:
        """Queued picks are indexes into options."""
        if self._picks:
            return options[self._picks.pop(0) % len(options)]
        return super().choice(options)
