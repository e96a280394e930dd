"""Data models for change kinds, PR iterations, generated artifacts, and run
summaries."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ChangeKind(str, Enum):
    """Category of change generated for one PR."""

    DOCS = "docs"
    CODE = "code"
    CONFIG = "config"


class IterationState(str, Enum):
    """Lifecycle of one PR iteration.

    Strictly linear from IDLE to MERGED_TO_BASE; ABORTED is terminal and
    reachable from any non-final state.
    """

    IDLE = "idle"
    BRANCH_CREATED = "branch_created"
    COMMITTED = "committed"
    PUSHED = "pushed"
    PR_OPENED = "pr_opened"
    MERGED_TO_BASE = "merged_to_base"
    ABORTED = "aborted"


_ORDER = [
    IterationState.IDLE,
    IterationState.BRANCH_CREATED,
    IterationState.COMMITTED,
    IterationState.PUSHED,
    IterationState.PR_OPENED,
    IterationState.MERGED_TO_BASE,
]


class InvalidTransition(Exception):
    """Raised when an iteration is moved out of its linear order."""

    pass


class GeneratedArtifact(BaseModel):
    """File change produced for one iteration."""

    kind: ChangeKind = Field(..., description="Change kind that produced the artifact")
    path: str = Field(..., description="Path relative to the repository root")
    content: str = Field(..., description="Text written (docs, code) or line appended (config)")

    model_config = {"extra": "forbid", "frozen": True}


class IterationRecord(BaseModel):
    """Snapshot of a finished (or aborted) iteration."""

    index: int
    branch: str
    kind: ChangeKind
    title: str
    state: IterationState
    artifact: Optional[GeneratedArtifact] = None
    pr_url: Optional[str] = None


class RunSummary(BaseModel):
    """Outcome of a run: completed iterations and, on failure, where it
    stopped."""

    base_branch: str
    requested: int
    completed: List[IterationRecord] = Field(default_factory=list)
    aborted: Optional[IterationRecord] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.aborted is None and len(self.completed) == self.requested


class PRIteration:
    """One create-branch, change, commit, push, open-PR, merge cycle."""

    def __init__(
        self,
        index: int,
        total: int,
        branch: str,
        kind: ChangeKind,
        title: str,
        body: str,
    ) -> None:
        self.index = index
        self.total = total
        self.branch = branch
        self.kind = kind
        self.title = title
        self.body = body
        self.state = IterationState.IDLE
        self.artifact: GeneratedArtifact | None = None
        self.pr_url: str | None = None

    def advance(self, target: IterationState) -> None:
        """Move to the next state; raise InvalidTransition unless target
        directly follows the current state."""
        if self.state in (IterationState.ABORTED, IterationState.MERGED_TO_BASE):
            raise InvalidTransition(f"iteration {self.index} is finished ({self.state.value})")
        expected = _ORDER[_ORDER.index(self.state) + 1]
        if target is not expected:
            raise InvalidTransition(
                f"iteration {self.index}: cannot go from {self.state.value} to {target.value}"
            )
        self.state = target

    def abort(self) -> None:
        """Mark the iteration as aborted (terminal)."""
        if self.state is IterationState.MERGED_TO_BASE:
            raise InvalidTransition(f"iteration {self.index} already merged")
        self.state = IterationState.ABORTED

    def to_record(self) -> IterationRecord:
        return IterationRecord(
            index=self.index,
            branch=self.branch,
            kind=self.kind,
            title=self.title,
            state=self.state,
            artifact=self.artifact,
            pr_url=self.pr_url,
        )
