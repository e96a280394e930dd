"""Random picks for a run: change kind, title/body, and name suffixes.

Wrapping random.Random lets a run be replayed from a seed and lets tests
substitute scripted picks.
"""

import random
from typing import Sequence, TypeVar

from prloadgen.models import ChangeKind

T = TypeVar("T")

# Cumulative percentage thresholds: 60% docs, 30% code, 10% config
KIND_WEIGHTS: tuple[tuple[ChangeKind, int], ...] = (
    (ChangeKind.DOCS, 60),
    (ChangeKind.CODE, 30),
    (ChangeKind.CONFIG, 10),
)

# Range of bash $RANDOM
SUFFIX_LIMIT = 32768


def kind_for_roll(roll: int) -> ChangeKind:
    """Map a roll in 0..99 to a change kind using KIND_WEIGHTS."""
    if not 0 <= roll < 100:
        raise ValueError(f"roll must be in 0..99, got {roll}")
    threshold = 0
    for kind, weight in KIND_WEIGHTS:
        threshold += weight
        if roll < threshold:
            return kind
    return KIND_WEIGHTS[-1][0]


class RandomSource:
    """Source of the run's random decisions."""

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    def roll(self) -> int:
        """Uniform integer in 0..99."""
        return self._rng.randrange(100)

    def pick_change_kind(self) -> ChangeKind:
        """Weighted draw: 60% docs, 30% code, 10% config."""
        return kind_for_roll(self.roll())

    def choice(self, options: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        if not options:
            raise ValueError("cannot choose from an empty sequence")
        return self._rng.choice(options)

    def suffix(self) -> int:
        """Random number for branch and file names (0..32767)."""
        return self._rng.randrange(SUFFIX_LIMIT)
