"""Seeded random number generator for deterministic battle simulation.

Wraps Python's random.Random to provide reproducible randomness.  The
battle, each controller, and the batch runner should use *forked* RNGs so
that one consumer drawing values does not perturb another.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class GameRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        """Return the seed this RNG was initialised with."""
        return self._seed

    # -- core random methods -------------------------------------------------

    def random_float(self) -> float:
        """Return a random float in the half-open interval ``[0.0, 1.0)``."""
        return self._rng.random()

    def random_choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        return self._rng.choice(seq)

    def weighted_choice(self, seq: Sequence[T], weights: Sequence[float]) -> T:
        """Return an element of *seq* with probability proportional to its
        weight.

        Raises ``ValueError`` if the sequences differ in length, are empty,
        or the weights do not sum to a positive number.
        """
        if len(seq) != len(weights):
            raise ValueError(
                f"weighted_choice got {len(seq)} items but {len(weights)} weights"
            )
        total = sum(w for w in weights if w > 0)
        if not seq or total <= 0:
            raise ValueError("weighted_choice needs at least one positive weight")

        roll = self._rng.random() * total
        cumulative = 0.0
        chosen = seq[0]
        for item, weight in zip(seq, weights):
            if weight <= 0:
                continue
            # Float rounding can leave roll == total; the last weighted item wins.
            chosen = item
            cumulative += weight
            if roll < cumulative:
                break
        return chosen

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> GameRNG:
        """Create a child RNG whose seed is derived from this RNG's seed and
        *name*.

        Forking with the same *name* always produces the same child seed,
        so e.g. ``"battle"`` and ``"enemy_ai"`` get stable, independent
        streams.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return GameRNG(child_seed)

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
