"""Seedable uniform stream used for every draw.

Wraps ``random.Random`` (Mersenne Twister), whose output for a given integer
seed is identical on every platform and Python 3 release. The engine never
touches the module-level ``random`` state: streams are passed in explicitly.
"""

from __future__ import annotations

import random


class DrawStream:
    """A stream of uniform floats in [0, 1).

    Callable, so it can be handed straight to the draw functions as their
    ``uniform_source``.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def seed(cls, value: int | None) -> DrawStream:
        """Start a fresh stream. ``None`` seeds from OS entropy."""
        return cls(value)

    @property
    def seed_value(self) -> int | None:
        return self._seed

    def next(self) -> float:
        return self._rng.random()

    def __call__(self) -> float:
        return self._rng.random()

    def __repr__(self) -> str:
        return f"DrawStream(seed={self._seed})"


def seed_from_timestamp(anchor_ms: float) -> int:
    """Derive the offline-simulation seed from the session anchor."""
    return int(anchor_ms)
