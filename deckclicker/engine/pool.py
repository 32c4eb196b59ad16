"""Weighted pool: collectibles, prefix sums, and the weighted sampler.

A pool is built once and never mutated. Sampling maps a caller-supplied
uniform value in [0, 1) onto the cumulative weights, so the same uniform
always selects the same item.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from deckclicker.data.balance import BALANCE
from deckclicker.engine.errors import (
    DuplicateNameError,
    EmptyPoolError,
    InvalidWeightError,
    ValidationError,
)


class Tier(Enum):
    """Quality tier of a card. Cosmetic only: sampling ignores it."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class Collectible:
    """A drawable card."""

    name: str
    weight: float
    value: float
    tier: Tier = Tier.COMMON


@dataclass(frozen=True)
class WeightedPool:
    """Items plus their cached total and prefix-sum weights.

    Use ``build_pool`` rather than constructing this directly so the
    derived fields always match the items.
    """

    items: tuple[Collectible, ...]
    total_weight: float
    cumulative_weights: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.items)

    def weight_of(self, name: str) -> float:
        for item in self.items:
            if item.name == name:
                return item.weight
        raise KeyError(name)


def build_pool(items: Iterable[Collectible]) -> WeightedPool:
    """Validate ``items`` and compute the prefix sums in one pass.

    Raises:
        EmptyPoolError: no items.
        InvalidWeightError: a weight is <= 0, NaN or infinite.
        DuplicateNameError: two items share a name.
        ValidationError: a value is negative or not finite.
    """
    items = tuple(items)
    if not items:
        raise EmptyPoolError("Cannot build a pool with zero items")

    seen: set[str] = set()
    cumulative: list[float] = []
    running = 0.0
    for item in items:
        if not math.isfinite(item.weight) or item.weight <= 0:
            raise InvalidWeightError(
                f"Card {item.name!r} has invalid weight {item.weight!r}"
            )
        if not math.isfinite(item.value) or item.value < 0:
            raise ValidationError(f"Card {item.name!r} has invalid value {item.value!r}")
        if item.name in seen:
            raise DuplicateNameError(f"Duplicate card name {item.name!r}")
        seen.add(item.name)

        running += item.weight
        cumulative.append(running)

    return WeightedPool(
        items=items,
        total_weight=running,
        cumulative_weights=tuple(cumulative),
    )


def sample(pool: WeightedPool, uniform: float) -> Collectible:
    """Select one item proportionally to weight.

    Returns the first item whose cumulative weight is strictly greater than
    ``uniform * total_weight``. Rounding overshoot clamps to the last item.
    """
    target = uniform * pool.total_weight
    cumulative = pool.cumulative_weights
    last = len(cumulative) - 1

    if target >= pool.total_weight:
        return pool.items[last]

    if len(cumulative) > BALANCE.draw.linear_scan_max:
        index = bisect_right(cumulative, target)
    else:
        index = 0
        while index < last and cumulative[index] <= target:
            index += 1

    return pool.items[min(index, last)]
