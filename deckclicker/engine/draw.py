"""Draw engine: rarity reshaping, luck (best-of-N), and sampling composed.

Every function here consumes uniform values from ``uniform_source`` strictly
in order: roll 1, roll 2, … inside luck, draw 1, draw 2, … inside
``draw_many``. Replaying the same stream therefore replays the same draws.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from deckclicker.engine.pool import Collectible, WeightedPool, sample
from deckclicker.engine.reshape import apply_rarity_boost, rarity_percentage

UniformSource = Callable[[], float]


@dataclass(frozen=True)
class DrawModifiers:
    """Upgrade effects that change how a card is drawn.

    A level of 0 disables the effect entirely. ``rarity_override`` is an
    explicit rarity percentage that replaces the level-derived one.
    """

    rarity_level: int = 0
    luck_level: int = 0
    rarity_override: float | None = None

    @property
    def reshapes(self) -> bool:
        return self.rarity_level > 0 or self.rarity_override is not None


NO_MODIFIERS = DrawModifiers()


@dataclass(frozen=True)
class DrawResult:
    """One opened deck: the card, when, and the score it earned."""

    collectible: Collectible
    timestamp_ms: float
    score_delta: float


def effective_pool(pool: WeightedPool, modifiers: DrawModifiers) -> WeightedPool:
    """The pool after rarity reshaping (or ``pool`` itself when disabled)."""
    if not modifiers.reshapes:
        return pool
    percentage = rarity_percentage(modifiers.rarity_level, modifiers.rarity_override)
    return apply_rarity_boost(pool, percentage)


def draw_with_luck(
    pool: WeightedPool,
    extra_rolls: int,
    uniform_source: UniformSource,
) -> Collectible:
    """Roll ``1 + extra_rolls`` times and keep the most valuable card.

    Ties go to the earliest roll: a later roll only replaces the current
    best when its value is strictly greater.
    """
    best = sample(pool, uniform_source())
    for _ in range(max(0, extra_rolls)):
        rolled = sample(pool, uniform_source())
        if rolled.value > best.value:
            best = rolled
    return best


def _draw_from(
    pool: WeightedPool,
    modifiers: DrawModifiers,
    uniform_source: UniformSource,
) -> Collectible:
    if modifiers.luck_level > 0:
        return draw_with_luck(pool, modifiers.luck_level, uniform_source)
    return sample(pool, uniform_source())


def draw_one(
    pool: WeightedPool,
    modifiers: DrawModifiers,
    uniform_source: UniformSource,
) -> Collectible:
    """Draw a single card with all modifiers applied."""
    return _draw_from(effective_pool(pool, modifiers), modifiers, uniform_source)


def draw_many(
    count: int,
    pool: WeightedPool,
    modifiers: DrawModifiers,
    uniform_source: UniformSource,
) -> list[Collectible]:
    """Draw ``count`` cards in order.

    Equivalent to calling ``draw_one`` ``count`` times; the reshaped pool is
    built once since the modifiers cannot change mid-call.
    """
    if count <= 0:
        return []
    reshaped = effective_pool(pool, modifiers)
    return [_draw_from(reshaped, modifiers, uniform_source) for _ in range(count)]


def make_results(
    collectibles: Iterable[Collectible],
    start_ms: float,
    spacing_ms: float = 0.0,
) -> list[DrawResult]:
    """Wrap drawn cards as results, timestamped ``start_ms + i * spacing_ms``."""
    return [
        DrawResult(
            collectible=card,
            timestamp_ms=start_ms + i * spacing_ms,
            score_delta=card.value,
        )
        for i, card in enumerate(collectibles)
    ]
