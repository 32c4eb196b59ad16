"""Rarity reshaping: skew pool weights toward high-value cards."""

from __future__ import annotations

import math
from dataclasses import replace

from deckclicker.data.balance import BALANCE
from deckclicker.engine.errors import InvalidPercentageError
from deckclicker.engine.pool import WeightedPool, build_pool


def rarity_percentage(level: int, override: float | None = None) -> float:
    """Resolve the rarity percentage for a level, or the explicit override."""
    if override is not None:
        return override
    return max(0, level) * BALANCE.draw.rarity_percent_per_level


def apply_rarity_boost(pool: WeightedPool, percentage: float) -> WeightedPool:
    """Return a new pool whose weights scale linearly with card value.

    The lowest-value card is multiplied by ``1 - p/100`` and the highest by
    ``1 + p/100``, with everything in between interpolated on value. Every
    new weight is floored at 1, which also absorbs the negative multipliers
    that appear once ``p > 100``.

    ``percentage <= 0`` and pools whose cards are all worth the same are
    returned unchanged.
    """
    if not math.isfinite(percentage):
        raise InvalidPercentageError(f"Rarity percentage must be finite, got {percentage!r}")
    if percentage <= 0:
        return pool

    values = [item.value for item in pool.items]
    min_value = min(values)
    max_value = max(values)
    value_range = max_value - min_value
    if value_range == 0:
        return pool

    max_mult = 1 + percentage / 100
    min_mult = 1 - percentage / 100

    reshaped = []
    for item in pool.items:
        normalized = (item.value - min_value) / value_range
        multiplier = min_mult + normalized * (max_mult - min_mult)
        reshaped.append(replace(item, weight=max(1.0, item.weight * multiplier)))

    return build_pool(reshaped)
