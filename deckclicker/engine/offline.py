"""Offline progression: replay the auto-opened decks of a time gap.

Nothing here runs on the wall clock. The number of draws is derived from the
elapsed time, and the draws themselves come from a stream seeded with the
session anchor, so recomputing the same gap always yields the same cards.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from deckclicker.data.balance import BALANCE
from deckclicker.engine.draw import (
    NO_MODIFIERS,
    DrawModifiers,
    DrawResult,
    draw_many,
    make_results,
)
from deckclicker.engine.pool import WeightedPool
from deckclicker.engine.rng import DrawStream, seed_from_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfflineRates:
    """Resolved per-second rates (see ``economy.offline_rates``)."""

    auto_open_rate: float = 0.0
    production_rate: float = 0.0


@dataclass(frozen=True)
class OfflineProgressionResult:
    """Everything that happened while the player was away."""

    elapsed_seconds: int
    draws_performed: int
    draws: tuple[DrawResult, ...] = field(default_factory=tuple)
    score_delta: float = 0.0
    was_capped: bool = False
    # Decks produced during the gap (already counted in the draw budget)
    resources_produced: int = 0


def calculate(
    anchor_ms: float,
    now_ms: float,
    available_resources: int,
    rates: OfflineRates,
    pool: WeightedPool,
    modifiers: DrawModifiers = NO_MODIFIERS,
) -> OfflineProgressionResult | None:
    """Compute offline progression between ``anchor_ms`` and ``now_ms``.

    Returns None when there is no auto-opening or the clock went backward.
    A gap that allows no draws still returns a result, with zero draws, so
    the caller knows how much time passed.
    """
    if rates.auto_open_rate <= 0:
        return None

    elapsed_ms = now_ms - anchor_ms
    if elapsed_ms < 0:
        logger.warning("Clock moved backward by %d ms; skipping offline progression", -elapsed_ms)
        return None

    elapsed_seconds = math.floor(elapsed_ms / 1000)
    was_capped = False
    if elapsed_seconds > BALANCE.offline.max_offline_seconds:
        elapsed_seconds = BALANCE.offline.max_offline_seconds
        was_capped = True

    produced = math.floor(elapsed_seconds * max(0.0, rates.production_rate))
    requested = math.floor(elapsed_seconds * rates.auto_open_rate)
    performed = min(requested, max(0, available_resources) + produced)

    if performed <= 0:
        return OfflineProgressionResult(
            elapsed_seconds=elapsed_seconds,
            draws_performed=0,
            was_capped=was_capped,
            resources_produced=produced,
        )

    stream = DrawStream.seed(seed_from_timestamp(anchor_ms))
    cards = draw_many(performed, pool, modifiers, stream)
    draws = tuple(make_results(cards, anchor_ms, BALANCE.offline.draw_spacing_ms))
    score_delta = sum(d.score_delta for d in draws)

    logger.info(
        "Offline progression: %ds elapsed%s, %d/%d draws, +%.2f score",
        elapsed_seconds,
        " (capped)" if was_capped else "",
        performed,
        requested,
        score_delta,
    )

    return OfflineProgressionResult(
        elapsed_seconds=elapsed_seconds,
        draws_performed=performed,
        draws=draws,
        score_delta=score_delta,
        was_capped=was_capped,
        resources_produced=produced,
    )
