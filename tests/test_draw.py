"""Tests for the draw engine: luck, modifiers and draw_many ordering."""

import pytest

from deckclicker.engine.draw import (
    NO_MODIFIERS,
    DrawModifiers,
    draw_many,
    draw_one,
    draw_with_luck,
    effective_pool,
    make_results,
)
from deckclicker.engine.pool import Collectible, build_pool
from deckclicker.engine.rng import DrawStream, seed_from_timestamp


def _scripted(*values):
    """A uniform source that yields ``values`` in order, then fails."""
    return iter(values).__next__


class _Counting:
    def __init__(self, seed):
        self._stream = DrawStream.seed(seed)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self._stream.next()


def _pool():
    return build_pool([
        Collectible("cheap", weight=1, value=1),
        Collectible("pricey", weight=1, value=10),
    ])


# ── Luck ─────────────────────────────────────────────────────────────────────

def test_luck_keeps_best_roll():
    assert draw_with_luck(_pool(), 1, _scripted(0.1, 0.9)).name == "pricey"
    assert draw_with_luck(_pool(), 1, _scripted(0.9, 0.1)).name == "pricey"


def test_luck_tie_keeps_first_roll():
    pool = build_pool([
        Collectible("first", weight=1, value=5),
        Collectible("second", weight=1, value=5),
    ])
    assert draw_with_luck(pool, 1, _scripted(0.9, 0.1)).name == "second"
    assert draw_with_luck(pool, 1, _scripted(0.1, 0.9)).name == "first"


def test_luck_zero_is_single_roll():
    assert draw_with_luck(_pool(), 0, _scripted(0.1)).name == "cheap"


def test_luck_consumes_one_plus_extra_rolls():
    source = _Counting(1)
    draw_with_luck(_pool(), 4, source)
    assert source.calls == 5


# ── Modifiers ────────────────────────────────────────────────────────────────

def test_no_modifiers_uses_pool_as_is():
    pool = _pool()
    assert effective_pool(pool, NO_MODIFIERS) is pool
    assert not NO_MODIFIERS.reshapes


def test_rarity_level_reshapes():
    pool = build_pool([
        Collectible("A", weight=100, value=1),
        Collectible("B", weight=1, value=1000),
    ])
    reshaped = effective_pool(pool, DrawModifiers(rarity_level=10))
    assert reshaped.weight_of("A") == 1
    assert reshaped.weight_of("B") == 2


def test_override_replaces_level():
    pool = build_pool([
        Collectible("A", weight=100, value=1),
        Collectible("B", weight=1, value=1000),
    ])
    reshaped = effective_pool(pool, DrawModifiers(rarity_level=1, rarity_override=100))
    assert reshaped.weight_of("B") == 2


def test_zero_override_disables_reshape():
    pool = _pool()
    reshaped = effective_pool(pool, DrawModifiers(rarity_level=3, rarity_override=0))
    assert reshaped is pool


def test_draw_one_with_scripted_source():
    pool = _pool()
    assert draw_one(pool, NO_MODIFIERS, _scripted(0.2)).name == "cheap"
    assert draw_one(pool, NO_MODIFIERS, _scripted(0.7)).name == "pricey"


# ── draw_many ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("modifiers", [
    NO_MODIFIERS,
    DrawModifiers(rarity_level=2),
    DrawModifiers(luck_level=2),
    DrawModifiers(rarity_level=5, luck_level=1),
])
def test_draw_many_matches_repeated_draw_one(modifiers):
    pool = build_pool(Collectible(f"c{i}", weight=20 - i, value=i * 3) for i in range(20))
    batch = draw_many(50, pool, modifiers, DrawStream.seed(99))

    stream = DrawStream.seed(99)
    one_by_one = [draw_one(pool, modifiers, stream) for _ in range(50)]
    assert batch == one_by_one


def test_draw_many_consumption_count():
    source = _Counting(3)
    draw_many(7, _pool(), DrawModifiers(luck_level=2), source)
    assert source.calls == 21


def test_draw_many_non_positive_count():
    source = _Counting(3)
    assert draw_many(0, _pool(), NO_MODIFIERS, source) == []
    assert draw_many(-4, _pool(), NO_MODIFIERS, source) == []
    assert source.calls == 0


def test_same_seed_same_draws():
    pool = _pool()
    first = draw_many(30, pool, NO_MODIFIERS, DrawStream.seed(42))
    second = draw_many(30, pool, NO_MODIFIERS, DrawStream.seed(42))
    assert first == second


# ── Results / seeding ────────────────────────────────────────────────────────

def test_make_results_timestamps_and_scores():
    cards = [Collectible("x", 1, 2.5), Collectible("y", 1, 4)]
    results = make_results(cards, start_ms=5_000, spacing_ms=1_000)
    assert [r.timestamp_ms for r in results] == [5_000, 6_000]
    assert [r.score_delta for r in results] == [2.5, 4]
    assert results[1].collectible.name == "y"


def test_seed_from_timestamp_truncates():
    assert seed_from_timestamp(1_700_000_000_123.9) == 1_700_000_000_123


def test_draw_stream_reports_seed():
    stream = DrawStream.seed(5)
    assert stream.seed_value == 5
    assert 0.0 <= stream() < 1.0
