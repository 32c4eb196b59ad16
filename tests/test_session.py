"""Tests for the game session: opening, upgrades, offline and live ticks."""

import math

import pytest

from deckclicker.data.balance import BALANCE
from deckclicker.data.upgrades import UpgradeKind
from deckclicker.engine.errors import (
    InsufficientResourcesError,
    InvalidPercentageError,
    InvalidUpgradeError,
    ValidationError,
)
from deckclicker.engine.game_state import new_game_state
from deckclicker.engine.pool import Collectible, build_pool
from deckclicker.engine.rng import DrawStream
from deckclicker.engine.session import GameSession


def _pool():
    return build_pool([
        Collectible("Rain of Chaos", weight=80, value=1),
        Collectible("Her Mask", weight=19, value=5),
        Collectible("The Doctor", weight=1, value=1300),
    ])


def _session(mode_id="stacked-deck-clicker", **overrides):
    state = new_game_state(mode_id, started_ms=0)
    for key, value in overrides.items():
        setattr(state, key, value)
    return GameSession(state, _pool(), DrawStream.seed(2024))


# ── Opening decks ────────────────────────────────────────────────────────────

def test_open_deck_consumes_and_scores():
    session = _session()
    result = session.open_deck(at_ms=5_000)

    assert session.state.decks == 9
    assert session.state.score == result.score_delta == result.collectible.value
    assert session.state.total_decks_opened == 1
    assert session.state.card_collection == {result.collectible.name: 1}
    assert session.state.last_session_ms == 5_000
    assert list(session.recent) == [result]


def test_open_deck_without_decks():
    session = _session(decks=0)
    with pytest.raises(InsufficientResourcesError) as info:
        session.open_deck()
    assert info.value.code == "NO_DECKS"
    assert session.state.total_decks_opened == 0


def test_classic_decks_are_unlimited():
    session = _session("classic")
    before = session.state.decks
    for _ in range(5):
        session.open_deck()
    assert session.state.decks == before
    assert session.state.total_decks_opened == 5


def test_open_many_requires_multidraw():
    with pytest.raises(InvalidUpgradeError) as info:
        _session().open_many()
    assert info.value.code == "MULTIDRAW_LOCKED"


def test_open_many_uses_multidraw_count():
    session = _session(upgrade_levels={UpgradeKind.MULTIDRAW: 1})
    results = session.open_many(at_ms=1_000)
    assert len(results) == 10
    assert session.state.decks == 0
    assert session.state.score == pytest.approx(sum(r.score_delta for r in results))


def test_open_many_explicit_count():
    session = _session()
    assert len(session.open_many(3)) == 3
    assert session.state.decks == 7


def test_open_many_not_enough_decks():
    session = _session(decks=5, upgrade_levels={UpgradeKind.MULTIDRAW: 1})
    with pytest.raises(InsufficientResourcesError) as info:
        session.open_many()
    assert info.value.code == "INSUFFICIENT_DECKS"
    assert session.state.decks == 5


def test_open_many_rejects_non_positive():
    with pytest.raises(ValidationError):
        _session().open_many(0)


def test_recent_draws_are_bounded():
    session = _session("classic")
    session.open_many(50)
    assert len(session.recent) == BALANCE.session.recent_draws


# ── Upgrades ─────────────────────────────────────────────────────────────────

def test_purchase_upgrade():
    session = _session(score=150.0)
    spent = session.purchase_upgrade(UpgradeKind.AUTO_OPENING)
    assert spent == 100
    assert session.state.level(UpgradeKind.AUTO_OPENING) == 1
    assert session.state.score == pytest.approx(50)


def test_purchase_insufficient_score():
    session = _session(score=0.0)
    with pytest.raises(InsufficientResourcesError) as info:
        session.purchase_upgrade(UpgradeKind.AUTO_OPENING)
    assert info.value.code == "INSUFFICIENT_SCORE"
    assert session.state.level(UpgradeKind.AUTO_OPENING) == 0


def test_purchase_shop_disabled():
    session = _session("ruthless", score=1e9)
    with pytest.raises(InvalidUpgradeError) as info:
        session.purchase_upgrade(UpgradeKind.LUCKY_DROP)
    assert info.value.code == "SHOP_DISABLED"


def test_purchase_upgrade_not_sold_in_mode():
    session = _session("dopamine", score=1e9)
    with pytest.raises(InvalidUpgradeError) as info:
        session.purchase_upgrade(UpgradeKind.AUTO_OPENING)
    assert info.value.code == "INVALID_UPGRADE"
    session.purchase_upgrade(UpgradeKind.LUCKY_DROP)
    assert session.state.level(UpgradeKind.LUCKY_DROP) == 2


def test_purchase_max_level():
    session = _session(score=1e9, upgrade_levels={UpgradeKind.MULTIDRAW: 3})
    with pytest.raises(InvalidUpgradeError) as info:
        session.purchase_upgrade(UpgradeKind.MULTIDRAW)
    assert info.value.code == "MAX_LEVEL"


# ── Rarity override / debug ──────────────────────────────────────────────────

def test_custom_rarity_needs_upgrade():
    with pytest.raises(InvalidUpgradeError) as info:
        _session().set_custom_rarity(50)
    assert info.value.code == "RARITY_LOCKED"


def test_custom_rarity_set_and_clear():
    session = _session(upgrade_levels={UpgradeKind.IMPROVED_RARITY: 1})
    session.set_custom_rarity(500)
    assert session.state.custom_rarity_percentage == 500
    session.set_custom_rarity(None)
    assert session.state.custom_rarity_percentage is None


def test_custom_rarity_debug_bypass():
    session = _session()
    session.set_custom_rarity(10_000, allow_debug=True)
    assert session.state.custom_rarity_percentage == 10_000


@pytest.mark.parametrize("bad", [-1, 10_001])
def test_custom_rarity_out_of_range(bad):
    with pytest.raises(ValidationError):
        _session().set_custom_rarity(bad, allow_debug=True)


def test_custom_rarity_non_finite():
    with pytest.raises(InvalidPercentageError):
        _session().set_custom_rarity(math.nan, allow_debug=True)


def test_debug_helpers():
    session = _session()
    session.add_score(10)
    session.add_decks(4)
    session.set_luck_level(3)
    assert session.state.score == 10
    assert session.state.decks == 14
    assert session.state.level(UpgradeKind.LUCKY_DROP) == 3
    with pytest.raises(ValidationError):
        session.add_decks(0)
    with pytest.raises(ValidationError):
        session.add_score(-5)
    with pytest.raises(ValidationError):
        session.set_luck_level(-1)


# ── Offline ──────────────────────────────────────────────────────────────────

def test_process_offline_applies_result():
    session = _session(decks=5, upgrade_levels={UpgradeKind.AUTO_OPENING: 1})
    result = session.process_offline(current_ms=1_000_000)

    assert result.draws_performed == 5
    s = session.state
    assert s.decks == 0
    assert s.score == pytest.approx(result.score_delta)
    assert s.total_decks_opened == 5
    assert sum(s.card_collection.values()) == 5
    assert s.last_session_ms == 1_000_000
    assert session.last_offline is result


def test_process_offline_with_production():
    session = _session(
        decks=5,
        upgrade_levels={UpgradeKind.AUTO_OPENING: 1, UpgradeKind.DECK_PRODUCTION: 1},
    )
    result = session.process_offline(current_ms=1_000_000)
    assert result.draws_performed == 55
    assert session.state.decks == 0


def test_process_offline_without_auto_open():
    session = _session()
    assert session.process_offline(current_ms=1_000_000) is None
    assert session.state.last_session_ms == 0


def test_process_offline_zero_draws_keeps_anchor():
    session = _session(decks=0, upgrade_levels={UpgradeKind.AUTO_OPENING: 1})
    assert session.process_offline(current_ms=1_000_000) is None
    assert session.state.last_session_ms == 0


def test_process_offline_is_reproducible():
    results = []
    for _ in range(2):
        session = _session(decks=50, upgrade_levels={UpgradeKind.AUTO_OPENING: 2})
        results.append(session.process_offline(current_ms=100_000))
    assert results[0] == results[1]


# ── Live ticks ───────────────────────────────────────────────────────────────

def test_tick_auto_opens():
    session = _session(upgrade_levels={UpgradeKind.AUTO_OPENING: 10})
    opened = session.tick(2.0)
    assert len(opened) == 2
    assert session.state.decks == 8


def test_tick_accumulates_fractions():
    session = _session(upgrade_levels={UpgradeKind.AUTO_OPENING: 1})
    assert session.tick(5.0) == []
    assert len(session.tick(6.0)) == 1


def test_tick_produces_decks():
    session = _session(decks=0, upgrade_levels={UpgradeKind.DECK_PRODUCTION: 1})
    session.tick(50.0)
    assert session.state.decks == 2


def test_tick_stops_without_decks():
    session = _session(decks=1, upgrade_levels={UpgradeKind.AUTO_OPENING: 10})
    assert len(session.tick(5.0)) == 1
    assert session.state.decks == 0


def test_tick_ignores_non_positive_dt():
    session = _session(upgrade_levels={UpgradeKind.AUTO_OPENING: 10})
    assert session.tick(0) == []
    assert session.tick(-3) == []
