"""Stacked Deck Clicker Web: Flask server that wraps the game engine.

Exposes a JSON API for game actions. Live ticks are driven lazily: each
API request catches up on elapsed time before returning the current state.
"""

from __future__ import annotations

import logging
import threading
import time

from flask import Flask, jsonify, request

from deckclicker.data.balance import BALANCE
from deckclicker.data.cards import default_card_pool
from deckclicker.data.modes import DEFAULT_MODE_ID
from deckclicker.data.upgrades import ALL_UPGRADES, UpgradeKind
from deckclicker.engine.draw import DrawResult
from deckclicker.engine.economy import describe_effect, format_number, get_upgrade_cost, is_maxed
from deckclicker.engine.errors import GameError, InvalidUpgradeError, ValidationError
from deckclicker.engine.game_state import new_game_state
from deckclicker.engine.offline import OfflineProgressionResult
from deckclicker.engine.pool import WeightedPool
from deckclicker.engine.save import load_game, save_game, write_save
from deckclicker.engine.session import GameSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)

# ---------------------------------------------------------------------------
# In-memory game session (single-player)
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_session: GameSession | None = None
# Card pool for new sessions (None = the bundled pool)
_pool: WeightedPool | None = None
_last_tick: float = 0.0
_last_autosave: float = 0.0


def _ensure_game() -> GameSession:
    """Initialise the game if not yet started."""
    global _session, _last_tick, _last_autosave
    if _session is not None:
        return _session
    saved = load_game()
    state = saved if saved is not None else new_game_state(DEFAULT_MODE_ID)
    _session = GameSession(state, _pool if _pool is not None else default_card_pool())
    offline = _session.process_offline()
    if offline is not None:
        save_game(_session.state)
    _last_tick = time.time()
    _last_autosave = time.time()
    return _session


def _do_ticks(session: GameSession) -> None:
    """Catch up live ticks since the last call."""
    global _last_tick, _last_autosave
    now = time.time()
    dt = now - _last_tick
    if dt <= 0:
        return
    _last_tick = now
    session.tick(dt)

    if now - _last_autosave >= BALANCE.session.auto_save_interval_s:
        save_game(session.state)
        _last_autosave = now


def _draw_json(result: DrawResult) -> dict:
    card = result.collectible
    return {
        "name": card.name,
        "value": card.value,
        "tier": card.tier.value,
        "timestamp_ms": result.timestamp_ms,
        "score_delta": result.score_delta,
    }


def _offline_json(result: OfflineProgressionResult | None) -> dict | None:
    if result is None:
        return None
    return {
        "elapsed_seconds": result.elapsed_seconds,
        "draws_performed": result.draws_performed,
        "score_delta": result.score_delta,
        "was_capped": result.was_capped,
        "resources_produced": result.resources_produced,
    }


def _state_json(session: GameSession) -> dict:
    """Build the JSON blob sent to the frontend."""
    s = session.state
    shop = []
    if s.mode.shop_enabled:
        for kind in s.mode.allowed_upgrades:
            udef = ALL_UPGRADES[kind]
            level = s.level(kind)
            cost = get_upgrade_cost(s, kind)
            shop.append({
                "kind": kind.value,
                "name": udef.name,
                "description": udef.description,
                "level": level,
                "effect": describe_effect(kind, level),
                "cost": format_number(cost),
                "cost_raw": cost,
                "can_afford": s.score >= cost,
                "maxed": is_maxed(s, kind),
            })

    return {
        "mode": s.mode.id,
        "score": format_number(s.score),
        "score_raw": s.score,
        "decks": None if s.unlimited_decks else s.decks,
        "custom_rarity_percentage": s.custom_rarity_percentage,
        "upgrade_levels": {kind.value: level for kind, level in s.upgrade_levels.items()},
        "shop": shop,
        "recent": [_draw_json(d) for d in session.recent],
        "collection": dict(s.card_collection),
        "last_offline": _offline_json(session.last_offline),
        "stats": {
            "total_decks_opened": s.total_decks_opened,
            "total_score_earned": format_number(s.total_score_earned),
        },
    }


@app.errorhandler(GameError)
def handle_game_error(exc: GameError):
    logger.info("Rejected request: %s (%s)", exc.message, exc.code)
    return jsonify(exc.to_dict()), 400


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/state")
def api_state():
    with _lock:
        session = _ensure_game()
        _do_ticks(session)
        return jsonify(_state_json(session))


@app.route("/api/action/open", methods=["POST"])
def action_open():
    with _lock:
        session = _ensure_game()
        _do_ticks(session)
        result = session.open_deck()
        data = _state_json(session)
        data["draw"] = _draw_json(result)
        return jsonify(data)


@app.route("/api/action/open_many", methods=["POST"])
def action_open_many():
    with _lock:
        session = _ensure_game()
        _do_ticks(session)
        body = request.get_json(silent=True) or {}
        count = body.get("count")
        if count is not None and (not isinstance(count, int) or isinstance(count, bool)):
            raise ValidationError("count must be an integer")
        results = session.open_many(count)
        data = _state_json(session)
        data["draws"] = [_draw_json(r) for r in results]
        return jsonify(data)


@app.route("/api/action/buy/<kind>", methods=["POST"])
def action_buy(kind: str):
    with _lock:
        session = _ensure_game()
        _do_ticks(session)
        try:
            upgrade = UpgradeKind(kind)
        except ValueError:
            raise InvalidUpgradeError(f"Unknown upgrade {kind!r}") from None
        spent = session.purchase_upgrade(upgrade)
        save_game(session.state)
        data = _state_json(session)
        data["spent"] = spent
        return jsonify(data)


@app.route("/api/action/rarity", methods=["POST"])
def action_rarity():
    with _lock:
        session = _ensure_game()
        body = request.get_json(silent=True) or {}
        percentage = body.get("percentage")
        if percentage is not None and (
            not isinstance(percentage, (int, float)) or isinstance(percentage, bool)
        ):
            raise ValidationError("percentage must be a number")
        session.set_custom_rarity(
            float(percentage) if percentage is not None else None,
            allow_debug=bool(body.get("debug", False)),
        )
        return jsonify(_state_json(session))


@app.route("/api/action/save", methods=["POST"])
def action_save():
    with _lock:
        session = _ensure_game()
        session.touch()
        write_save(session.state)
        return jsonify({"saved": True})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def use_card_pool(pool: WeightedPool | None) -> None:
    """Draw from ``pool`` in sessions started after this call."""
    global _pool
    _pool = pool


def run_server(
    host: str = "127.0.0.1",
    port: int = 5000,
    debug: bool = False,
    pool: WeightedPool | None = None,
) -> None:
    """Start the Flask development server."""
    use_card_pool(pool)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
