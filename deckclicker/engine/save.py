"""Game save/load: persists the game to disk between sessions."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from deckclicker.data.balance import BALANCE
from deckclicker.data.modes import ALL_MODES, DEFAULT_MODE_ID
from deckclicker.data.upgrades import LEGACY_KEYS, UpgradeKind
from deckclicker.engine.errors import ERROR_MESSAGES, StorageError
from deckclicker.engine.game_state import GameState, now_ms

logger = logging.getLogger(__name__)

SAVE_DIR = Path.home() / ".deckclicker"
SAVE_FILE = SAVE_DIR / "save.json"


class InvalidSaveError(ValueError):
    """Saved data is structurally unusable."""


def set_save_dir(path: Path) -> None:
    """Point saving and loading at ``path`` instead of ``~/.deckclicker``."""
    global SAVE_DIR, SAVE_FILE
    SAVE_DIR = Path(path).expanduser()
    SAVE_FILE = SAVE_DIR / "save.json"


# ── Serialisation helpers ────────────────────────────────────────


def _state_to_dict(state: GameState) -> dict:
    s = state
    return {
        "score": s.score,
        "decks": s.decks,
        "last_session_ms": s.last_session_ms,
        "mode_id": s.mode_id,
        "upgrade_levels": {kind.value: level for kind, level in s.upgrade_levels.items()},
        "custom_rarity_percentage": s.custom_rarity_percentage,
        "card_collection": dict(s.card_collection),
        "total_decks_opened": s.total_decks_opened,
        "total_score_earned": s.total_score_earned,
    }


def migrate_upgrade_keys(raw: dict) -> dict:
    """Rename legacy upgrade keys (``luck`` → ``lucky_drop``). Idempotent."""
    migrated = dict(raw)
    for old_key, kind in LEGACY_KEYS.items():
        if old_key in migrated:
            level = migrated.pop(old_key)
            migrated.setdefault(kind.value, level)
            logger.info("Migrated legacy upgrade %r to %r", old_key, kind.value)
    return migrated


def _parse_levels(raw: dict) -> dict[UpgradeKind, int]:
    levels: dict[UpgradeKind, int] = {}
    for key, level in migrate_upgrade_keys(raw).items():
        try:
            kind = UpgradeKind(key)
        except ValueError:
            logger.warning("Dropping unknown upgrade %r from save", key)
            continue
        if not isinstance(level, int) or isinstance(level, bool) or level < 0:
            raise InvalidSaveError(f"Invalid level {level!r} for upgrade {key!r}")
        levels[kind] = level
    return levels


def _dict_to_state(d: dict) -> GameState:
    score = d.get("score", 0.0)
    decks = d.get("decks", 0)
    last_session_ms = d.get("last_session_ms", now_ms())

    if not isinstance(score, (int, float)) or not math.isfinite(score) or score < 0:
        raise InvalidSaveError(f"Invalid score {score!r}")
    if not isinstance(decks, int) or isinstance(decks, bool) or decks < 0:
        raise InvalidSaveError(f"Invalid deck count {decks!r}")
    if (
        not isinstance(last_session_ms, (int, float))
        or isinstance(last_session_ms, bool)
        or not math.isfinite(last_session_ms)
        or last_session_ms < 0
    ):
        raise InvalidSaveError(f"Invalid session timestamp {last_session_ms!r}")

    rarity = d.get("custom_rarity_percentage")
    if rarity is not None and (
        not isinstance(rarity, (int, float))
        or isinstance(rarity, bool)
        or not math.isfinite(rarity)
        or not 0 <= rarity <= BALANCE.draw.max_custom_rarity_percent
    ):
        raise InvalidSaveError(f"Invalid custom rarity percentage {rarity!r}")

    mode_id = d.get("mode_id", DEFAULT_MODE_ID)
    if mode_id not in ALL_MODES:
        logger.warning("Unknown mode %r in save, using %r", mode_id, DEFAULT_MODE_ID)
        mode_id = DEFAULT_MODE_ID

    return GameState(
        score=float(score),
        decks=decks,
        last_session_ms=float(last_session_ms),
        mode_id=mode_id,
        upgrade_levels=_parse_levels(d.get("upgrade_levels", {})),
        custom_rarity_percentage=float(rarity) if rarity is not None else None,
        card_collection={str(k): int(v) for k, v in d.get("card_collection", {}).items()},
        total_decks_opened=d.get("total_decks_opened", 0),
        total_score_earned=d.get("total_score_earned", 0.0),
    )


# ── Public API ───────────────────────────────────────────────────


def write_save(state: GameState) -> None:
    """Persist the game to disk, raising StorageError if the write fails."""
    try:
        SAVE_DIR.mkdir(parents=True, exist_ok=True)
        SAVE_FILE.write_text(json.dumps(_state_to_dict(state), indent=2))
    except OSError as exc:
        raise StorageError(ERROR_MESSAGES["STORAGE_UNAVAILABLE"]) from exc


def save_game(state: GameState) -> bool:
    """Persist the game to disk. Returns False if the write failed."""
    try:
        write_save(state)
    except StorageError:
        # Non-fatal, play continues in memory
        logger.exception("Failed to save game to %s", SAVE_FILE)
        return False
    return True


def load_game() -> GameState | None:
    """Load a saved game from disk. Returns None if no usable save exists."""
    if not SAVE_FILE.exists():
        return None
    try:
        data = json.loads(SAVE_FILE.read_text())
        return _dict_to_state(data)
    except (OSError, ValueError, AttributeError, TypeError):
        logger.warning("Corrupt save at %s, starting fresh", SAVE_FILE, exc_info=True)
        return None


def delete_game() -> None:
    """Remove the save file (call when starting a new game)."""
    try:
        SAVE_FILE.unlink(missing_ok=True)
    except OSError:
        logger.exception("Failed to delete %s", SAVE_FILE)
