"""Game state: single source of truth for the persisted game."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from deckclicker.data.balance import BALANCE
from deckclicker.data.modes import ALL_MODES, DEFAULT_MODE_ID, GameModeDef
from deckclicker.data.upgrades import UpgradeKind


def now_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000


@dataclass
class GameState:
    """Complete mutable state for one game."""

    # ── Core resources ───────────────────────────────────
    score: float = 0.0
    decks: int = 10

    # ── Session anchor (offline progression seed) ────────
    last_session_ms: float = field(default_factory=now_ms)

    # ── Mode ─────────────────────────────────────────────
    mode_id: str = DEFAULT_MODE_ID

    # ── Upgrades: kind → current level ───────────────────
    upgrade_levels: dict[UpgradeKind, int] = field(default_factory=dict)

    # Player-set rarity percentage (None = derive from Improved Rarity level)
    custom_rarity_percentage: float | None = None

    # ── Collection: card name → times drawn ──────────────
    card_collection: dict[str, int] = field(default_factory=dict)

    # ── Lifetime stats ───────────────────────────────────
    total_decks_opened: int = 0
    total_score_earned: float = 0.0

    @property
    def mode(self) -> GameModeDef:
        return ALL_MODES.get(self.mode_id, ALL_MODES[DEFAULT_MODE_ID])

    @property
    def unlimited_decks(self) -> bool:
        return self.mode.unlimited_decks

    def level(self, kind: UpgradeKind) -> int:
        return self.upgrade_levels.get(kind, 0)

    def record_card(self, name: str) -> None:
        self.card_collection[name] = self.card_collection.get(name, 0) + 1


def new_game_state(mode_id: str = DEFAULT_MODE_ID, started_ms: float | None = None) -> GameState:
    """Create a fresh state with the starting conditions of ``mode_id``."""
    mode = ALL_MODES[mode_id]
    decks = BALANCE.session.unlimited_decks if mode.unlimited_decks else mode.starting_decks
    return GameState(
        score=float(mode.starting_score),
        decks=decks,
        last_session_ms=started_ms if started_ms is not None else now_ms(),
        mode_id=mode.id,
        upgrade_levels={kind: level for kind, level in mode.initial_upgrade_levels.items()},
        custom_rarity_percentage=mode.custom_rarity_percentage,
    )
