"""Game session: wires state, the draw engine, and offline progression.

This is what the TUI and the web server call. It owns the live random
stream and applies every draw to the persisted state.
"""

from __future__ import annotations

import logging
import math
from collections import deque

from deckclicker.data.balance import BALANCE
from deckclicker.data.upgrades import ALL_UPGRADES, UpgradeKind
from deckclicker.engine.draw import DrawResult, draw_many, draw_one, make_results
from deckclicker.engine.economy import (
    auto_open_rate,
    deck_production_rate,
    draw_modifiers,
    get_upgrade_cost,
    is_maxed,
    multidraw_count,
    offline_rates,
)
from deckclicker.engine.errors import (
    ERROR_MESSAGES,
    InsufficientResourcesError,
    InvalidPercentageError,
    InvalidUpgradeError,
    ValidationError,
)
from deckclicker.engine.game_state import GameState, now_ms
from deckclicker.engine.offline import OfflineProgressionResult, calculate
from deckclicker.engine.pool import WeightedPool
from deckclicker.engine.rng import DrawStream

logger = logging.getLogger(__name__)


class GameSession:
    """One player's live game."""

    def __init__(
        self,
        state: GameState,
        pool: WeightedPool,
        stream: DrawStream | None = None,
    ) -> None:
        self.state = state
        self.pool = pool
        self._stream = stream if stream is not None else DrawStream.seed(None)
        self._auto_open_progress = 0.0
        self._production_progress = 0.0
        self.recent: deque[DrawResult] = deque(maxlen=BALANCE.session.recent_draws)
        self.last_offline: OfflineProgressionResult | None = None

    # ── Drawing ──────────────────────────────────────

    def _apply(self, result: DrawResult) -> None:
        s = self.state
        s.score += result.score_delta
        s.total_score_earned += result.score_delta
        s.total_decks_opened += 1
        if not s.unlimited_decks:
            s.decks -= 1
        s.record_card(result.collectible.name)
        self.recent.append(result)

    def open_deck(self, at_ms: float | None = None) -> DrawResult:
        """Open one deck. Raises InsufficientResourcesError with no decks left."""
        if not self.state.unlimited_decks and self.state.decks <= 0:
            raise InsufficientResourcesError(ERROR_MESSAGES["NO_DECKS"], "NO_DECKS")

        stamp = at_ms if at_ms is not None else now_ms()
        card = draw_one(self.pool, draw_modifiers(self.state), self._stream)
        result = DrawResult(collectible=card, timestamp_ms=stamp, score_delta=card.value)
        self._apply(result)
        self.touch(stamp)
        logger.debug("Drew %s (+%s)", card.name, card.value)
        return result

    def open_many(self, count: int | None = None, at_ms: float | None = None) -> list[DrawResult]:
        """Open ``count`` decks at once (default: the Multidraw amount)."""
        if count is None:
            count = multidraw_count(self.state.level(UpgradeKind.MULTIDRAW))
            if count <= 0:
                raise InvalidUpgradeError("Multidraw has not been purchased", "MULTIDRAW_LOCKED")
        if count <= 0:
            raise ValidationError(f"Count must be positive, got {count}")
        if not self.state.unlimited_decks and self.state.decks < count:
            raise InsufficientResourcesError(
                f"Not enough decks. Need {count}, have {self.state.decks}",
                "INSUFFICIENT_DECKS",
            )

        stamp = at_ms if at_ms is not None else now_ms()
        cards = draw_many(count, self.pool, draw_modifiers(self.state), self._stream)
        results = make_results(cards, stamp)
        for result in results:
            self._apply(result)
        self.touch(stamp)
        return results

    # ── Offline progression ──────────────────────────

    def process_offline(self, current_ms: float | None = None) -> OfflineProgressionResult | None:
        """Apply everything auto-opening did since the last session.

        Returns None when nothing was opened; the anchor is then left alone
        so the time keeps counting toward the next check.
        """
        current = current_ms if current_ms is not None else now_ms()
        s = self.state
        result = calculate(
            anchor_ms=s.last_session_ms,
            now_ms=current,
            available_resources=s.decks,
            rates=offline_rates(s),
            pool=self.pool,
            modifiers=draw_modifiers(s),
        )
        if result is None or result.draws_performed == 0:
            return None

        for draw in result.draws:
            s.record_card(draw.collectible.name)
        s.score += result.score_delta
        s.total_score_earned += result.score_delta
        s.total_decks_opened += result.draws_performed
        if not s.unlimited_decks:
            s.decks = s.decks - result.draws_performed + result.resources_produced
        s.last_session_ms = current
        self.recent.extend(result.draws)
        self.last_offline = result

        logger.info(
            "Applied offline progression: %d decks opened, +%.2f score",
            result.draws_performed,
            result.score_delta,
        )
        return result

    # ── Live ticking ─────────────────────────────────

    def tick(self, dt: float, at_ms: float | None = None) -> list[DrawResult]:
        """Advance live deck production and auto-opening by ``dt`` seconds."""
        if dt <= 0:
            return []
        dt = min(dt, BALANCE.session.max_tick_catch_up_s)
        s = self.state

        production = deck_production_rate(s.level(UpgradeKind.DECK_PRODUCTION))
        if production > 0 and not s.unlimited_decks:
            self._production_progress += dt * production
            produced = math.floor(self._production_progress)
            if produced:
                s.decks += produced
                self._production_progress -= produced

        rate = auto_open_rate(s.level(UpgradeKind.AUTO_OPENING))
        if rate <= 0:
            return []
        self._auto_open_progress += dt * rate
        due = math.floor(self._auto_open_progress)
        if not due:
            return []
        self._auto_open_progress -= due

        opened: list[DrawResult] = []
        for _ in range(due):
            if not s.unlimited_decks and s.decks <= 0:
                # Nothing to open; do not bank progress while starved
                self._auto_open_progress = 0.0
                break
            opened.append(self.open_deck(at_ms))
        return opened

    # ── Upgrades ─────────────────────────────────────

    def purchase_upgrade(self, kind: UpgradeKind) -> float:
        """Buy the next level of ``kind``. Returns the score spent."""
        mode = self.state.mode
        if not mode.shop_enabled:
            raise InvalidUpgradeError(ERROR_MESSAGES["SHOP_DISABLED"], "SHOP_DISABLED")
        if kind not in mode.allowed_upgrades:
            raise InvalidUpgradeError(ERROR_MESSAGES["INVALID_UPGRADE"])
        if is_maxed(self.state, kind):
            raise InvalidUpgradeError(f"{ALL_UPGRADES[kind].name} is at max level", "MAX_LEVEL")

        cost = get_upgrade_cost(self.state, kind)
        if self.state.score < cost:
            raise InsufficientResourcesError(
                ERROR_MESSAGES["INSUFFICIENT_SCORE"], "INSUFFICIENT_SCORE"
            )

        self.state.score -= cost
        self.state.upgrade_levels[kind] = self.state.level(kind) + 1
        self.touch()
        logger.info("Purchased %s level %d for %.2f", kind.value, self.state.level(kind), cost)
        return cost

    def set_custom_rarity(self, percentage: float | None, allow_debug: bool = False) -> None:
        """Set (or clear, with None) the rarity percentage override."""
        if not allow_debug and self.state.level(UpgradeKind.IMPROVED_RARITY) == 0:
            raise InvalidUpgradeError(
                "Improved Rarity upgrade must be purchased first", "RARITY_LOCKED"
            )
        if percentage is not None:
            if not math.isfinite(percentage):
                raise InvalidPercentageError(f"Rarity percentage must be finite, got {percentage!r}")
            limit = BALANCE.draw.max_custom_rarity_percent
            if percentage < 0 or percentage > limit:
                raise ValidationError(f"Rarity percentage must be between 0 and {limit:,.0f}")
        self.state.custom_rarity_percentage = percentage
        self.touch()

    def set_luck_level(self, level: int) -> None:
        """Set the Lucky Drop level directly (debug)."""
        if level < 0:
            raise ValidationError("Lucky drop level must be 0 or higher")
        self.state.upgrade_levels[UpgradeKind.LUCKY_DROP] = level
        self.touch()

    # ── Debug helpers ────────────────────────────────

    def add_score(self, amount: float) -> None:
        if amount <= 0:
            raise ValidationError("Amount must be positive")
        self.state.score += amount
        self.touch()

    def add_decks(self, count: int) -> None:
        if count <= 0:
            raise ValidationError("Count must be positive")
        self.state.decks += count
        self.touch()

    def touch(self, at_ms: float | None = None) -> None:
        """Move the session anchor to ``at_ms`` (default: now)."""
        self.state.last_session_ms = at_ms if at_ms is not None else now_ms()
