"""Stacked Deck Clicker: Main Textual Application.

Wires together the game session and UI into a playable TUI game.
"""

from __future__ import annotations

import time

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.timer import Timer
from textual.widgets import Footer, Header

from deckclicker.data.balance import BALANCE
from deckclicker.data.cards import default_card_pool
from deckclicker.data.modes import DEFAULT_MODE_ID
from deckclicker.data.upgrades import ALL_UPGRADES
from deckclicker.engine.economy import format_number
from deckclicker.engine.errors import GameError
from deckclicker.engine.game_state import new_game_state
from deckclicker.engine.offline import OfflineProgressionResult
from deckclicker.engine.pool import Tier, WeightedPool
from deckclicker.engine.save import delete_game, load_game, save_game
from deckclicker.engine.session import GameSession
from deckclicker.ui.collections import CollectionsScreen
from deckclicker.ui.draw_feed import DrawFeed
from deckclicker.ui.hud import HUD
from deckclicker.ui.upgrade_panel import SHOP_ORDER, UpgradePanel


class DeckClickerApp(App):
    """The Stacked Deck Clicker TUI application."""

    TITLE = "Stacked Deck Clicker"
    SUB_TITLE = "Open. Score. Upgrade. Repeat."

    CSS = """
    #game-container { height: 1fr; }
    #hud-panel { width: 30; }
    #feed-panel { width: 1fr; }
    #upgrade-panel { width: 48; }
    """

    BINDINGS = [
        Binding("space", "open_deck", "Open Deck", show=True, priority=True),
        Binding("m", "open_many", "Multi-open", show=True),
        Binding("1", "buy_upgrade(0)", "Buy #1", show=False),
        Binding("2", "buy_upgrade(1)", "Buy #2", show=False),
        Binding("3", "buy_upgrade(2)", "Buy #3", show=False),
        Binding("4", "buy_upgrade(3)", "Buy #4", show=False),
        Binding("5", "buy_upgrade(4)", "Buy #5", show=False),
        Binding("6", "buy_upgrade(5)", "Buy #6", show=False),
        Binding("c", "show_collections", "Collection", show=True),
        Binding("q", "quit_game", "Quit", show=True),
    ]

    def __init__(
        self,
        mode_id: str | None = None,
        new_game: bool = False,
        pool: WeightedPool | None = None,
    ) -> None:
        super().__init__()
        if new_game:
            delete_game()
        saved = None if new_game else load_game()
        if saved is not None and mode_id is not None and saved.mode_id != mode_id:
            # Explicit mode request for a different mode starts over
            saved = None
        state = saved if saved is not None else new_game_state(mode_id or DEFAULT_MODE_ID)
        self._session = GameSession(state, pool if pool is not None else default_card_pool())
        self._last_tick: float = time.time()
        self._last_autosave: float = time.time()
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-container"):
            yield HUD(id="hud-panel")
            yield DrawFeed(id="feed-panel")
            yield UpgradePanel(id="upgrade-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Catch up on offline progression, then start the game loop timer."""
        offline = self._session.process_offline()
        if offline is not None:
            self._notify_offline(offline)
            save_game(self._session.state)

        interval = 1.0 / BALANCE.tick_rate_hz
        self._tick_timer = self.set_interval(interval, self._game_tick)
        self._last_tick = time.time()
        self._sync_ui()

    def _notify_offline(self, result: OfflineProgressionResult) -> None:
        hours = result.elapsed_seconds / 3600
        capped = " (capped at 7 days)" if result.was_capped else ""
        self.notify(
            f"While you were away{capped}: {hours:.1f}h, "
            f"{result.draws_performed} decks opened, +{format_number(result.score_delta)} chaos",
            severity="information",
            timeout=8,
        )

    def _game_tick(self) -> None:
        """Main game loop: called BALANCE.tick_rate_hz times per second."""
        now = time.time()
        dt = now - self._last_tick
        self._last_tick = now

        for result in self._session.tick(dt):
            self._announce(result.collectible.name, result.collectible.tier)

        if now - self._last_autosave >= BALANCE.session.auto_save_interval_s:
            save_game(self._session.state)
            self._last_autosave = now

        self._sync_ui()

    def _announce(self, name: str, tier: Tier) -> None:
        if tier == Tier.LEGENDARY:
            self.notify(f"✦ {name}!", severity="warning", timeout=4)

    def _sync_ui(self) -> None:
        """Push game state to all UI widgets."""
        state = self._session.state
        self.query_one("#hud-panel", HUD).update_from_state(state)
        self.query_one("#upgrade-panel", UpgradePanel).update_from_state(state)
        self.query_one("#feed-panel", DrawFeed).update_from_draws(self._session.recent)

    # ── Actions ──────────────────────────────────────

    def action_open_deck(self) -> None:
        """Open one Stacked Deck."""
        try:
            result = self._session.open_deck()
        except GameError as exc:
            self.notify(exc.message, severity="error", timeout=2)
            return
        self._announce(result.collectible.name, result.collectible.tier)
        self._sync_ui()

    def action_open_many(self) -> None:
        """Open the Multidraw amount of decks."""
        try:
            results = self._session.open_many()
        except GameError as exc:
            self.notify(exc.message, severity="error", timeout=2)
            return
        total = sum(r.score_delta for r in results)
        self.notify(
            f"Opened {len(results)} decks: +{format_number(total)} chaos",
            severity="information",
            timeout=2,
        )
        for result in results:
            self._announce(result.collectible.name, result.collectible.tier)
        self._sync_ui()

    def action_buy_upgrade(self, index: int) -> None:
        """Purchase the upgrade at shop position ``index`` (0-based)."""
        if index >= len(SHOP_ORDER):
            return
        kind = SHOP_ORDER[index]
        try:
            self._session.purchase_upgrade(kind)
        except GameError as exc:
            self.notify(exc.message, severity="error", timeout=1)
            return
        save_game(self._session.state)
        self.notify(f"Upgraded {ALL_UPGRADES[kind].name}!", severity="information", timeout=1)
        self._sync_ui()

    def action_show_collections(self) -> None:
        """Show the collection screen."""
        self.push_screen(CollectionsScreen(self._session.state, self._session.pool))

    def action_quit_game(self) -> None:
        """Save and quit."""
        self._session.touch()
        save_game(self._session.state)
        self.exit()
