"""Collections UI: every card in the pool, drawn or not."""

from __future__ import annotations

from rich.text import Text
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from deckclicker.engine.economy import format_number
from deckclicker.engine.game_state import GameState
from deckclicker.engine.pool import WeightedPool
from deckclicker.ui.draw_feed import TIER_STYLES


class CollectionsScreen(Screen):
    """Screen showing how many of each card the player has drawn."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("q", "back", "Back"),
    ]

    DEFAULT_CSS = """
    CollectionsScreen {
        background: $surface;
    }

    #collections-container {
        padding: 2;
        height: 100%;
        overflow-y: auto;
    }
    """

    def __init__(self, state: GameState, pool: WeightedPool, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state = state
        self._pool = pool

    def action_back(self) -> None:
        """Return to the game."""
        self.app.pop_screen()

    def compose(self):
        yield Header()
        with Vertical(id="collections-container"):
            yield Static(self._render_cards())
        yield Footer()

    def _render_cards(self) -> Text:
        text = Text()
        collection = self._state.card_collection
        found = sum(1 for card in self._pool.items if collection.get(card.name))
        text.append(
            f"\n  ═══ Divination Cards ({found}/{len(self._pool)}) ═══\n\n",
            style="bold magenta",
        )

        by_value = sorted(self._pool.items, key=lambda c: c.value, reverse=True)
        for card in by_value:
            count = collection.get(card.name, 0)
            if count:
                text.append(f"  ✦ {card.name}", style=TIER_STYLES[card.tier])
                text.append(f"  ×{count}  ({format_number(card.value)} chaos)\n", style="dim")
            else:
                text.append("  ▪ ???\n", style="dim")
        return text
