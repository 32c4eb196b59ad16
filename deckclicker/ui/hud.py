"""HUD widget: score, decks, rates, and lifetime stats."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from deckclicker.data.upgrades import UpgradeKind
from deckclicker.engine.economy import (
    auto_open_rate,
    describe_effect,
    deck_production_rate,
    format_number,
    multidraw_count,
)
from deckclicker.engine.game_state import GameState


class HUD(Widget):
    """Heads-up display showing core game stats."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    score: reactive[str] = reactive("0.00")
    decks: reactive[str] = reactive("0")
    mode_name: reactive[str] = reactive("")
    auto_rate: reactive[float] = reactive(0.0)
    production_rate: reactive[float] = reactive(0.0)
    multidraw: reactive[int] = reactive(0)
    rarity: reactive[str] = reactive("")
    opened: reactive[int] = reactive(0)
    earned: reactive[str] = reactive("0.00")

    def render(self) -> Text:
        text = Text()
        text.append(f"  === {self.mode_name} ===\n\n", style="bold cyan")

        text.append("  Chaos: ", style="dim")
        text.append(f"{self.score}\n", style="bold yellow")

        text.append("  Stacked Decks: ", style="dim")
        text.append(f"{self.decks}\n\n", style="bold green")

        if self.auto_rate > 0:
            text.append("  Auto Opening: ", style="dim")
            text.append(f"{self.auto_rate:.1f}/s\n", style="green")
        if self.production_rate > 0:
            text.append("  Deck Production: ", style="dim")
            text.append(f"{self.production_rate:.2f}/s\n", style="green")
        if self.multidraw > 0:
            text.append("  Multidraw: ", style="dim")
            text.append(f"[M] opens {self.multidraw}\n", style="magenta")
        if self.rarity:
            text.append("  Rarity: ", style="dim")
            text.append(f"{self.rarity}\n", style="magenta")

        text.append("\n  ─── Lifetime ───\n", style="bold")
        text.append(f"  Decks opened: {self.opened}\n", style="dim")
        text.append(f"  Chaos earned: {self.earned}\n", style="dim")
        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync reactive attributes with game state."""
        self.score = format_number(state.score)
        self.decks = "∞" if state.unlimited_decks else str(state.decks)
        self.mode_name = state.mode.name
        self.auto_rate = auto_open_rate(state.level(UpgradeKind.AUTO_OPENING))
        self.production_rate = deck_production_rate(state.level(UpgradeKind.DECK_PRODUCTION))
        self.multidraw = multidraw_count(state.level(UpgradeKind.MULTIDRAW))
        if state.custom_rarity_percentage is not None:
            self.rarity = f"{state.custom_rarity_percentage:.0f}% (custom)"
        elif state.level(UpgradeKind.IMPROVED_RARITY) > 0:
            self.rarity = describe_effect(UpgradeKind.IMPROVED_RARITY, state.level(UpgradeKind.IMPROVED_RARITY))
        else:
            self.rarity = ""
        self.opened = state.total_decks_opened
        self.earned = format_number(state.total_score_earned)
