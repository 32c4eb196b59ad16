"""Upgrade panel: the shop, with cost and affordability per upgrade."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from deckclicker.data.upgrades import ALL_UPGRADES, UpgradeKind
from deckclicker.engine.economy import describe_effect, format_number, get_upgrade_cost, is_maxed
from deckclicker.engine.game_state import GameState

# Number key → upgrade, in shop order
SHOP_ORDER: tuple[UpgradeKind, ...] = tuple(UpgradeKind)


class UpgradePanel(Widget):
    """Displays every upgrade the mode sells."""

    DEFAULT_CSS = """
    UpgradePanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    # Serialized shop data for reactivity
    shop_text: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state: GameState | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Shop ═══\n\n", style="bold magenta")

        if self._state is None:
            return text
        mode = self._state.mode
        if not mode.shop_enabled:
            text.append(f"  No shop in {mode.name} mode.\n", style="dim italic")
            return text

        for i, kind in enumerate(SHOP_ORDER):
            if kind not in mode.allowed_upgrades:
                continue
            udef = ALL_UPGRADES[kind]
            level = self._state.level(kind)
            maxed = is_maxed(self._state, kind)
            cost = get_upgrade_cost(self._state, kind)
            affordable = self._state.score >= cost

            text.append(f"  [{i + 1}] ", style="bold")
            if maxed:
                text.append(f"{udef.name} ", style="dim")
                text.append("MAX\n", style="bold green")
            else:
                name_style = "bold green" if affordable else "bold red"
                text.append(f"{udef.name} ", style=name_style)
                text.append(f"Lv.{level}\n", style="dim")

            text.append(f"      {udef.description}\n", style="dim italic")
            if level > 0:
                text.append(f"      Now: {describe_effect(kind, level)}\n", style="cyan")
            if not maxed:
                cost_style = "green" if affordable else "red"
                text.append(f"      Cost: {format_number(cost)} chaos\n", style=cost_style)
            text.append("\n")

        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync panel with game state."""
        self._state = state
        # Trigger re-render via reactive
        self.shop_text = "|".join(
            f"{kind.value}:{state.level(kind)}" for kind in SHOP_ORDER
        ) + f"|s:{state.score:.2f}"
