"""Draw feed: the most recent cards, colored by tier."""

from __future__ import annotations

from collections.abc import Iterable

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from deckclicker.engine.draw import DrawResult
from deckclicker.engine.economy import format_number
from deckclicker.engine.pool import Tier

TIER_STYLES: dict[Tier, str] = {
    Tier.COMMON: "white",
    Tier.RARE: "bold cyan",
    Tier.EPIC: "bold magenta",
    Tier.LEGENDARY: "bold bright_yellow",
}


class DrawFeed(Widget):
    """Newest draw first."""

    DEFAULT_CSS = """
    DrawFeed {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    feed_key: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._draws: list[DrawResult] = []

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Opened ═══\n\n", style="bold yellow")
        if not self._draws:
            text.append("  Press [Space] to open a Stacked Deck.\n", style="dim italic")
            return text

        for draw in self._draws:
            card = draw.collectible
            text.append(f"  {card.name}", style=TIER_STYLES[card.tier])
            text.append(f"  +{format_number(draw.score_delta)}\n", style="dim")
        return text

    def update_from_draws(self, draws: Iterable[DrawResult]) -> None:
        self._draws = list(reversed(list(draws)))
        self.feed_key = "|".join(f"{d.collectible.name}:{d.timestamp_ms}" for d in self._draws)
