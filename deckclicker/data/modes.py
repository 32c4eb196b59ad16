"""Game mode definitions: starting conditions chosen when a game begins."""

from __future__ import annotations

from dataclasses import dataclass, field

from deckclicker.data.upgrades import UpgradeKind


@dataclass(frozen=True)
class GameModeDef:
    """Definition of a single game mode."""

    id: str
    name: str
    description: str
    # None = unlimited decks, opening never consumes them
    starting_decks: int | None
    starting_score: float
    shop_enabled: bool
    allowed_upgrades: tuple[UpgradeKind, ...] = ()
    # Upgrade levels granted for free at game start
    initial_upgrade_levels: dict[UpgradeKind, int] = field(default_factory=dict)
    # Base rarity percentage override (None = derive from upgrade level)
    custom_rarity_percentage: float | None = None

    @property
    def unlimited_decks(self) -> bool:
        return self.starting_decks is None


CLASSIC = GameModeDef(
    id="classic",
    name="Classic",
    description="Unlimited Stacked Decks, no shop, no upgrades.",
    starting_decks=None,
    starting_score=0,
    shop_enabled=False,
)

RUTHLESS = GameModeDef(
    id="ruthless",
    name="Ruthless",
    description="Limited Stacked Decks, low starting chaos, no shop, no upgrades.",
    starting_decks=5,
    starting_score=25,
    shop_enabled=False,
)

DOPAMINE = GameModeDef(
    id="dopamine",
    name="Give me my Dopamine",
    description=(
        "High starting resources, increased rarity, Lucky Drop Lv1. "
        "Only Rarity and Luck upgrades are sold."
    ),
    starting_decks=75,
    starting_score=750,
    shop_enabled=True,
    allowed_upgrades=(UpgradeKind.IMPROVED_RARITY, UpgradeKind.LUCKY_DROP),
    initial_upgrade_levels={UpgradeKind.LUCKY_DROP: 1},
    custom_rarity_percentage=25,
)

STACKED_DECK_CLICKER = GameModeDef(
    id="stacked-deck-clicker",
    name="Stacked Deck Clicker",
    description="Limited decks, no starting chaos, full shop.",
    starting_decks=10,
    starting_score=0,
    shop_enabled=True,
    allowed_upgrades=tuple(UpgradeKind),
)


ALL_MODES: dict[str, GameModeDef] = {
    m.id: m for m in [CLASSIC, RUTHLESS, DOPAMINE, STACKED_DECK_CLICKER]
}

DEFAULT_MODE_ID = STACKED_DECK_CLICKER.id
