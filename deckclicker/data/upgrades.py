"""Upgrade definitions: all purchasable upgrades and their cost curves."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UpgradeKind(Enum):
    """What an upgrade modifies. The value is the key used in save files."""

    AUTO_OPENING = "auto_opening"            # Decks opened per second, online and offline
    IMPROVED_RARITY = "improved_rarity"      # +10% rarity skew per level
    LUCKY_DROP = "lucky_drop"                # +1 extra roll per level, best card kept
    MULTIDRAW = "multidraw"                  # Open 10 / 50 / 100 decks at once
    DECK_PRODUCTION = "deck_production"      # Passive deck generation
    SCENE_CUSTOMIZATION = "scene_customization"  # Cosmetic only


@dataclass(frozen=True)
class UpgradeDef:
    """Definition of a single upgrade."""

    kind: UpgradeKind
    name: str
    description: str
    base_cost: float
    # Cost grows by this factor per level owned
    cost_multiplier: float
    max_level: int | None = None


AUTO_OPENING = UpgradeDef(
    kind=UpgradeKind.AUTO_OPENING,
    name="Auto Opening",
    description="Decks open themselves. +0.1 decks/second per level, even while away.",
    base_cost=100,
    cost_multiplier=1.5,
)

IMPROVED_RARITY = UpgradeDef(
    kind=UpgradeKind.IMPROVED_RARITY,
    name="Improved Rarity",
    description="Valuable cards drop more often. +10% rarity per level.",
    base_cost=500,
    cost_multiplier=2.0,
)

LUCKY_DROP = UpgradeDef(
    kind=UpgradeKind.LUCKY_DROP,
    name="Lucky Drop",
    description="Roll one extra card per level and keep the best.",
    base_cost=250,
    cost_multiplier=1.75,
)

MULTIDRAW = UpgradeDef(
    kind=UpgradeKind.MULTIDRAW,
    name="Multidraw",
    description="Open 10, then 50, then 100 decks at once.",
    base_cost=1000,
    cost_multiplier=2.5,
    max_level=3,
)

DECK_PRODUCTION = UpgradeDef(
    kind=UpgradeKind.DECK_PRODUCTION,
    name="Deck Production",
    description="Stacked Decks trickle in. +0.05 decks/second per level.",
    base_cost=200,
    cost_multiplier=1.6,
)

SCENE_CUSTOMIZATION = UpgradeDef(
    kind=UpgradeKind.SCENE_CUSTOMIZATION,
    name="Scene Customization",
    description="Unlock a cosmetic scene customization per level.",
    base_cost=50,
    cost_multiplier=1.3,
)


ALL_UPGRADES: dict[UpgradeKind, UpgradeDef] = {
    u.kind: u
    for u in [
        AUTO_OPENING,
        IMPROVED_RARITY,
        LUCKY_DROP,
        MULTIDRAW,
        DECK_PRODUCTION,
        SCENE_CUSTOMIZATION,
    ]
}

# Save-file keys from older versions → current kind
LEGACY_KEYS: dict[str, UpgradeKind] = {
    "luck": UpgradeKind.LUCKY_DROP,
}
