"""Economy: upgrade costs, effect rates, and number formatting.

Rates are resolved here from upgrade levels and handed to the draw and
offline engines as plain numbers.
"""

from __future__ import annotations

from deckclicker.data.balance import BALANCE
from deckclicker.data.upgrades import ALL_UPGRADES, UpgradeKind
from deckclicker.engine.draw import DrawModifiers
from deckclicker.engine.game_state import GameState
from deckclicker.engine.offline import OfflineRates


def auto_open_rate(level: int) -> float:
    """Decks opened per second."""
    if level <= 0:
        return 0.0
    return BALANCE.economy.auto_open_rate_per_level * level


def deck_production_rate(level: int) -> float:
    """Decks produced per second."""
    if level <= 0:
        return 0.0
    return BALANCE.economy.deck_production_rate_per_level * level


def multidraw_count(level: int) -> int:
    """Decks opened by one multi-open (0 = multi-open unavailable)."""
    counts = BALANCE.economy.multidraw_counts
    if level <= 0:
        return 0
    return counts[min(level, len(counts) - 1)]


def upgrade_effect(kind: UpgradeKind, level: int) -> float:
    """Current effect magnitude of an upgrade at ``level``."""
    if level <= 0:
        return 0.0
    if kind == UpgradeKind.AUTO_OPENING:
        return auto_open_rate(level)
    if kind == UpgradeKind.IMPROVED_RARITY:
        return level * BALANCE.draw.rarity_percent_per_level
    if kind == UpgradeKind.LUCKY_DROP:
        return float(level)
    if kind == UpgradeKind.MULTIDRAW:
        return float(multidraw_count(level))
    if kind == UpgradeKind.DECK_PRODUCTION:
        return deck_production_rate(level)
    if kind == UpgradeKind.SCENE_CUSTOMIZATION:
        return float(level)
    raise ValueError(f"Unknown upgrade kind: {kind!r}")


def describe_effect(kind: UpgradeKind, level: int) -> str:
    """Human-readable effect at ``level``."""
    effect = upgrade_effect(kind, level)
    if kind == UpgradeKind.AUTO_OPENING:
        return f"{effect:.1f} decks/second"
    if kind == UpgradeKind.IMPROVED_RARITY:
        return f"+{effect:.0f}% rare card chance"
    if kind == UpgradeKind.LUCKY_DROP:
        return f"Best of {int(effect) + 1} draws"
    if kind == UpgradeKind.MULTIDRAW:
        return f"Open {int(effect)} decks at once"
    if kind == UpgradeKind.DECK_PRODUCTION:
        return f"{effect:.2f} decks/second"
    if kind == UpgradeKind.SCENE_CUSTOMIZATION:
        return f"{int(effect)} customization(s) unlocked"
    return "No effect"


def get_upgrade_cost(state: GameState, kind: UpgradeKind) -> float:
    """Cost of the next level of an upgrade."""
    udef = ALL_UPGRADES[kind]
    return udef.base_cost * (udef.cost_multiplier ** state.level(kind))


def is_maxed(state: GameState, kind: UpgradeKind) -> bool:
    udef = ALL_UPGRADES[kind]
    return udef.max_level is not None and state.level(kind) >= udef.max_level


def can_afford_upgrade(state: GameState, kind: UpgradeKind) -> bool:
    """Check if the player can afford an upgrade."""
    return state.score >= get_upgrade_cost(state, kind)


def draw_modifiers(state: GameState) -> DrawModifiers:
    """Draw modifiers from the state's upgrade levels and rarity override."""
    return DrawModifiers(
        rarity_level=state.level(UpgradeKind.IMPROVED_RARITY),
        luck_level=state.level(UpgradeKind.LUCKY_DROP),
        rarity_override=state.custom_rarity_percentage,
    )


def offline_rates(state: GameState) -> OfflineRates:
    return OfflineRates(
        auto_open_rate=auto_open_rate(state.level(UpgradeKind.AUTO_OPENING)),
        production_rate=deck_production_rate(state.level(UpgradeKind.DECK_PRODUCTION)),
    )


def format_number(n: float) -> str:
    """Format a number with two decimals and K/M/B/T/Q suffixes."""
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            return f"{n / threshold:.2f}{suffix}"

    return f"{n:.2f}"
