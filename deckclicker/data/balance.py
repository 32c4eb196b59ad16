"""Balance constants: all tuning knobs in one place.

Tweak these to adjust draw odds, offline pacing, and upgrade economy.
All upgrade costs follow: base_cost * (cost_multiplier ^ level)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DrawBalance:
    """Tuning for the weighted sampler and the draw modifiers."""

    # Rarity percentage granted per Improved Rarity level
    rarity_percent_per_level: float = 10.0

    # Pools up to this size are scanned linearly, larger ones use bisection
    linear_scan_max: int = 16

    # Upper bound for the player-set custom rarity override
    max_custom_rarity_percent: float = 10_000.0


@dataclass(frozen=True)
class OfflineBalance:
    """Tuning for offline progression."""

    # Never simulate more than a week away
    max_offline_seconds: int = 7 * 24 * 60 * 60

    # Cosmetic spacing between simulated draw timestamps
    draw_spacing_ms: int = 1000


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for upgrade effects and number formatting."""

    # Decks opened per second per Auto Opening level
    auto_open_rate_per_level: float = 0.1

    # Decks produced per second per Deck Production level
    deck_production_rate_per_level: float = 0.05

    # Multidraw: level → decks opened per multi-open
    multidraw_counts: tuple[int, ...] = (0, 10, 50, 100)

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Q"),
    )


@dataclass(frozen=True)
class TierBalance:
    """Chaos-value ceilings for each quality tier (inclusive)."""

    common_max: float = 50.0
    rare_max: float = 200.0
    epic_max: float = 1000.0


@dataclass(frozen=True)
class SessionBalance:
    """Tuning for the interactive session."""

    # Deck count used for modes with unlimited decks
    unlimited_decks: int = 999_999

    # Seconds between periodic auto-saves
    auto_save_interval_s: float = 30.0

    # Catch-up cap for live ticks (longer gaps go through offline progression)
    max_tick_catch_up_s: float = 60.0

    # Recent draws kept for the feed
    recent_draws: int = 12


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    draw: DrawBalance = field(default_factory=DrawBalance)
    offline: OfflineBalance = field(default_factory=OfflineBalance)
    economy: EconomyBalance = field(default_factory=EconomyBalance)
    tiers: TierBalance = field(default_factory=TierBalance)
    session: SessionBalance = field(default_factory=SessionBalance)

    # UI refresh ticks per second
    tick_rate_hz: float = 10.0


# Singleton, import this everywhere
BALANCE = GameBalance()

MAX_OFFLINE_SECONDS = BALANCE.offline.max_offline_seconds
