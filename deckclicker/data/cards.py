"""Card data: the bundled divination card pool and the JSON loader.

Weights are drop weights (relative, higher = more common). Values are chaos
prices and become the score a card is worth.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from deckclicker.data.balance import BALANCE
from deckclicker.engine.errors import EmptyPoolError
from deckclicker.engine.pool import Collectible, Tier, WeightedPool, build_pool

logger = logging.getLogger(__name__)


def tier_for_value(value: float) -> Tier:
    """Quality tier from chaos value."""
    tiers = BALANCE.tiers
    if value <= tiers.common_max:
        return Tier.COMMON
    if value <= tiers.rare_max:
        return Tier.RARE
    if value <= tiers.epic_max:
        return Tier.EPIC
    return Tier.LEGENDARY


# (name, drop weight, chaos value)
DEFAULT_CARDS: tuple[tuple[str, float, float], ...] = (
    ("Rain of Chaos", 121_400, 0.5),
    ("The Lover", 59_900, 0.5),
    ("Her Mask", 54_300, 0.5),
    ("The Gambler", 49_200, 0.5),
    ("Emperor's Luck", 38_200, 1),
    ("Loyalty", 31_700, 0.5),
    ("Destined to Crumble", 30_100, 0.5),
    ("The Carrion Crow", 28_600, 0.5),
    ("Lantador's Lost Love", 26_100, 0.5),
    ("The Hermit", 24_400, 1),
    ("Boon of Justice", 21_900, 2),
    ("Three Faces in the Dark", 19_800, 1),
    ("The Catalyst", 18_200, 3),
    ("The Inventor", 9_800, 8),
    ("Chaotic Disposition", 6_100, 12),
    ("Lucky Connections", 5_400, 10),
    ("The Union", 4_700, 6),
    ("The Wrath", 3_900, 9),
    ("Vinia's Token", 2_900, 15),
    ("The Sephirot", 1_150, 35),
    ("Abandoned Wealth", 640, 48),
    ("The Sacrifice", 520, 60),
    ("The Enlightened", 310, 90),
    ("The Saint's Treasure", 240, 75),
    ("The Cartographer", 190, 120),
    ("Seven Years Bad Luck", 120, 180),
    ("The Immortal", 48, 420),
    ("Unrequited Love", 40, 320),
    ("The Nurse", 32, 650),
    ("House of Mirrors", 6, 6_500),
    ("The Apothecary", 5, 4_800),
    ("The Doctor", 4, 1_300),
)


def make_card(name: str, weight: float, value: float) -> Collectible:
    return Collectible(name=name, weight=weight, value=value, tier=tier_for_value(value))


def default_card_pool() -> WeightedPool:
    """The bundled pool."""
    return build_pool(make_card(*row) for row in DEFAULT_CARDS)


def load_card_pool(cards_path: Path, values_path: Path) -> WeightedPool:
    """Build a pool from a card-details file and a card-prices file.

    ``cards_path`` holds ``[{"name", "detailsId", "dropWeight"}]`` and
    ``values_path`` holds ``[{"detailsId", "chaosValue"}]``. Cards without a
    positive drop weight are skipped; cards without a price are worth 0.

    Raises:
        EmptyPoolError: no usable card in the file.
        OSError / json.JSONDecodeError: unreadable files.
    """
    cards_data = json.loads(Path(cards_path).read_text(encoding="utf-8"))
    values_data = json.loads(Path(values_path).read_text(encoding="utf-8"))

    prices = {entry["detailsId"]: float(entry.get("chaosValue", 0.0)) for entry in values_data}

    cards: list[Collectible] = []
    skipped = 0
    for entry in cards_data:
        weight = entry.get("dropWeight") or 0
        if weight <= 0:
            skipped += 1
            continue
        value = prices.get(entry.get("detailsId"), 0.0)
        cards.append(make_card(entry["name"], float(weight), value))

    if not cards:
        raise EmptyPoolError(f"No valid cards found in {cards_path}")
    if skipped:
        logger.info("Skipped %d cards without a drop weight", skipped)

    logger.info("Loaded %d cards from %s", len(cards), cards_path)
    return build_pool(cards)


def resolve_card_pool(cards_path: Path | None = None, values_path: Path | None = None) -> WeightedPool:
    """The pool from the two JSON files when both are given, else the bundled one."""
    if cards_path is None and values_path is None:
        return default_card_pool()
    if cards_path is None or values_path is None:
        raise ValueError("Card details and card prices must be given together")
    return load_card_pool(cards_path, values_path)
