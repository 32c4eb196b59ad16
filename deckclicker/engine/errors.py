"""Error taxonomy for the draw engine and the game session.

Only structurally invalid input raises. "Nothing happened" outcomes (flat
pool, zero draws, clock moved backward) are policy results, not errors.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all game errors. Carries a stable ``code``."""

    DEFAULT_CODE = "GAME_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.DEFAULT_CODE

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class PoolError(GameError):
    """A pool cannot be built from the given items."""

    DEFAULT_CODE = "POOL_ERROR"


class EmptyPoolError(PoolError):
    DEFAULT_CODE = "EMPTY_POOL"


class InvalidWeightError(PoolError):
    DEFAULT_CODE = "INVALID_WEIGHT"


class ValidationError(GameError):
    DEFAULT_CODE = "VALIDATION_ERROR"


class InvalidPercentageError(ValidationError):
    DEFAULT_CODE = "INVALID_PERCENTAGE"


class DuplicateNameError(ValidationError):
    DEFAULT_CODE = "DUPLICATE_NAME"


class InvalidUpgradeError(ValidationError):
    DEFAULT_CODE = "INVALID_UPGRADE"


class InsufficientResourcesError(GameError):
    DEFAULT_CODE = "INSUFFICIENT_RESOURCES"


class StorageError(GameError):
    DEFAULT_CODE = "STORAGE_UNAVAILABLE"


ERROR_MESSAGES: dict[str, str] = {
    "NO_DECKS": "You have no decks available. Wait for deck production or purchase upgrades.",
    "INSUFFICIENT_SCORE": "You do not have enough score to purchase this upgrade.",
    "STORAGE_UNAVAILABLE": "Unable to save game progress.",
    "CORRUPTED_DATA": "Saved game data appears corrupted. Starting with a fresh game.",
    "INVALID_UPGRADE": "Invalid upgrade type selected.",
    "SHOP_DISABLED": "The upgrade shop is not available in this game mode.",
    "CARD_POOL_EMPTY": "Card pool is empty.",
}
