"""Persistence of the player pool, saved games and settings over a key-value store."""

from tracker.persistence.repository import (
    GAMES_STORAGE_KEY,
    PLAYERS_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TrackerRepository,
)

__all__ = [
    "GAMES_STORAGE_KEY",
    "PLAYERS_STORAGE_KEY",
    "SETTINGS_STORAGE_KEY",
    "TrackerRepository",
]
