"""Typed repository for tracker records stored in a key-value store.

Records are stored as JSON under three keys: the player pool, the game
list (each game embedding its round history) and the settings object.

Every public method contains persistence failures: errors are logged and
reported as a False return (writes) or a default value (reads), so a
failed save never crashes the host. Read-modify-write operations do not
write when the existing record could not be read, so unreadable data is
never silently replaced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import structlog
from pydantic import TypeAdapter

from tracker.logic.settings import GameSettings
from tracker.logic.types import Game, Player

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.storage import KeyValueStore

logger = structlog.get_logger()

PLAYERS_STORAGE_KEY = "@2468_tracker_players"
GAMES_STORAGE_KEY = "@2468_tracker_games"
SETTINGS_STORAGE_KEY = "@2468_tracker_settings"

# Sample pool returned until the user saves their own players.
DEFAULT_PLAYERS = (
    Player(id="1", first_name="John", last_name="Doe"),
    Player(id="2", first_name="Jane", last_name="Smith"),
    Player(id="3", first_name="Mike", last_name="Johnson"),
)

_players_adapter: TypeAdapter[list[Player]] = TypeAdapter(list[Player])
_games_adapter: TypeAdapter[list[Game]] = TypeAdapter(list[Game])
_settings_adapter: TypeAdapter[GameSettings] = TypeAdapter(GameSettings)

T = TypeVar("T")

# ValueError covers pydantic ValidationError and malformed JSON.
_PERSISTENCE_ERRORS = (OSError, ValueError)


class TrackerRepository:
    """Load and save players, games and settings through a KeyValueStore."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def _read(self, key: str, adapter: TypeAdapter[T]) -> T | None:
        """Read and validate one record. Raises on store or validation failure."""
        raw = await self._store.get_item(key)
        if raw is None:
            return None
        return adapter.validate_json(raw)

    async def _write(self, key: str, adapter: TypeAdapter[T], value: T) -> None:
        await self._store.set_item(key, adapter.dump_json(value, by_alias=True).decode("utf-8"))

    async def _remove(self, key: str, record: str) -> bool:
        try:
            await self._store.remove_item(key)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to clear records", record=record)
            return False
        return True

    # --- players ---

    async def _load_players_strict(self) -> list[Player]:
        players = await self._read(PLAYERS_STORAGE_KEY, _players_adapter)
        return list(DEFAULT_PLAYERS) if players is None else players

    async def load_players(self) -> list[Player]:
        """Return the stored player pool, or the sample pool when none is stored or it is unreadable."""
        try:
            return await self._load_players_strict()
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to load players")
            return list(DEFAULT_PLAYERS)

    async def save_players(self, players: Sequence[Player]) -> bool:
        try:
            await self._write(PLAYERS_STORAGE_KEY, _players_adapter, list(players))
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to save players", count=len(players))
            return False
        return True

    async def add_player(self, player: Player) -> bool:
        try:
            players = await self._load_players_strict()
            await self._write(PLAYERS_STORAGE_KEY, _players_adapter, [*players, player])
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to add player", player_id=player.id)
            return False
        return True

    async def update_player(self, player: Player) -> bool:
        """Replace the pool entry with the same id. Stored game snapshots are not touched."""
        try:
            players = await self._load_players_strict()
            updated = [player if existing.id == player.id else existing for existing in players]
            await self._write(PLAYERS_STORAGE_KEY, _players_adapter, updated)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to update player", player_id=player.id)
            return False
        return True

    async def clear_players(self) -> bool:
        return await self._remove(PLAYERS_STORAGE_KEY, "players")

    # --- games ---

    async def _load_games_strict(self) -> list[Game]:
        games = await self._read(GAMES_STORAGE_KEY, _games_adapter)
        return [] if games is None else games

    async def load_games(self) -> list[Game]:
        """Return all stored games in storage order; empty when none are stored or they are unreadable."""
        try:
            return await self._load_games_strict()
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to load games")
            return []

    async def get_game(self, game_id: str) -> Game | None:
        games = await self.load_games()
        return next((game for game in games if game.id == game_id), None)

    async def save_games(self, games: Sequence[Game]) -> bool:
        try:
            await self._write(GAMES_STORAGE_KEY, _games_adapter, list(games))
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to save games", count=len(games))
            return False
        return True

    async def save_game(self, game: Game) -> bool:
        """Insert the game, or replace the stored game with the same id in place."""
        try:
            games = await self._load_games_strict()
            if any(existing.id == game.id for existing in games):
                games = [game if existing.id == game.id else existing for existing in games]
            else:
                games.append(game)
            await self._write(GAMES_STORAGE_KEY, _games_adapter, games)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to save game", game_id=game.id)
            return False
        return True

    async def delete_game(self, game_id: str) -> bool:
        try:
            games = await self._load_games_strict()
            remaining = [game for game in games if game.id != game_id]
            await self._write(GAMES_STORAGE_KEY, _games_adapter, remaining)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to delete game", game_id=game_id)
            return False
        logger.info("deleted game", game_id=game_id)
        return True

    async def clear_games(self) -> bool:
        return await self._remove(GAMES_STORAGE_KEY, "games")

    # --- settings ---

    async def load_settings(self) -> GameSettings:
        """Return stored settings, or defaults when none are stored or they are unreadable."""
        try:
            settings = await self._read(SETTINGS_STORAGE_KEY, _settings_adapter)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to load settings")
            return GameSettings()
        return GameSettings() if settings is None else settings

    async def save_settings(self, settings: GameSettings) -> bool:
        try:
            await self._write(SETTINGS_STORAGE_KEY, _settings_adapter, settings)
        except _PERSISTENCE_ERRORS:
            logger.exception("failed to save settings")
            return False
        return True
