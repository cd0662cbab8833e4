"""Player pool management: create, edit, remove and select players for a new game."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from tracker.logic.exceptions import RosterError
from tracker.logic.game import create_game
from tracker.logic.types import Player

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tracker.logic.types import Game

MAX_SELECTED_PLAYERS = 3


def derive_initials(first_name: str, last_name: str) -> str:
    return f"{first_name.strip()[:1]}{last_name.strip()[:1]}"


def _clean_names(first_name: str, last_name: str, initials: str) -> tuple[str, str, str]:
    first = first_name.strip()
    last = last_name.strip()
    if not first or not last:
        raise RosterError("first and last name are required")
    return first, last, initials.strip() or derive_initials(first, last)


def create_player(
    first_name: str,
    last_name: str,
    initials: str = "",
    *,
    player_id: str | None = None,
) -> Player:
    """Create a pool player. Names are trimmed; blank initials are derived from the names."""
    first, last, resolved_initials = _clean_names(first_name, last_name, initials)
    return Player(
        id=player_id or uuid.uuid4().hex,
        first_name=first,
        last_name=last,
        initials=resolved_initials,
    )


def _index_of(players: Sequence[Player], player_id: str) -> int:
    for index, player in enumerate(players):
        if player.id == player_id:
            return index
    raise RosterError(f"no player with id {player_id!r}")


def edit_player(
    players: Sequence[Player],
    player_id: str,
    first_name: str,
    last_name: str,
    initials: str = "",
) -> tuple[Player, ...]:
    """
    Return the pool with one player's names replaced.

    Stored game snapshots keep the old names; only the pool changes.
    """
    first, last, resolved_initials = _clean_names(first_name, last_name, initials)
    index = _index_of(players, player_id)
    updated = players[index].model_copy(
        update={"first_name": first, "last_name": last, "initials": resolved_initials},
    )
    return (*players[:index], updated, *players[index + 1 :])


def remove_player(players: Sequence[Player], player_id: str) -> tuple[Player, ...]:
    return tuple(player for player in players if player.id != player_id)


def selected_players(players: Sequence[Player]) -> tuple[Player, ...]:
    return tuple(player for player in players if player.selected)


def toggle_player_selection(players: Sequence[Player], player_id: str) -> tuple[Player, ...]:
    """
    Select or deselect a pool player for the next game.

    Deselection is always allowed. Selection is refused, returning the
    pool unchanged, once MAX_SELECTED_PLAYERS are already selected.
    """
    index = _index_of(players, player_id)
    player = players[index]
    if not player.selected and len(selected_players(players)) >= MAX_SELECTED_PLAYERS:
        return tuple(players)

    updated = player.model_copy(update={"selected": not player.selected})
    return (*players[:index], updated, *players[index + 1 :])


def start_game(players: Sequence[Player]) -> Game:
    """Create a game from the selected pool players, in pool order."""
    chosen = selected_players(players)
    if not chosen:
        raise RosterError("select at least one player to start a game")
    return create_game(chosen)
