"""
Game lifecycle and round navigation for the 2468 tracker.

A Game is frozen; each operation returns a new Game together with the
area snapshot the host should show for the resulting current round.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from fractions import Fraction
from typing import TYPE_CHECKING

import structlog

from tracker.logic.areas import clear_selections, create_default_areas, has_selections
from tracker.logic.exceptions import RoundNotFoundError
from tracker.logic.scoring import compute_final_round_points
from tracker.logic.settlement import compute_settlements
from tracker.logic.types import Game, RoundState

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tracker.logic.settings import GameSettings
    from tracker.logic.types import Area, Player, PlayerPoints, SettlementPlan

logger = structlog.get_logger()


def create_game(
    players: Sequence[Player],
    *,
    game_id: str | None = None,
    created_at: datetime | None = None,
) -> Game:
    """Start a game with a fixed snapshot of the given players."""
    return Game(
        id=game_id or uuid.uuid4().hex,
        players=tuple(players),
        created_at=created_at or datetime.now(tz=UTC),
        rounds={},
        current_round=1,
    )


def areas_for_round(game: Game, settings: GameSettings) -> tuple[Area, ...]:
    """Return the stored areas of the current round, or fresh default areas."""
    stored = game.rounds.get(game.current_round)
    if stored is not None and stored.areas:
        return stored.areas
    return create_default_areas(settings)


def commit_round(game: Game, areas: Sequence[Area], settings: GameSettings) -> Game:
    """Store the current round's areas and final points (sweep bonus included)."""
    points = compute_final_round_points(areas, game.players, settings)
    round_state = RoundState(areas=tuple(areas), points=points)
    rounds = {**game.rounds, game.current_round: round_state}
    logger.debug("committed round", game_id=game.id, round_number=game.current_round)
    return game.model_copy(update={"rounds": rounds})


def advance_round(
    game: Game,
    areas: Sequence[Area],
    settings: GameSettings,
) -> tuple[Game, tuple[Area, ...]]:
    """
    Commit the current round and open a new one after the highest round.

    The new round keeps each area's multiplier and mode, with every
    selection cleared.
    """
    committed = commit_round(game, areas, settings)
    highest = max(committed.rounds, default=0)
    next_round = max(highest, committed.current_round) + 1
    return committed.model_copy(update={"current_round": next_round}), clear_selections(areas)


def go_to_previous_round(
    game: Game,
    areas: Sequence[Area],
    settings: GameSettings,
) -> tuple[Game, tuple[Area, ...]]:
    """
    Move back one round.

    The current round is committed first only if it has selections. The
    previous round's stored areas are loaded, or the current areas with
    selections cleared when nothing is stored for it. No-op on round 1.
    """
    if game.current_round <= 1:
        return game, tuple(areas)

    if has_selections(areas):
        game = commit_round(game, areas, settings)

    previous = game.current_round - 1
    stored = game.rounds.get(previous)
    new_areas = stored.areas if stored is not None else clear_selections(areas)
    return game.model_copy(update={"current_round": previous}), new_areas


def go_to_next_round(
    game: Game,
    areas: Sequence[Area],
    settings: GameSettings,
) -> tuple[Game, tuple[Area, ...]]:
    """
    Move forward to the next stored round.

    Only possible when the next round is already stored; otherwise the
    game and areas are returned unchanged. Commits the current round
    first if it has selections.
    """
    following = game.current_round + 1
    if following not in game.rounds:
        return game, tuple(areas)

    if has_selections(areas):
        game = commit_round(game, areas, settings)

    return game.model_copy(update={"current_round": following}), game.rounds[following].areas


def delete_round(
    game: Game,
    round_number: int,
    areas: Sequence[Area],
) -> tuple[Game, tuple[Area, ...]]:
    """
    Delete a stored round and renumber the rest densely from 1.

    Afterwards the current round is the round that followed the deleted
    one (at its new number), else the one before it, else round 1 with
    the areas' selections cleared.
    """
    if round_number not in game.rounds:
        raise RoundNotFoundError(f"round {round_number} is not stored in game {game.id}")

    old_numbers = sorted(game.rounds)
    kept = [number for number in old_numbers if number != round_number]
    rounds = {new_number: game.rounds[old] for new_number, old in enumerate(kept, start=1)}

    following = [number for number in kept if number > round_number]
    preceding = [number for number in kept if number < round_number]
    if following:
        current_round = kept.index(following[0]) + 1
        new_areas = game.rounds[following[0]].areas
    elif preceding:
        current_round = kept.index(preceding[-1]) + 1
        new_areas = game.rounds[preceding[-1]].areas
    else:
        current_round = 1
        new_areas = clear_selections(areas)

    logger.info(
        "deleted round",
        game_id=game.id,
        round_number=round_number,
        remaining_rounds=len(rounds),
    )
    return game.model_copy(update={"rounds": rounds, "current_round": current_round}), new_areas


def compute_game_totals(game: Game) -> PlayerPoints:
    """
    Sum stored round points per roster player.

    Missing entries count as 0. Points for ids outside the roster are
    ignored, so totals always cover exactly the game's players.
    """
    totals: PlayerPoints = {player.id: Fraction(0) for player in game.players}
    for number in sorted(game.rounds):
        points = game.rounds[number].points
        for player_id in totals:
            totals[player_id] += points.get(player_id, Fraction(0))
    return totals


def cash_out(game: Game) -> tuple[PlayerPoints, SettlementPlan]:
    """Compute final totals and the settlement plan for a game."""
    totals = compute_game_totals(game)
    return totals, compute_settlements(game.players, totals)


def sort_games_newest_first(games: Iterable[Game]) -> list[Game]:
    return sorted(games, key=lambda game: game.created_at, reverse=True)
