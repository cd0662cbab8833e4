"""
Round scoring for the 2468 game.

Converts per-area selections into per-player point deltas (bust and
equal-split rules), and applies the optional sweep doubling bonus as a
separate post-processing step.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING

import structlog

from tracker.logic.areas import find_missing_player_references

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tracker.logic.settings import GameSettings
    from tracker.logic.types import Area, Player, PlayerPoints

logger = structlog.get_logger()


def _roster_selection(selection: Sequence[str], roster: set[str]) -> list[str]:
    return [player_id for player_id in selection if player_id in roster]


def _score_selection(
    points: PlayerPoints,
    selection: Sequence[str],
    value: Fraction,
    roster: set[str],
) -> None:
    """
    Add one selection's share to the point map.

    Nobody scores when nobody hit, or when every roster player hit (bust).
    Otherwise the hitters split the value equally, as an exact fraction.
    """
    hitters = _roster_selection(selection, roster)
    if not hitters or len(hitters) == len(roster):
        return
    share = value / len(hitters)
    for player_id in hitters:
        points[player_id] += share


def compute_round_points(areas: Sequence[Area], players: Sequence[Player]) -> PlayerPoints:
    """
    Compute each player's raw point delta for one round.

    Every roster player appears in the result, with 0 when they scored
    nothing. Selected ids missing from the roster are logged and ignored.
    A dual-hand area scores its high and low hands independently, each
    worth half the area value; a hand busts only when every roster
    player is in it.
    """
    roster = {player.id for player in players}
    points: PlayerPoints = {player.id: Fraction(0) for player in players}

    missing = find_missing_player_references(areas, players)
    if missing:
        logger.warning("ignoring selections for players not in roster", missing=missing)

    for area in areas:
        if area.is_dual_hand_mode:
            _score_selection(points, area.high_hand.selected_players, area.hand_value, roster)
            _score_selection(points, area.low_hand.selected_players, area.hand_value, roster)
        else:
            _score_selection(points, area.selected_players, area.value, roster)

    return points


def _won_area_alone(area: Area, player_id: str, roster: set[str]) -> bool:
    return all(_roster_selection(selection, roster) == [player_id] for selection in area.selections())


def find_sweep_winners(areas: Sequence[Area], players: Sequence[Player]) -> list[str]:
    """
    Return the ids of players who won every area alone, in roster order.

    A dual-hand area counts as won alone only when the same player is the
    sole selection of both its hands. No areas means no sweep.
    """
    if not areas:
        return []
    roster = {player.id for player in players}
    return [
        player.id
        for player in players
        if all(_won_area_alone(area, player.id, roster) for area in areas)
    ]


def apply_sweep_bonus(
    points: PlayerPoints,
    areas: Sequence[Area],
    players: Sequence[Player],
) -> PlayerPoints:
    """
    Double the round total of a lone sweeper.

    Applies only when exactly one player won every area alone and that
    player's total is positive. Ties void the bonus. Returns a copy; the
    input map is never modified.
    """
    result = dict(points)
    winners = find_sweep_winners(areas, players)

    if len(winners) > 1:
        logger.info("sweep bonus voided by tie", player_ids=winners)
        return result
    if not winners:
        return result

    winner = winners[0]
    if result.get(winner, Fraction(0)) > 0:
        result[winner] *= 2
        logger.info("sweep bonus applied", player_id=winner, points=str(result[winner]))
    return result


def compute_final_round_points(
    areas: Sequence[Area],
    players: Sequence[Player],
    settings: GameSettings,
) -> PlayerPoints:
    """Compute the points stored for a round: raw points plus the sweep bonus when enabled."""
    points = compute_round_points(areas, players)
    if settings.winning_all_four_pays_double:
        return apply_sweep_bonus(points, areas, players)
    return points
