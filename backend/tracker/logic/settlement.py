"""
Cash settlement at game end.

Direct settlements record the point difference for every pair of
players. Optimized settlements net those debts per player and match
debtors to creditors greedily, in roster order.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING

import structlog

from tracker.logic.types import Settlement, SettlementPlan

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from tracker.logic.types import Player, PlayerPoints

logger = structlog.get_logger()


def compute_direct_settlements(
    players: Sequence[Player],
    totals: Mapping[str, Fraction],
) -> list[Settlement]:
    """
    Compute one settlement per unordered pair with unequal totals.

    Pairs are enumerated as (i, j) with i < j in roster order. The player
    with the lower total pays the difference. Missing totals count as 0.
    """
    settlements: list[Settlement] = []
    for i, first in enumerate(players):
        for second in players[i + 1 :]:
            diff = totals.get(first.id, Fraction(0)) - totals.get(second.id, Fraction(0))
            if diff > 0:
                settlements.append(Settlement(from_player=second, to_player=first, amount=diff))
            elif diff < 0:
                settlements.append(Settlement(from_player=first, to_player=second, amount=-diff))
    return settlements


def compute_net_amounts(
    players: Sequence[Player],
    settlements: Sequence[Settlement],
) -> PlayerPoints:
    """Net each player's position across settlements: paid out is negative, received positive."""
    net: PlayerPoints = {player.id: Fraction(0) for player in players}
    for settlement in settlements:
        net[settlement.from_player.id] -= settlement.amount
        net[settlement.to_player.id] += settlement.amount
    return net


def compute_optimized_settlements(
    players: Sequence[Player],
    direct: Sequence[Settlement],
) -> list[Settlement]:
    """
    Reduce direct settlements to a short payment list.

    Each debtor, in roster order, pays creditors in roster order until
    either side is settled. Greedy matching: adequate for small tables,
    not guaranteed to be the minimum number of payments.
    """
    net = compute_net_amounts(players, direct)
    debtors = [player for player in players if net[player.id] < 0]
    creditors = [player for player in players if net[player.id] > 0]

    settlements: list[Settlement] = []
    for debtor in debtors:
        for creditor in creditors:
            owed = -net[debtor.id]
            due = net[creditor.id]
            if owed <= 0:
                break
            if due <= 0:
                continue
            payment = min(owed, due)
            settlements.append(Settlement(from_player=debtor, to_player=creditor, amount=payment))
            net[debtor.id] += payment
            net[creditor.id] -= payment
    return settlements


def compute_settlements(players: Sequence[Player], totals: Mapping[str, Fraction]) -> SettlementPlan:
    """
    Compute direct and optimized settlements for final game totals.

    Fewer than two players settle nothing. Output depends only on the
    roster order and totals, so repeated calls return identical plans.
    """
    if len(players) < 2:
        return SettlementPlan()

    direct = compute_direct_settlements(players, totals)
    optimized = compute_optimized_settlements(players, direct)
    logger.debug("computed settlements", direct_count=len(direct), optimized_count=len(optimized))
    return SettlementPlan(direct=tuple(direct), optimized=tuple(optimized))
