from fractions import Fraction

from tracker.logic.settlement import (
    compute_direct_settlements,
    compute_net_amounts,
    compute_optimized_settlements,
    compute_settlements,
)
from tracker.tests.conftest import create_players


def _as_tuples(settlements) -> list[tuple[str, str, Fraction]]:
    return [(s.from_player.id, s.to_player.id, s.amount) for s in settlements]


def _apply(players, totals, settlements) -> dict[str, Fraction]:
    """Net balance per player relative to the table average, after paying settlements."""
    balances = compute_net_amounts(players, compute_direct_settlements(players, totals))
    for settlement in settlements:
        balances[settlement.from_player.id] += settlement.amount
        balances[settlement.to_player.id] -= settlement.amount
    return balances


class TestDirectSettlements:
    def test_lower_total_pays_difference(self):
        players = create_players("A", "B")
        settlements = compute_direct_settlements(players, {"A": Fraction(10), "B": Fraction(4)})
        assert _as_tuples(settlements) == [("B", "A", 6)]

    def test_one_record_per_pair_in_roster_order(self, players):
        totals = {"A": Fraction(2), "B": Fraction(10), "C": Fraction(5)}

        settlements = compute_direct_settlements(players, totals)

        assert _as_tuples(settlements) == [("A", "B", 8), ("A", "C", 3), ("C", "B", 5)]

    def test_equal_totals_produce_no_record(self, players):
        totals = {"A": Fraction(5), "B": Fraction(5), "C": Fraction(1)}

        settlements = compute_direct_settlements(players, totals)

        assert _as_tuples(settlements) == [("C", "A", 4), ("C", "B", 4)]

    def test_missing_total_counts_as_zero(self):
        players = create_players("A", "B")
        settlements = compute_direct_settlements(players, {"A": Fraction(3)})
        assert _as_tuples(settlements) == [("B", "A", 3)]


class TestNetAmounts:
    def test_nets_from_direct_settlements(self, players):
        totals = {"A": Fraction(2), "B": Fraction(10), "C": Fraction(5)}

        net = compute_net_amounts(players, compute_direct_settlements(players, totals))

        assert net == {"A": -11, "B": 13, "C": -2}
        assert sum(net.values()) == 0


class TestOptimizedSettlements:
    def test_two_debtors_one_creditor(self, players):
        totals = {"A": Fraction(2), "B": Fraction(10), "C": Fraction(5)}

        plan = compute_settlements(players, totals)

        assert _as_tuples(plan.optimized) == [("A", "B", 11), ("C", "B", 2)]

    def test_one_debtor_pays_two_creditors(self, players):
        totals = {"A": Fraction(0), "B": Fraction(6), "C": Fraction(6)}

        plan = compute_settlements(players, totals)

        # net: A -12, B +6, C +6
        assert _as_tuples(plan.optimized) == [("A", "B", 6), ("A", "C", 6)]

    def test_debtor_balance_carries_across_creditors(self):
        players = create_players("A", "B", "C", "D")
        totals = {"A": Fraction(0), "B": Fraction(0), "C": Fraction(3), "D": Fraction(9)}

        plan = compute_settlements(players, totals)

        # net: A -12, B -12, C 0, D +24
        assert _as_tuples(plan.optimized) == [("A", "D", 12), ("B", "D", 12)]

    def test_settles_every_balance_to_zero(self):
        players = create_players("A", "B", "C", "D")
        totals = {"A": Fraction(7, 3), "B": Fraction(-4), "C": Fraction(11), "D": Fraction(1, 2)}

        plan = compute_settlements(players, totals)

        assert all(balance == 0 for balance in _apply(players, totals, plan.optimized).values())
        net = compute_net_amounts(players, plan.direct)
        owed_to_creditors = sum(amount for amount in net.values() if amount > 0)
        assert sum(s.amount for s in plan.optimized) == owed_to_creditors

    def test_never_emits_zero_amounts(self):
        players = create_players("A", "B", "C", "D")
        totals = {"A": Fraction(1), "B": Fraction(2), "C": Fraction(3), "D": Fraction(4)}

        plan = compute_settlements(players, totals)

        assert all(s.amount > 0 for s in (*plan.direct, *plan.optimized))

    def test_even_table_has_no_settlements(self, players):
        totals = {"A": Fraction(4), "B": Fraction(4), "C": Fraction(4)}

        plan = compute_settlements(players, totals)

        assert plan.direct == ()
        assert plan.optimized == ()

    def test_empty_direct_list(self, players):
        assert compute_optimized_settlements(players, []) == []


class TestComputeSettlements:
    def test_fewer_than_two_players_is_empty(self):
        plan = compute_settlements(create_players("A"), {"A": Fraction(10)})
        assert plan.direct == ()
        assert plan.optimized == ()

    def test_no_players_is_empty(self):
        plan = compute_settlements((), {})
        assert plan.direct == ()
        assert plan.optimized == ()

    def test_deterministic_output(self, players):
        totals = {"A": Fraction(8, 3), "B": Fraction(10), "C": Fraction(5)}

        first = compute_settlements(players, totals)
        second = compute_settlements(players, totals)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_roster_order_decides_direction_of_pairs(self, players):
        totals = {"A": Fraction(2), "B": Fraction(10), "C": Fraction(5)}
        reordered = (players[2], players[1], players[0])

        plan = compute_settlements(reordered, totals)

        assert _as_tuples(plan.direct) == [("C", "B", 5), ("A", "C", 3), ("A", "B", 8)]

    def test_fractional_amounts_serialize_exactly(self):
        players = create_players("A", "B")
        plan = compute_settlements(players, {"A": Fraction(8, 3), "B": Fraction(0)})

        dumped = plan.model_dump(mode="json", by_alias=True)

        assert dumped["direct"][0]["amount"] == "8/3"
        assert dumped["direct"][0]["from"]["id"] == "B"
