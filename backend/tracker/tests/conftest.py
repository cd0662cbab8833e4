from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from tracker.logic.types import Area, Game, HandCondition, Player

if TYPE_CHECKING:
    from collections.abc import Sequence

# ============================================================================
# Test Builder Helpers
# ============================================================================


def create_player(player_id: str, first_name: str | None = None, last_name: str = "Tester") -> Player:
    """Create a Player whose first name defaults to its id."""
    return Player(id=player_id, first_name=first_name or player_id, last_name=last_name)


def create_players(*player_ids: str) -> tuple[Player, ...]:
    return tuple(create_player(player_id) for player_id in player_ids)


def create_area(
    base_value: int,
    selected: Sequence[str] = (),
    *,
    area_id: str | None = None,
    multiplier: int = 1,
    high: Sequence[str] | None = None,
    low: Sequence[str] | None = None,
) -> Area:
    """Create an Area. Passing high or low puts it in dual-hand mode."""
    is_dual = high is not None or low is not None
    return Area(
        id=area_id or str(base_value),
        base_value=base_value,
        multiplier=multiplier,
        selected_players=tuple(selected),
        is_dual_hand_mode=is_dual,
        high_hand=HandCondition(selected_players=tuple(high or ())),
        low_hand=HandCondition(selected_players=tuple(low or ())),
    )


def create_standard_areas(*selections: Sequence[str], multiplier: int = 1) -> tuple[Area, ...]:
    """Create the 2/4/6/8 areas with the given selections, in base-value order."""
    return tuple(
        create_area(base_value, selected, area_id=str(index), multiplier=multiplier)
        for index, (base_value, selected) in enumerate(zip((2, 4, 6, 8), selections, strict=True), start=1)
    )


def create_game(players: Sequence[Player], game_id: str = "game-1", created_at: datetime | None = None) -> Game:
    return Game(
        id=game_id,
        players=tuple(players),
        created_at=created_at or datetime(2025, 3, 15, 10, 30, tzinfo=UTC),
    )


@pytest.fixture
def players() -> tuple[Player, ...]:
    return create_players("A", "B", "C")
