"""
Immutable area operations.

Every function takes the current area tuple and returns a new one; the
input is never mutated. The host stores the returned snapshot.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from tracker.logic.exceptions import DualHandModeError, UnknownAreaError
from tracker.logic.settings import parse_multiplier
from tracker.logic.types import Area, HandCondition

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tracker.logic.settings import GameSettings
    from tracker.logic.types import Player

DEFAULT_BASE_VALUES = (2, 4, 6, 8)


class Hand(StrEnum):
    """Half of a dual-hand area."""

    HIGH = "high"
    LOW = "low"


def create_default_areas(settings: GameSettings) -> tuple[Area, ...]:
    """Create the four standard areas (2, 4, 6, 8) with the default multiplier."""
    return tuple(
        Area(id=str(index), base_value=base_value, multiplier=settings.default_multiplier)
        for index, base_value in enumerate(DEFAULT_BASE_VALUES, start=1)
    )


def _toggled(selection: tuple[str, ...], player_id: str) -> tuple[str, ...]:
    if player_id in selection:
        return tuple(pid for pid in selection if pid != player_id)
    return (*selection, player_id)


def _replace_area(areas: Sequence[Area], area_id: str, **updates: object) -> tuple[Area, ...]:
    if not any(area.id == area_id for area in areas):
        raise UnknownAreaError(f"no area with id {area_id!r}")
    return tuple(area.model_copy(update=updates) if area.id == area_id else area for area in areas)


def get_area(areas: Sequence[Area], area_id: str) -> Area:
    for area in areas:
        if area.id == area_id:
            return area
    raise UnknownAreaError(f"no area with id {area_id!r}")


def toggle_player(areas: Sequence[Area], area_id: str, player_id: str) -> tuple[Area, ...]:
    """Add the player to an area's selection, or remove them if already selected."""
    area = get_area(areas, area_id)
    if area.is_dual_hand_mode:
        raise DualHandModeError(f"area {area_id!r} is in dual-hand mode; toggle a hand instead")
    return _replace_area(areas, area_id, selected_players=_toggled(area.selected_players, player_id))


def toggle_hand_player(
    areas: Sequence[Area],
    area_id: str,
    hand: Hand,
    player_id: str,
) -> tuple[Area, ...]:
    """Toggle the player in the high or low hand of a dual-hand area."""
    area = get_area(areas, area_id)
    if not area.is_dual_hand_mode:
        raise DualHandModeError(f"area {area_id!r} is not in dual-hand mode")

    if hand == Hand.HIGH:
        high = HandCondition(selected_players=_toggled(area.high_hand.selected_players, player_id))
        return _replace_area(areas, area_id, high_hand=high)
    low = HandCondition(selected_players=_toggled(area.low_hand.selected_players, player_id))
    return _replace_area(areas, area_id, low_hand=low)


def set_multiplier(
    areas: Sequence[Area],
    area_id: str,
    value: object,
    *,
    apply_to_all: bool = False,
) -> tuple[Area, ...]:
    """
    Set the multiplier for one area, or for every area when apply_to_all is set.

    Raises InvalidMultiplierError without producing a new snapshot, so the
    caller keeps the prior value and re-prompts.
    """
    multiplier = parse_multiplier(value)
    get_area(areas, area_id)
    return tuple(
        area.model_copy(update={"multiplier": multiplier}) if apply_to_all or area.id == area_id else area
        for area in areas
    )


def dual_hand_area_id(areas: Sequence[Area]) -> str | None:
    """Return the id of the area eligible for dual-hand mode (first with the highest base value)."""
    if not areas:
        return None
    top_value = max(area.base_value for area in areas)
    return next(area.id for area in areas if area.base_value == top_value)


def enable_dual_hand(areas: Sequence[Area], area_id: str) -> tuple[Area, ...]:
    """
    Split the top-value area into high and low hands.

    The single-mode selection moves to the high hand; the low hand starts
    empty. Enabling an area that is already in dual-hand mode is a no-op.
    """
    area = get_area(areas, area_id)
    if area_id != dual_hand_area_id(areas):
        raise DualHandModeError(
            f"area {area_id!r} (base {area.base_value}) cannot use dual-hand mode; only the top-value area can",
        )
    if area.is_dual_hand_mode:
        return tuple(areas)

    return _replace_area(
        areas,
        area_id,
        is_dual_hand_mode=True,
        high_hand=HandCondition(selected_players=area.selected_players),
        low_hand=HandCondition(),
        selected_players=(),
    )


def disable_dual_hand(areas: Sequence[Area], area_id: str) -> tuple[Area, ...]:
    """
    Merge a dual-hand area back into a single selection.

    The high hand's selection becomes the area selection; the low hand's
    selection is discarded. Disabling a single-mode area is a no-op.
    """
    area = get_area(areas, area_id)
    if not area.is_dual_hand_mode:
        return tuple(areas)

    return _replace_area(
        areas,
        area_id,
        is_dual_hand_mode=False,
        selected_players=area.high_hand.selected_players,
        high_hand=HandCondition(),
        low_hand=HandCondition(),
    )


def clear_selections(areas: Iterable[Area]) -> tuple[Area, ...]:
    """Empty every selection for a new round, keeping multipliers and modes."""
    return tuple(
        area.model_copy(
            update={
                "selected_players": (),
                "high_hand": HandCondition(),
                "low_hand": HandCondition(),
            },
        )
        for area in areas
    )


def has_selections(areas: Iterable[Area]) -> bool:
    """Check whether any player is selected anywhere in the areas."""
    return any(selection for area in areas for selection in area.selections())


def find_missing_player_references(
    areas: Iterable[Area],
    players: Iterable[Player],
) -> dict[str, tuple[str, ...]]:
    """
    Report selected player ids that are not in the roster.

    Returns area id -> stray ids (in selection order), only for areas
    that have any. Both hands are checked regardless of mode.
    """
    roster = {player.id for player in players}
    missing: dict[str, tuple[str, ...]] = {}
    for area in areas:
        ids = (*area.selected_players, *area.high_hand.selected_players, *area.low_hand.selected_players)
        stray = tuple(dict.fromkeys(pid for pid in ids if pid not in roster))
        if stray:
            missing[area.id] = stray
    return missing
