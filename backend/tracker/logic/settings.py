"""Gameplay settings for the 2468 tracker and multiplier input parsing."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tracker.logic.exceptions import InvalidMultiplierError

MIN_MULTIPLIER = 1


class GameSettings(BaseModel):
    """
    Global gameplay settings.

    Loaded at game/round start. Only affects newly created areas and the
    sweep doubling computation; stored rounds are never recomputed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_multiplier: int = Field(default=1, ge=MIN_MULTIPLIER, alias="defaultMultiplier")
    winning_all_four_pays_double: bool = Field(default=False, alias="winningAllFourPaysDouble")


def parse_multiplier(value: object) -> int:
    """
    Parse a user-entered multiplier.

    Accepts ints, integral floats, and strings holding a whole number
    (surrounding whitespace ignored). Raises InvalidMultiplierError for
    anything else or for values below 1. Never clamps.
    """
    # bool is an int subclass, but True is not a multiplier
    if isinstance(value, bool):
        raise InvalidMultiplierError(value)

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidMultiplierError(value)
        parsed = int(value)
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError as e:
            raise InvalidMultiplierError(value) from e
    else:
        raise InvalidMultiplierError(value)

    if parsed < MIN_MULTIPLIER:
        raise InvalidMultiplierError(value)
    return parsed
