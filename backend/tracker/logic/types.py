"""
Pydantic models for the 2468 tracker data structures.

All models are frozen: every edit produces a new instance. Field aliases
match the camelCase keys of the persisted JSON records, so
``model_dump(mode="json", by_alias=True)`` round-trips through storage.
"""

import math
from datetime import datetime
from fractions import Fraction
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    computed_field,
    field_validator,
)

# Legacy records hold JS floats (8/3 stored as 2.6666666666666665).
MAX_LEGACY_DENOMINATOR = 1_000_000


def _to_points(value: object) -> Fraction:
    if isinstance(value, bool):
        raise ValueError(f"points must be numeric, got {value!r}")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"points must be finite, got {value!r}")
        return Fraction(value).limit_denominator(MAX_LEGACY_DENOMINATOR)
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"points must be numeric, got {value!r}") from e
    raise ValueError(f"points must be numeric, got {value!r}")


def _points_to_wire(value: Fraction) -> int | str:
    if value.denominator == 1:
        return value.numerator
    return str(value)


# Exact rational points: whole values serialize as ints, fractional ones as "8/3".
Points = Annotated[
    Fraction,
    PlainValidator(_to_points),
    PlainSerializer(_points_to_wire, when_used="json"),
]

PlayerPoints = dict[str, Fraction]


def _dedupe(player_ids: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(player_ids))


class Player(BaseModel):
    """Player identity. ``selected`` is roster-screen state only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    initials: str | None = None
    selected: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def display_initials(self) -> str:
        return self.initials or f"{self.first_name[:1]}{self.last_name[:1]}"


class HandCondition(BaseModel):
    """Selection state of one half (high or low) of a dual-hand area."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    selected_players: tuple[str, ...] = Field(default=(), alias="selectedPlayers")

    @field_validator("selected_players")
    @classmethod
    def _dedupe_selection(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(v)


class Area(BaseModel):
    """
    One scoring zone with a face value.

    In dual-hand mode the single selection is ignored and the area scores
    as two halves, ``high_hand`` and ``low_hand``, each worth
    ``base_value / 2 * multiplier``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    base_value: int = Field(gt=0, alias="baseValue")
    multiplier: int = Field(default=1, ge=1)
    selected_players: tuple[str, ...] = Field(default=(), alias="selectedPlayers")
    is_dual_hand_mode: bool = Field(default=False, alias="isDualHandMode")
    high_hand: HandCondition = Field(default_factory=HandCondition, alias="highHand")
    low_hand: HandCondition = Field(default_factory=HandCondition, alias="lowHand")

    @field_validator("selected_players")
    @classmethod
    def _dedupe_selection(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return str(self.base_value * self.multiplier)

    @property
    def value(self) -> Fraction:
        return Fraction(self.base_value * self.multiplier)

    @property
    def hand_value(self) -> Fraction:
        return Fraction(self.base_value, 2) * self.multiplier

    def selections(self) -> tuple[tuple[str, ...], ...]:
        """Return the selection sets that score independently for this area."""
        if self.is_dual_hand_mode:
            return (self.high_hand.selected_players, self.low_hand.selected_players)
        return (self.selected_players,)


class RoundState(BaseModel):
    """Snapshot of a finalized round: area configuration plus awarded points."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    areas: tuple[Area, ...] = ()
    points: dict[str, Points] = Field(default_factory=dict)


class Game(BaseModel):
    """
    A game in progress or finished.

    ``players`` is a snapshot taken at creation. Round numbers are dense
    and 1-based; ``current_round`` may point one past the stored rounds.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    players: tuple[Player, ...]
    created_at: datetime = Field(alias="createdAt")
    rounds: dict[int, RoundState] = Field(default_factory=dict)
    current_round: int = Field(default=1, ge=1, alias="currentRound")

    @field_validator("rounds")
    @classmethod
    def _validate_round_numbers(cls, v: dict[int, RoundState]) -> dict[int, RoundState]:
        invalid = [number for number in v if number < 1]
        if invalid:
            raise ValueError(f"round numbers must be positive, got {sorted(invalid)}")
        return v

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(player.id for player in self.players)


class Settlement(BaseModel):
    """One payment: ``from_player`` pays ``to_player`` the given amount."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_player: Player = Field(alias="from")
    to_player: Player = Field(alias="to")
    amount: Points


class SettlementPlan(BaseModel):
    """Raw pairwise debts and the greedy-reduced payment list."""

    model_config = ConfigDict(frozen=True)

    direct: tuple[Settlement, ...] = ()
    optimized: tuple[Settlement, ...] = ()
