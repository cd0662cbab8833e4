"""Typed domain exceptions for scoring rule violations.

All rule violations raised by the engine use subclasses of ScoringError
rather than raw ValueError, so a host can catch them in one place, keep
the previous state, and re-prompt the user.
"""


class ScoringError(Exception):
    """Base exception for scoring rule violations."""


class InvalidMultiplierError(ScoringError):
    """Multiplier input is non-numeric, non-integral, or below 1.

    Attributes:
        value: The rejected input, exactly as received.

    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid multiplier {value!r}: must be a whole number greater than 0")


class DualHandModeError(ScoringError):
    """Dual-hand operation on an area that does not support it."""


class UnknownAreaError(ScoringError):
    """Operation names an area id that is not configured."""


class RoundNotFoundError(ScoringError):
    """Operation names a round number that is not stored in the game."""


class RosterError(ScoringError):
    """Player pool operation is invalid (blank names, unknown player, empty roster)."""
