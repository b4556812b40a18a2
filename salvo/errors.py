"""Exception hierarchy for everything a client can get wrong.

Every error here is reported back to the connection that caused it as an
``error`` event; none of them change session state.
"""
from __future__ import annotations

from enum import Enum


class SalvoError(RuntimeError):
    """Base class for client-facing failures."""


class ProtocolError(SalvoError):
    """The inbound payload could not be decoded."""


class RuleViolation(SalvoError):
    """The payload was well formed but the move is not allowed."""


class InvalidNameError(RuleViolation):
    pass


class RoomFullError(RuleViolation):
    """Raised when a session already holds two players."""

    def __init__(self, message: str = "Could not join game. Room full.") -> None:
        super().__init__(message)


class NotInSessionError(RuleViolation):
    def __init__(self, message: str = "You have not joined a game.") -> None:
        super().__init__(message)


class PhaseError(RuleViolation):
    """The operation is not available in the session's current phase."""


class IllegalShotError(RuleViolation):
    pass


class DuplicateShotError(IllegalShotError):
    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"Coordinate ({row}, {col}) has already been targeted.")
        self.row = row
        self.col = col


class PlacementReason(str, Enum):
    MISSING_UNIT = "missing_unit"
    DUPLICATE_UNIT = "duplicate_unit"
    WRONG_SIZE = "wrong_size"
    NOT_STRAIGHT = "not_straight"
    OVERLAP = "overlap"
    OUT_OF_BOUNDS = "out_of_bounds"


class PlacementError(RuleViolation):
    """A submitted fleet layout was rejected."""

    def __init__(self, reason: PlacementReason, detail: str) -> None:
        super().__init__(f"Invalid fleet placement ({reason.value}): {detail}")
        self.reason = reason
        self.detail = detail
