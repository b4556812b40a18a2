"""Per-defender record of targeted coordinates and the win check built on it."""
from __future__ import annotations

from typing import Iterator, Set

from .board import Board
from .errors import DuplicateShotError
from .models import Cell, Coord


class ShotLedger:
    """Coordinates already fired upon against one player's board."""

    def __init__(self) -> None:
        self._shots: Set[Coord] = set()

    def record(self, board: Board, coord: Coord) -> Cell:
        """Register a shot at ``coord`` and return what it struck on ``board``."""
        if coord in self._shots:
            raise DuplicateShotError(coord.row, coord.col)
        self._shots.add(coord)
        return board.occupant(coord)

    def clear(self) -> None:
        self._shots.clear()

    def __contains__(self, coord: object) -> bool:
        return coord in self._shots

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._shots)

    def __len__(self) -> int:
        return len(self._shots)


def is_fleet_destroyed(board: Board, ledger: ShotLedger) -> bool:
    """Every occupied cell of ``board`` has been hit."""
    return all(coord in ledger for coord in board.occupied())


__all__ = ["ShotLedger", "is_fleet_destroyed"]
