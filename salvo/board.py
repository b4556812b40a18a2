"""Typed 10x10 grid holding one player's fleet."""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from . import config
from .models import EMPTY, Cell, Coord, Empty, FleetKind, Occupied, Orientation


class Board:
    """Square grid whose cells are either ``EMPTY`` or ``Occupied(kind)``."""

    def __init__(self, size: int = config.BOARD_SIZE):
        self.size = size
        self._cells: List[List[Cell]] = [[EMPTY for _ in range(size)] for _ in range(size)]

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def can_place(self, origin: Coord, size: int, orientation: Orientation) -> bool:
        """Return ``True`` if the whole run is on the grid and over open water."""
        for cell in origin.run(size, orientation):
            if not cell.in_bounds(self.size):
                return False
            if not isinstance(self._cells[cell.row][cell.col], Empty):
                return False
        return True

    def place(self, origin: Coord, kind: FleetKind, size: int, orientation: Orientation) -> None:
        """Tag the run with ``kind``. Callers check ``can_place`` first."""
        tag = Occupied(kind)
        for cell in origin.run(size, orientation):
            self._cells[cell.row][cell.col] = tag

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def occupant(self, coord: Coord) -> Cell:
        return self._cells[coord.row][coord.col]

    def occupied(self) -> Iterator[Coord]:
        for row in range(self.size):
            for col in range(self.size):
                if isinstance(self._cells[row][col], Occupied):
                    yield Coord(row, col)

    def cells_of(self, kind: FleetKind) -> List[Coord]:
        tag = Occupied(kind)
        return [coord for coord in self.occupied() if self.occupant(coord) == tag]

    def clear(self) -> None:
        self._cells = [[EMPTY for _ in range(self.size)] for _ in range(self.size)]

    # ------------------------------------------------------------------
    # Wire conversion
    # ------------------------------------------------------------------
    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]]) -> "Board":
        """Build a board from the wire grid (``None`` or a fleet tag per cell).

        Raises ``ValueError`` if the grid has the wrong shape or an unknown tag.
        """
        board = cls()
        if len(rows) != board.size:
            raise ValueError(f"board must have {board.size} rows")
        for r, row in enumerate(rows):
            if len(row) != board.size:
                raise ValueError(f"row {r} must have {board.size} cells")
            for c, value in enumerate(row):
                if value is None:
                    continue
                board._cells[r][c] = Occupied(FleetKind(value))
        return board

    def to_rows(self) -> List[List[Optional[str]]]:
        return [
            [cell.kind.value if isinstance(cell, Occupied) else None for cell in row]
            for row in self._cells
        ]

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Board(size={self.size}, occupied={sum(1 for _ in self.occupied())})"


__all__ = ["Board"]
