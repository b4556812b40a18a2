"""Fleet composition checks run when a player declares readiness."""
from __future__ import annotations

from typing import Iterable, List, Set

from .board import Board
from .errors import PlacementError, PlacementReason
from .models import Coord, FleetKind, ShipPlacement


def _is_straight_run(cells: List[Coord]) -> bool:
    rows = {cell.row for cell in cells}
    cols = {cell.col for cell in cells}
    if len(rows) == 1:
        spread = sorted(cell.col for cell in cells)
    elif len(cols) == 1:
        spread = sorted(cell.row for cell in cells)
    else:
        return False
    return spread == list(range(spread[0], spread[0] + len(spread)))


def validate_board(board: Board) -> None:
    """Accept ``board`` or raise ``PlacementError`` naming the first problem.

    A grid stores one tag per cell, so two units can never share a cell here;
    overlaps and out-of-bounds runs are caught while building a board from a
    placement list instead.
    """
    for kind in FleetKind:
        cells = board.cells_of(kind)
        if not cells:
            raise PlacementError(PlacementReason.MISSING_UNIT, f"{kind.value} is missing")
        if len(cells) != kind.size:
            raise PlacementError(
                PlacementReason.WRONG_SIZE,
                f"{kind.value} must occupy {kind.size} cells, found {len(cells)}",
            )
        if not _is_straight_run(cells):
            raise PlacementError(
                PlacementReason.NOT_STRAIGHT,
                f"{kind.value} must be a single straight line",
            )


def build_board(placements: Iterable[ShipPlacement]) -> Board:
    """Lay out a placement list on a fresh board and validate the result."""
    board = Board()
    seen: Set[FleetKind] = set()
    for placement in placements:
        kind = placement.kind
        if kind in seen:
            raise PlacementError(PlacementReason.DUPLICATE_UNIT, f"{kind.value} placed twice")
        seen.add(kind)
        run = list(placement.origin.run(kind.size, placement.orientation))
        if not all(cell.in_bounds(board.size) for cell in run):
            raise PlacementError(PlacementReason.OUT_OF_BOUNDS, f"{kind.value} leaves the board")
        if not board.can_place(placement.origin, kind.size, placement.orientation):
            raise PlacementError(PlacementReason.OVERLAP, f"{kind.value} overlaps another unit")
        board.place(placement.origin, kind, kind.size, placement.orientation)
    validate_board(board)
    return board


__all__ = ["build_board", "validate_board"]
