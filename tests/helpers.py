"""Shared builders for the test-suite."""
from __future__ import annotations

import json
from typing import Iterator, List, Type, TypeVar

from salvo.board import Board
from salvo.models import Coord, FleetKind, Orientation, ShipPlacement
from salvo.placement import build_board

E = TypeVar("E")

# Every unit laid horizontally from column 0 on an even row; odd rows stay empty.
FLEET_ROWS = {
    FleetKind.CARRIER: 0,
    FleetKind.BATTLESHIP: 2,
    FleetKind.CRUISER: 4,
    FleetKind.SUBMARINE: 6,
    FleetKind.DESTROYER: 8,
}


def standard_ships() -> List[ShipPlacement]:
    return [
        ShipPlacement(kind=kind, origin=Coord(row, 0), orientation=Orientation.HORIZONTAL)
        for kind, row in FLEET_ROWS.items()
    ]


def standard_board() -> Board:
    return build_board(standard_ships())


def open_water() -> Iterator[Coord]:
    """Cells left empty by ``standard_board``."""
    for row in (1, 3, 5, 7, 9):
        for col in range(10):
            yield Coord(row, col)


def ships_payload() -> List[dict]:
    return [
        {"kind": s.kind.value, "row": s.origin.row, "col": s.origin.col, "orientation": s.orientation.value}
        for s in standard_ships()
    ]


def frame(**payload: object) -> str:
    return json.dumps(payload)


class RecordingChannel:
    """Event channel that keeps everything delivered to it."""

    def __init__(self) -> None:
        self.events: list = []

    def deliver(self, event) -> None:
        self.events.append(event)

    def types(self) -> List[str]:
        return [event.type for event in self.events]

    def of(self, cls: Type[E]) -> List[E]:
        return [event for event in self.events if isinstance(event, cls)]

    def clear(self) -> None:
        self.events.clear()
