"""Value types shared by the board, the session engine and the wire codec."""
from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional, Union

from . import config

if TYPE_CHECKING:
    from .events import EventChannel


class FleetKind(str, Enum):
    """The five fleet units every board must carry."""

    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    CRUISER = "cruiser"
    SUBMARINE = "submarine"
    DESTROYER = "destroyer"

    @property
    def size(self) -> int:
        return config.FLEET[self.value]


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SessionPhase(str, Enum):
    WAITING = "waiting"
    PLACING = "placing"
    PLAYING = "playing"
    GAMEOVER = "gameover"


class PlayerPhase(str, Enum):
    PLACING = "placing"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class Coord:
    """A zero-based (row, col) position on the grid."""

    row: int
    col: int

    def in_bounds(self, size: int = config.BOARD_SIZE) -> bool:
        return 0 <= self.row < size and 0 <= self.col < size

    def run(self, length: int, orientation: Orientation) -> Iterator["Coord"]:
        """Yield ``length`` cells starting here and extending along ``orientation``."""

        for offset in range(length):
            if orientation is Orientation.HORIZONTAL:
                yield Coord(self.row, self.col + offset)
            else:
                yield Coord(self.row + offset, self.col)


@dataclass(frozen=True, slots=True)
class Empty:
    """Open water."""


@dataclass(frozen=True, slots=True)
class Occupied:
    kind: FleetKind


EMPTY = Empty()
Cell = Union[Empty, Occupied]


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """One unit as submitted by a client: kind, bow position and heading."""

    kind: FleetKind
    origin: Coord
    orientation: Orientation


@dataclass(eq=False)
class Player:
    """A seat in a session.

    The outbound channel belongs to the connection that created the player;
    the session only keeps a weak reference to it, so a dropped connection
    never keeps a channel alive through session state.
    """

    id: str
    name: str
    phase: PlayerPhase = PlayerPhase.PLACING
    _channel: Optional["weakref.ReferenceType[EventChannel]"] = field(default=None, repr=False)

    def bind(self, channel: "EventChannel") -> None:
        self._channel = weakref.ref(channel)

    @property
    def channel(self) -> Optional["EventChannel"]:
        if self._channel is None:
            return None
        return self._channel()
