"""Inbound and outbound event vocabulary plus the JSON wire codec.

Both directions are closed sets of dataclasses. Inbound frames are decoded
into one of ``InboundEvent``; the session engine answers with
``OutboundEvent`` instances which serialise to the JSON frames the browser
client understands::

    client -> server   joinGame, playerReady, shot, resetGame
    server -> client   playerId, playerJoined, waiting, gameStart, shotResult,
                       enemyShot, gameState, gameOver, resetComplete,
                       playerDisconnected, error
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Protocol, Tuple, Union

from . import config
from .board import Board
from .errors import ProtocolError
from .models import Coord, FleetKind, Orientation, SessionPhase, ShipPlacement

# ----------------------------------------------------------------------
# Inbound
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JoinGame:
    name: str


@dataclass(frozen=True, slots=True)
class PlayerReady:
    """Readiness with either a full grid or a list of unit placements."""

    board: Optional[Board] = None
    ships: Tuple[ShipPlacement, ...] = ()


@dataclass(frozen=True, slots=True)
class Fire:
    coord: Coord


@dataclass(frozen=True, slots=True)
class ResetGame:
    pass


InboundEvent = Union[JoinGame, PlayerReady, Fire, ResetGame]


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"'{key}' must be an integer")
    if not 0 <= value < config.BOARD_SIZE:
        raise ProtocolError(f"'{key}' must be between 0 and {config.BOARD_SIZE - 1}")
    return value


def _decode_join(payload: Dict[str, Any]) -> JoinGame:
    name = payload.get("playerName")
    if not isinstance(name, str):
        raise ProtocolError("'playerName' must be a string")
    return JoinGame(name=name)


def _decode_ship(entry: Any) -> ShipPlacement:
    if not isinstance(entry, dict):
        raise ProtocolError("each ship must be an object")
    try:
        kind = FleetKind(entry.get("kind"))
        orientation = Orientation(entry.get("orientation"))
    except ValueError as exc:
        raise ProtocolError(str(exc)) from exc
    row, col = entry.get("row"), entry.get("col")
    # Bounds are a placement rule here, not a framing one.
    if isinstance(row, bool) or isinstance(col, bool) or not isinstance(row, int) or not isinstance(col, int):
        raise ProtocolError("ship 'row' and 'col' must be integers")
    return ShipPlacement(kind=kind, origin=Coord(row, col), orientation=orientation)


def _decode_ready(payload: Dict[str, Any]) -> PlayerReady:
    if "ships" in payload:
        ships = payload["ships"]
        if not isinstance(ships, list):
            raise ProtocolError("'ships' must be a list")
        return PlayerReady(ships=tuple(_decode_ship(entry) for entry in ships))
    rows = payload.get("board")
    if not isinstance(rows, list):
        raise ProtocolError("'board' must be a 10x10 grid")
    try:
        board = Board.from_rows(rows)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(f"malformed board: {exc}") from exc
    return PlayerReady(board=board)


def _decode_fire(payload: Dict[str, Any]) -> Fire:
    return Fire(coord=Coord(_require_int(payload, "row"), _require_int(payload, "col")))


def _decode_reset(payload: Dict[str, Any]) -> ResetGame:
    return ResetGame()


_DECODERS: Dict[str, Callable[[Dict[str, Any]], InboundEvent]] = {
    "joinGame": _decode_join,
    "playerReady": _decode_ready,
    "shot": _decode_fire,
    "resetGame": _decode_reset,
}


def decode_inbound(raw: Union[str, bytes]) -> InboundEvent:
    """Parse one text frame into an inbound event or raise ``ProtocolError``."""
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        raise ProtocolError("Invalid message format") from exc
    if not isinstance(payload, dict):
        raise ProtocolError("Invalid message format")
    msg_type = payload.get("type")
    decoder = _DECODERS.get(msg_type) if isinstance(msg_type, str) else None
    if decoder is None:
        raise ProtocolError(f"Unknown message type: {msg_type!r}")
    return decoder(payload)


# ----------------------------------------------------------------------
# Outbound
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlayerIdAssigned:
    type: ClassVar[str] = "playerId"
    player_id: str

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "playerId": self.player_id}


@dataclass(frozen=True, slots=True)
class RosterUpdate:
    type: ClassVar[str] = "playerJoined"
    players: Tuple[str, ...]

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "players": list(self.players)}


@dataclass(frozen=True, slots=True)
class WaitingNotice:
    type: ClassVar[str] = "waiting"
    message: str = config.WAITING_MESSAGE

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True, slots=True)
class GameStart:
    type: ClassVar[str] = "gameStart"
    current_turn: str

    def serialise(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "gameState": SessionPhase.PLAYING.value,
            "currentTurn": self.current_turn,
        }


@dataclass(frozen=True, slots=True)
class ShotResult:
    """The attacker's own view of a shot, including the unit struck."""

    type: ClassVar[str] = "shotResult"
    row: int
    col: int
    hit: bool
    ship_type: Optional[FleetKind] = None

    def serialise(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "row": self.row,
            "col": self.col,
            "hit": self.hit,
            "shipType": self.ship_type.value if self.ship_type else None,
        }


@dataclass(frozen=True, slots=True)
class EnemyShot:
    type: ClassVar[str] = "enemyShot"
    row: int
    col: int
    hit: bool

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "row": self.row, "col": self.col, "hit": self.hit}


@dataclass(frozen=True, slots=True)
class GameStateUpdate:
    type: ClassVar[str] = "gameState"
    phase: SessionPhase
    current_turn: Optional[str]

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "gameState": self.phase.value, "currentTurn": self.current_turn}


@dataclass(frozen=True, slots=True)
class GameOver:
    type: ClassVar[str] = "gameOver"
    winner: str

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "winner": self.winner}


@dataclass(frozen=True, slots=True)
class ResetComplete:
    type: ClassVar[str] = "resetComplete"

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True, slots=True)
class PlayerDisconnected:
    type: ClassVar[str] = "playerDisconnected"
    player_id: str
    players: Tuple[str, ...]

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "playerId": self.player_id, "players": list(self.players)}


@dataclass(frozen=True, slots=True)
class ErrorNotice:
    type: ClassVar[str] = "error"
    message: str

    def serialise(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


OutboundEvent = Union[
    PlayerIdAssigned,
    RosterUpdate,
    WaitingNotice,
    GameStart,
    ShotResult,
    EnemyShot,
    GameStateUpdate,
    GameOver,
    ResetComplete,
    PlayerDisconnected,
    ErrorNotice,
]


class EventChannel(Protocol):
    """Where a session pushes events for one player. Must never block."""

    def deliver(self, event: OutboundEvent) -> None:
        ...


__all__ = [
    "EnemyShot",
    "ErrorNotice",
    "EventChannel",
    "Fire",
    "GameOver",
    "GameStart",
    "GameStateUpdate",
    "InboundEvent",
    "JoinGame",
    "OutboundEvent",
    "PlayerDisconnected",
    "PlayerIdAssigned",
    "PlayerReady",
    "ResetComplete",
    "ResetGame",
    "RosterUpdate",
    "ShotResult",
    "WaitingNotice",
    "decode_inbound",
]
