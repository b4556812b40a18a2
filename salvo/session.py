"""Authoritative two-player game session.

A ``GameSession`` owns both fleets, both shot ledgers, the phase and the turn
pointer. Its operations are plain synchronous state transitions: each one
either raises a ``RuleViolation`` without touching state, or applies the whole
transition and pushes the resulting events to the players' channels.
Callers serialise access by holding ``session.lock`` around every call.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from . import config
from .board import Board
from .errors import IllegalShotError, NotInSessionError, PhaseError, RoomFullError
from .events import (
    EnemyShot,
    EventChannel,
    GameOver,
    GameStart,
    GameStateUpdate,
    OutboundEvent,
    PlayerDisconnected,
    PlayerIdAssigned,
    ResetComplete,
    RosterUpdate,
    ShotResult,
    WaitingNotice,
)
from .ledger import ShotLedger, is_fleet_destroyed
from .models import Coord, FleetKind, Occupied, Player, PlayerPhase, SessionPhase, ShipPlacement
from .placement import build_board, validate_board

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShotOutcome:
    coord: Coord
    hit: bool
    ship_type: Optional[FleetKind]
    game_over: bool
    winner: Optional[str] = None


class GameSession:
    """One isolated match between at most two players."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.players: List[Player] = []
        self.boards: Dict[str, Board] = {}
        self.ledgers: Dict[str, ShotLedger] = {}
        self.phase = SessionPhase.WAITING
        self.current_turn: Optional[str] = None
        self.winner: Optional[str] = None
        self.closed = False
        self.lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        """Whether a newcomer can still be seated here."""
        return (
            not self.closed
            and self.phase is SessionPhase.WAITING
            and len(self.players) < config.MAX_PLAYERS_PER_SESSION
        )

    def roster(self) -> Tuple[str, ...]:
        return tuple(player.name for player in self.players)

    def player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise NotInSessionError()

    def opponent_of(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id != player_id), None)

    # ------------------------------------------------------------------
    # Lifecycle management
    # ------------------------------------------------------------------
    def add_player(self, name: str, channel: EventChannel) -> Player:
        """Seat a new player and announce the updated roster."""
        if not self.is_open:
            logger.info("Session %s is full, rejecting %s", self.session_id, name)
            raise RoomFullError()

        player = Player(id=uuid.uuid4().hex, name=name)
        player.bind(channel)
        self.players.append(player)
        self.boards[player.id] = Board()
        self.ledgers[player.id] = ShotLedger()
        logger.info("Added player %s (%s) to session %s", name, player.id, self.session_id)

        self._send(player, PlayerIdAssigned(player_id=player.id))
        self._broadcast(RosterUpdate(players=self.roster()))
        if len(self.players) < config.MAX_PLAYERS_PER_SESSION:
            self._send(player, WaitingNotice())
        else:
            self.phase = SessionPhase.PLACING
            logger.info("Session %s is full, fleets may be placed", self.session_id)
        return player

    def remove_player(self, player_id: str) -> List[Player]:
        """Drop ``player_id`` and end the session.

        Any remaining participant is told who left and evicted as well; the
        evicted players are returned so the registry can forget them.
        """
        try:
            leaving = self.player(player_id)
        except NotInSessionError:
            return []
        self.players.remove(leaving)
        remaining = list(self.players)
        for other in remaining:
            self._send(other, PlayerDisconnected(player_id=leaving.id, players=self.roster()))

        self.players.clear()
        self.boards.clear()
        self.ledgers.clear()
        self.current_turn = None
        self.closed = True
        logger.info(
            "Player %s left session %s in phase %s; session closed",
            leaving.name,
            self.session_id,
            self.phase.value,
        )
        return remaining

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------
    def set_ready(
        self,
        player_id: str,
        board: Optional[Board] = None,
        ships: Sequence[ShipPlacement] = (),
    ) -> None:
        """Accept a fleet layout and start the game once both sides are ready."""
        player = self.player(player_id)
        if self.phase in (SessionPhase.PLAYING, SessionPhase.GAMEOVER):
            raise PhaseError("The game has already started.")

        if board is None:
            board = build_board(ships)
        else:
            validate_board(board)

        self.boards[player.id] = board
        player.phase = PlayerPhase.READY
        logger.info("Player %s is ready in session %s", player.name, self.session_id)

        all_ready = all(p.phase is PlayerPhase.READY for p in self.players)
        if self.phase is SessionPhase.PLACING and all_ready:
            self.phase = SessionPhase.PLAYING
            self.current_turn = self.players[0].id
            logger.info("Starting session %s, %s fires first", self.session_id, self.players[0].name)
            self._broadcast(GameStart(current_turn=self.current_turn))

    def fire(self, player_id: str, coord: Coord) -> ShotOutcome:
        """Resolve one shot by ``player_id`` against the opponent's fleet."""
        attacker = self.player(player_id)
        if self.phase is not SessionPhase.PLAYING:
            raise IllegalShotError("The game is not in progress.")
        if self.current_turn != attacker.id:
            raise IllegalShotError("It is not your turn.")
        defender = self.opponent_of(attacker.id)
        if defender is None:  # pragma: no cover - playing implies two players
            raise IllegalShotError("There is no opponent to fire at.")

        defender_board = self.boards[defender.id]
        cell = self.ledgers[defender.id].record(defender_board, coord)
        hit = isinstance(cell, Occupied)
        ship_type = cell.kind if isinstance(cell, Occupied) else None

        game_over = hit and is_fleet_destroyed(defender_board, self.ledgers[defender.id])
        if game_over:
            self.phase = SessionPhase.GAMEOVER
            self.winner = attacker.id
        else:
            self.current_turn = defender.id
        logger.debug(
            "Session %s: %s fired at (%d, %d): %s",
            self.session_id,
            attacker.name,
            coord.row,
            coord.col,
            "hit" if hit else "miss",
        )

        self._send(attacker, ShotResult(row=coord.row, col=coord.col, hit=hit, ship_type=ship_type))
        self._send(defender, EnemyShot(row=coord.row, col=coord.col, hit=hit))
        self._broadcast(GameStateUpdate(phase=self.phase, current_turn=self.current_turn))
        if game_over:
            logger.info("Session %s won by %s", self.session_id, attacker.name)
            self._broadcast(GameOver(winner=attacker.id))
        return ShotOutcome(coord=coord, hit=hit, ship_type=ship_type, game_over=game_over, winner=self.winner)

    def reset(self, player_id: str) -> None:
        """Clear both fleets and ledgers and go back to fleet placement."""
        self.player(player_id)
        for player in self.players:
            player.phase = PlayerPhase.PLACING
            self.boards[player.id] = Board()
            self.ledgers[player.id].clear()
        if len(self.players) == config.MAX_PLAYERS_PER_SESSION:
            self.phase = SessionPhase.PLACING
        else:
            self.phase = SessionPhase.WAITING
        self.current_turn = None
        self.winner = None
        logger.info("Session %s reset to %s", self.session_id, self.phase.value)
        self._broadcast(ResetComplete())

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------
    def _send(self, player: Player, event: OutboundEvent) -> None:
        channel = player.channel
        if channel is None:
            logger.debug("Dropping %s for %s: connection gone", event.type, player.id)
            return
        channel.deliver(event)

    def _broadcast(self, event: OutboundEvent) -> None:
        for player in self.players:
            self._send(player, event)


__all__ = ["GameSession", "ShotOutcome"]
