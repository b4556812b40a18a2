"""Matchmaking and the process-wide session registry."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

from . import config
from .errors import InvalidNameError, RoomFullError
from .events import EventChannel
from .models import Player
from .session import GameSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Seats players into sessions and forgets sessions once they end.

    ``lock`` guards the two mappings only; it is held while picking or
    creating a session and while updating mappings, never across a session
    operation. Each session's own lock guards its seats.
    """

    def __init__(self) -> None:
        self.sessions: Dict[str, GameSession] = {}
        self.player_sessions: Dict[str, str] = {}
        self.lock = asyncio.Lock()

    @staticmethod
    def clean_name(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise InvalidNameError("Player name must not be empty.")
        if len(cleaned) > config.MAX_NAME_LENGTH:
            raise InvalidNameError(f"Player name must be at most {config.MAX_NAME_LENGTH} characters.")
        return cleaned

    def _find_open(self) -> Optional[GameSession]:
        for session in self.sessions.values():
            if session.is_open:
                return session
        return None

    async def join_or_create(self, name: str, channel: EventChannel) -> Tuple[GameSession, Player]:
        """Seat ``name`` in the first waiting session, creating one if needed.

        Raises ``RoomFullError`` if the chosen session filled up between
        selection and seating; the client is expected to join again.
        """
        name = self.clean_name(name)
        async with self.lock:
            session = self._find_open()
            if session is None:
                session = GameSession()
                self.sessions[session.session_id] = session
                logger.info("Created session %s", session.session_id)

        async with session.lock:
            player = session.add_player(name, channel)

        async with self.lock:
            self.player_sessions[player.id] = session.session_id
        return session, player

    async def leave(self, player_id: str) -> None:
        """Remove a player, ending their session for anyone still in it."""
        async with self.lock:
            session_id = self.player_sessions.pop(player_id, None)
            session = self.sessions.get(session_id) if session_id else None
        if session is None:
            return

        async with session.lock:
            evicted = session.remove_player(player_id)

        async with self.lock:
            for player in evicted:
                self.player_sessions.pop(player.id, None)
            if session.closed:
                self.sessions.pop(session.session_id, None)
                logger.info("Discarded session %s", session.session_id)

    def session_for(self, player_id: str) -> Optional[GameSession]:
        session_id = self.player_sessions.get(player_id)
        if session_id is None:
            return None
        return self.sessions.get(session_id)

    def stats(self) -> Dict[str, int]:
        return {
            "sessions": len(self.sessions),
            "players": sum(len(session.players) for session in self.sessions.values()),
        }

    def __len__(self) -> int:
        return len(self.sessions)


__all__ = ["SessionRegistry"]
