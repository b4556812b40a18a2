"""Per-connection supervision: decode, dispatch under the session lock, deliver."""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional, Union, assert_never

from fastapi import WebSocket, WebSocketDisconnect

from . import config
from .errors import NotInSessionError, RuleViolation, SalvoError
from .events import (
    ErrorNotice,
    Fire,
    InboundEvent,
    JoinGame,
    OutboundEvent,
    PlayerReady,
    ResetGame,
    decode_inbound,
)
from .rooms import SessionRegistry
from .session import GameSession

logger = logging.getLogger(__name__)


class Outbox:
    """Bounded buffer between session transitions and the socket writer.

    ``deliver`` never blocks: once closed, or when the peer is too slow to
    drain ``maxsize`` events, further events are dropped.
    """

    def __init__(self, maxsize: int = config.OUTBOUND_QUEUE_SIZE) -> None:
        self._queue: asyncio.Queue[OutboundEvent] = asyncio.Queue(maxsize=maxsize)
        self.closed = False
        self.dropped = 0

    def deliver(self, event: OutboundEvent) -> None:
        if self.closed:
            self.dropped += 1
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Outbound buffer full, dropping %s", event.type)

    async def get(self) -> OutboundEvent:
        return await self._queue.get()

    def pending(self) -> list[OutboundEvent]:
        """Drain whatever is buffered without waiting."""
        events = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def close(self) -> None:
        """Stop accepting events and discard the unsent backlog."""
        self.closed = True
        unsent = self.pending()
        if unsent:
            self.dropped += len(unsent)
            logger.debug("Discarding %d unsent events", len(unsent))


class ConnectionSupervisor:
    """Drives one player's connection for its whole lifetime."""

    def __init__(self, registry: SessionRegistry, outbox: Optional[Outbox] = None) -> None:
        self.registry = registry
        self.outbox = outbox or Outbox()
        self.session: Optional[GameSession] = None
        self.player_id: Optional[str] = None

    async def run(self, websocket: WebSocket) -> None:
        """Serve an accepted websocket until it disconnects."""
        sender = asyncio.create_task(self._pump(websocket))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                await self.handle_message(raw)
        except WebSocketDisconnect:
            logger.info("Connection closed for player %s", self.player_id)
        except Exception:
            logger.exception("Connection for player %s failed", self.player_id)
        finally:
            await self.close()
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender

    async def _pump(self, websocket: WebSocket) -> None:
        while True:
            event = await self.outbox.get()
            try:
                await websocket.send_json(event.serialise())
            except (RuntimeError, WebSocketDisconnect):
                self.outbox.close()
                return

    async def handle_message(self, raw: Union[str, bytes]) -> None:
        """Decode and apply one inbound frame, answering errors locally."""
        try:
            event = decode_inbound(raw)
            await self.dispatch(event)
        except SalvoError as exc:
            level = logging.INFO if isinstance(exc, RuleViolation) else logging.DEBUG
            logger.log(level, "Rejected message from %s: %s", self.player_id, exc)
            self.outbox.deliver(ErrorNotice(message=str(exc)))

    async def dispatch(self, event: InboundEvent) -> None:
        if isinstance(event, JoinGame):
            await self._join(event)
        elif isinstance(event, PlayerReady):
            session, player_id = self._current()
            async with session.lock:
                session.set_ready(player_id, board=event.board, ships=event.ships)
        elif isinstance(event, Fire):
            session, player_id = self._current()
            async with session.lock:
                session.fire(player_id, event.coord)
        elif isinstance(event, ResetGame):
            session, player_id = self._current()
            async with session.lock:
                session.reset(player_id)
        else:
            assert_never(event)

    async def _join(self, event: JoinGame) -> None:
        if self.session is not None and not self.session.closed:
            raise RuleViolation("You have already joined a game.")
        self.session, player = await self.registry.join_or_create(event.name, self.outbox)
        self.player_id = player.id

    def _current(self) -> tuple[GameSession, str]:
        if self.session is None or self.player_id is None or self.session.closed:
            raise NotInSessionError()
        return self.session, self.player_id

    async def close(self) -> None:
        if self.player_id is not None:
            await self.registry.leave(self.player_id)
        self.outbox.close()


__all__ = ["ConnectionSupervisor", "Outbox"]
