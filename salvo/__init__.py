"""Authoritative session server for two-player naval combat."""

from .board import Board
from .rooms import SessionRegistry
from .session import GameSession

__all__ = ["Board", "GameSession", "SessionRegistry"]
