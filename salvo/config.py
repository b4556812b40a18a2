"""Configuration constants for the Salvo session server.

Game rules are fixed. Runtime knobs can be overridden through ``SALVO_*``
environment variables so a deployment can be tuned without code changes.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

GAME_NAME = "Salvo"

# Rules
BOARD_SIZE = 10
MAX_PLAYERS_PER_SESSION = 2

# Fleet roster keyed by wire tag. Order is the order units are reported in.
FLEET: Dict[str, int] = {
    "carrier": 5,
    "battleship": 4,
    "cruiser": 3,
    "submarine": 3,
    "destroyer": 2,
}

# Networking
HOST: str = os.getenv("SALVO_HOST", "127.0.0.1")
PORT: int = int(os.getenv("SALVO_PORT", "3000"))

# Events buffered per connection before further ones are dropped.
OUTBOUND_QUEUE_SIZE: int = int(os.getenv("SALVO_OUTBOUND_QUEUE_SIZE", "64"))

MAX_NAME_LENGTH: int = int(os.getenv("SALVO_MAX_NAME_LENGTH", "32"))

# Directory holding the browser client's index.html, if one is deployed.
_static = os.getenv("SALVO_STATIC_DIR")
STATIC_DIR: Optional[Path] = Path(_static) if _static else None

DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"

WAITING_MESSAGE = "Waiting for another player to join..."
