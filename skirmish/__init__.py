"""Authoritative simulation and snapshot interpolation for a top-down arena shooter.

The ``game`` package holds the server-side tick simulation, ``server``
exposes it over FastAPI websockets and ``client`` turns the broadcast
snapshots back into smooth motion.
"""

from .config import GameConfig, ServerConfig
from .game.state import GameState
from .protocol import Snapshot

__all__ = [
    "GameConfig",
    "GameState",
    "ServerConfig",
    "Snapshot",
]
