"""Mapping from transport session id to the player it controls."""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterator, List, Optional

from ..config import GameConfig
from .constants import Vec2, clamp
from .models import Player

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Owns every connected ``Player``; created on connect, dropped on disconnect."""

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.random = rng or random.Random()
        self._players: Dict[str, Player] = {}
        self._joined: int = 0

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def get(self, session_id: str) -> Optional[Player]:
        return self._players.get(session_id)

    def ids(self) -> List[str]:
        return list(self._players)

    def connect(self, session_id: str, name: Optional[str] = None) -> Player:
        """Create the player for a new session.

        Reconnecting transports hand out a fresh session id, so an existing
        id is returned unchanged rather than reset.
        """

        existing = self._players.get(session_id)
        if existing is not None:
            return existing
        cursor = self._joined % len(self.config.spawn_points)
        self._joined += 1
        spawn = self.spawn_position(cursor)
        player = Player(id=session_id, x=spawn.x, y=spawn.y, name=name, spawn_cursor=cursor)
        self._players[session_id] = player
        logger.info("session %s connected as %r at (%.1f, %.1f)", session_id, name, spawn.x, spawn.y)
        return player

    def disconnect(self, session_id: str) -> Optional[Player]:
        player = self._players.pop(session_id, None)
        if player is not None:
            logger.info("session %s disconnected (score=%d deaths=%d)", session_id, player.score, player.deaths)
        return player

    def spawn_position(self, cursor: int) -> Vec2:
        """Spawn point ``cursor`` with a small random offset, kept in bounds."""

        base = self.config.spawn_points[cursor % len(self.config.spawn_points)]
        jitter = self.config.respawn_jitter
        x = base.x + self.random.uniform(-jitter, jitter)
        y = base.y + self.random.uniform(-jitter, jitter)
        return Vec2(
            clamp(x, 0.0, self.config.world_width),
            clamp(y, 0.0, self.config.world_height),
        )


__all__ = ["SessionRegistry"]
