"""Authoritative game state for one arena."""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

from ..config import GameConfig
from ..protocol import BulletView, MalformedCommand, PlayerView, Snapshot, parse_command
from .combat import CombatResolver, ProjectileStore
from .models import Command, Player
from .movement import MovementResolver
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class GameState:
    """Server-authoritative simulation.

    Commands are queued on arrival with their arrival time and applied at
    the start of the next tick, so a handler never observes a half-updated
    tick.  Connect and disconnect take effect immediately.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None) -> None:
        self.config = config or GameConfig()
        self.config.validate()
        self.random = random.Random(seed)
        self.registry = SessionRegistry(self.config, self.random)
        self.projectiles = ProjectileStore()
        self.movement = MovementResolver(self.config)
        self.combat = CombatResolver(self.config, self.registry, self.projectiles)
        self.tick_count: int = 0
        self.last_tick_at: Optional[float] = None
        self._commands: Deque[Command] = deque()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def connect(self, session_id: str, name: Optional[str] = None) -> Player:
        return self.registry.connect(session_id, name)

    def disconnect(self, session_id: str) -> None:
        """Remove the player and every projectile it owns in one step."""

        if self.registry.disconnect(session_id) is None:
            return
        purged = self.projectiles.remove_owned_by(session_id)
        if purged:
            logger.debug("purged %d projectiles owned by %s", purged, session_id)

    # ------------------------------------------------------------------
    # Command handling
    # ------------------------------------------------------------------
    def submit(self, session_id: str, message: Dict[str, object], now: float) -> bool:
        """Queue a raw client message; False when it was dropped as malformed."""

        try:
            command = parse_command(session_id, message, now)
        except MalformedCommand as exc:
            logger.warning("dropping command from %s: %s (payload=%r)", session_id, exc, message)
            return False
        self.queue_command(command)
        return True

    def queue_command(self, command: Command) -> None:
        self._commands.append(command)

    def _consume_commands(self) -> Iterable[Command]:
        while self._commands:
            yield self._commands.popleft()

    def dispatch(self, command: Command) -> object:
        """Apply one command immediately against its ``issued_at`` time."""

        player = self.registry.get(command.session_id)
        if player is None:
            logger.debug("dropping %s from departed session %s", command.type, command.session_id)
            return None
        handler = getattr(self, f"_handle_{command.type}", None)
        if handler is None:
            logger.warning("no handler for %s from %s", command.type, command.session_id)
            return None
        return handler(player, command)

    def _handle_move(self, player: Player, command: Command):
        return self.movement.request_move(player, command.payload.get("x"), command.payload.get("y"), command.issued_at)

    def _handle_shoot(self, player: Player, command: Command):
        return self.combat.request_shoot(player, command.payload.get("angle"), command.issued_at)

    # ------------------------------------------------------------------
    # Simulation loop
    # ------------------------------------------------------------------
    def tick(self, now: float) -> List[Dict[str, object]]:
        """Advance the simulation to wall time ``now`` (milliseconds).

        The step length is the measured time since the previous tick, so
        scheduler jitter changes how often we update but not how far
        things travel.
        """

        dt = 0.0
        if self.last_tick_at is not None:
            dt = max(0.0, now - self.last_tick_at) / 1000.0
        self.last_tick_at = now
        self.tick_count += 1

        for command in self._consume_commands():
            try:
                self.dispatch(command)
            except Exception:
                logger.exception("command %s from %s failed (payload=%r)", command.type, command.session_id, command.payload)

        self.movement.update(self.registry, now)
        return self.combat.update(now, dt)

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def snapshot(self, now: float) -> Snapshot:
        players = [
            PlayerView(
                id=player.id,
                x=player.x,
                y=player.y,
                hp=player.hp,
                score=player.score,
                deaths=player.deaths,
                name=player.name,
            )
            for player in self.registry
        ]
        bullets = [BulletView(id=b.id, x=b.x, y=b.y) for b in self.projectiles]
        return Snapshot(t=now, players=players, bullets=bullets)


__all__ = ["GameState"]
