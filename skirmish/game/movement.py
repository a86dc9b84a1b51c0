"""Move validation and per-tick tween advancement."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from ..config import GameConfig
from .constants import Vec2, clamp, is_finite_number
from .models import Player, Tween

logger = logging.getLogger(__name__)


class MovementResolver:
    """Turns move requests into tweens and advances them each tick."""

    def __init__(self, config: GameConfig) -> None:
        self.config = config

    def request_move(self, player: Player, target_x: object, target_y: object, now: float) -> Optional[Tween]:
        """Install a tween toward ``(target_x, target_y)``.

        The target is pulled back to ``move_max_dist`` along the requested
        direction, then clamped into the world.  Returns None when the
        request is malformed or the action gate is still closed.
        """

        if not (is_finite_number(target_x) and is_finite_number(target_y)):
            logger.warning("dropping move from %s: non-finite target x=%r y=%r", player.id, target_x, target_y)
            return None
        if not player.can_act(now):
            logger.debug("move from %s ignored: cooling down until %.0f", player.id, player.next_action_at)
            return None

        start = player.position
        target = self.limit_step(start, Vec2(float(target_x), float(target_y)))
        tween = Tween(start=start, end=target, t0=now, t1=now + self.config.move_cooldown_ms)
        player.tween = tween
        player.next_action_at = tween.t1
        return tween

    def limit_step(self, start: Vec2, target: Vec2) -> Vec2:
        dx = target.x - start.x
        dy = target.y - start.y
        distance = math.hypot(dx, dy)
        max_dist = self.config.move_max_dist
        if distance > max_dist:
            ratio = max_dist / distance
            target = Vec2(start.x + dx * ratio, start.y + dy * ratio)
        return Vec2(
            clamp(target.x, 0.0, self.config.world_width),
            clamp(target.y, 0.0, self.config.world_height),
        )

    def update(self, players: Iterable[Player], now: float) -> None:
        for player in players:
            tween = player.tween
            if tween is None:
                continue
            player.place(tween.position(now))
            if tween.fraction(now) >= 1.0:
                player.tween = None


__all__ = ["MovementResolver"]
