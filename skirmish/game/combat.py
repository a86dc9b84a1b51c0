"""Projectile spawning, integration, hit detection and respawn."""

from __future__ import annotations

import logging
import math
import uuid
from typing import Dict, Iterator, List, Optional

from ..config import GameConfig
from .constants import is_finite_number, wrap_angle
from .models import Player, Projectile
from .registry import SessionRegistry

logger = logging.getLogger(__name__)

Event = Dict[str, object]


class ProjectileStore:
    """Insertion-ordered collection of live projectiles with explicit removal."""

    def __init__(self) -> None:
        self._projectiles: Dict[str, Projectile] = {}

    def __len__(self) -> int:
        return len(self._projectiles)

    def __contains__(self, projectile_id: object) -> bool:
        return projectile_id in self._projectiles

    def __iter__(self) -> Iterator[Projectile]:
        return iter(list(self._projectiles.values()))

    def get(self, projectile_id: str) -> Optional[Projectile]:
        return self._projectiles.get(projectile_id)

    def add(self, projectile: Projectile) -> None:
        self._projectiles[projectile.id] = projectile

    def remove(self, projectile_id: str) -> Optional[Projectile]:
        return self._projectiles.pop(projectile_id, None)

    def remove_owned_by(self, owner_id: str) -> int:
        owned = [pid for pid, p in self._projectiles.items() if p.owner_id == owner_id]
        for projectile_id in owned:
            del self._projectiles[projectile_id]
        return len(owned)


class CombatResolver:
    """Validates shots and resolves projectile collisions each tick."""

    def __init__(self, config: GameConfig, registry: SessionRegistry, projectiles: ProjectileStore) -> None:
        self.config = config
        self.registry = registry
        self.projectiles = projectiles

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def request_shoot(self, player: Player, angle: object, now: float) -> Optional[Projectile]:
        if not is_finite_number(angle):
            logger.warning("dropping shoot from %s: non-finite angle %r", player.id, angle)
            return None
        if not player.can_act(now):
            logger.debug("shoot from %s ignored: cooling down until %.0f", player.id, player.next_action_at)
            return None

        direction = wrap_angle(float(angle))
        speed = self.config.bullet_speed
        projectile = Projectile(
            id=uuid.uuid4().hex,
            owner_id=player.id,
            x=player.x,
            y=player.y,
            vx=math.cos(direction) * speed,
            vy=math.sin(direction) * speed,
            angle=direction,
            born_at=now,
        )
        self.projectiles.add(projectile)
        player.next_action_at = now + self.config.shoot_cooldown_ms
        return projectile

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def update(self, now: float, dt: float) -> List[Event]:
        """Advance projectiles by ``dt`` seconds and resolve hits at ``now``."""

        events: List[Event] = []
        for projectile in self.projectiles:
            projectile.x += projectile.vx * dt
            projectile.y += projectile.vy * dt
            if projectile.age(now) > self.config.bullet_ttl_ms or not self._in_bounds(projectile):
                self.projectiles.remove(projectile.id)

        for projectile in self.projectiles:
            for player in self.registry:
                if player.id == projectile.owner_id or player.is_invulnerable(now):
                    continue
                if math.hypot(player.x - projectile.x, player.y - projectile.y) >= self.config.hit_radius:
                    continue
                self.projectiles.remove(projectile.id)
                self._apply_hit(projectile, player, now, events)
                break
        return events

    def _apply_hit(self, projectile: Projectile, victim: Player, now: float, events: List[Event]) -> None:
        # Rounded so repeated fractional quanta land exactly on zero.
        victim.hp = max(0.0, round(victim.hp - self.config.hit_damage, 6))
        events.append({"type": "hit", "victim": victim.id, "shooter": projectile.owner_id, "hp": victim.hp})
        if victim.hp > 0:
            return

        victim.deaths += 1
        shooter = self.registry.get(projectile.owner_id)
        if shooter is not None:
            shooter.score += 1
        self.respawn(victim, now)
        events.append({"type": "kill", "victim": victim.id, "shooter": projectile.owner_id})
        logger.info("%s was hit by %s and respawned (deaths=%d)", victim.id, projectile.owner_id, victim.deaths)

    def respawn(self, player: Player, now: float) -> None:
        player.hp = 1.0
        player.tween = None
        player.spawn_cursor = (player.spawn_cursor + 1) % len(self.config.spawn_points)
        player.place(self.registry.spawn_position(player.spawn_cursor))
        player.invulnerable_until = now + self.config.respawn_invulnerable_ms
        player.next_action_at = now + self.config.respawn_cooldown_ms

    def _in_bounds(self, projectile: Projectile) -> bool:
        return (
            0.0 <= projectile.x <= self.config.world_width
            and 0.0 <= projectile.y <= self.config.world_height
        )


__all__ = ["CombatResolver", "ProjectileStore"]
