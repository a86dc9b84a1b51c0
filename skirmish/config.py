"""Configuration objects for the simulation and server runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from .game import constants
from .game.constants import Vec2


@dataclass(frozen=True)
class GameConfig:
    """Static tuning for one arena.

    Attributes
    ----------
    world_width, world_height:
        Extent of the playable area.  Every player position and every live
        projectile stays inside ``[0, world_width] x [0, world_height]``.
    tick_rate:
        Simulation ticks per second.  The tick measures real elapsed time
        so this only controls update frequency, not simulation speed.
    broadcast_rate:
        Snapshots per second sent to clients.  Must not exceed
        ``tick_rate``.
    move_max_dist:
        Longest distance a single move command may cover.  Farther targets
        are pulled back along the same direction.
    move_cooldown_ms, shoot_cooldown_ms:
        Length of the shared action gate after a move or shoot.  A move's
        tween lasts exactly ``move_cooldown_ms``.
    bullet_speed, bullet_ttl_ms, hit_radius, hit_damage:
        Projectile kinematics and damage.  Health is normalized to 1.0.
    respawn_cooldown_ms, respawn_invulnerable_ms, respawn_jitter:
        Applied to a player when their health reaches zero.
    spawn_points:
        Fixed ordered rotation of respawn locations.
    aim_radius:
        Client-side radius around the local player that starts aiming.
    """

    world_width: float = constants.WORLD_WIDTH
    world_height: float = constants.WORLD_HEIGHT
    tick_rate: int = constants.TICK_RATE
    broadcast_rate: int = constants.BROADCAST_RATE
    move_max_dist: float = constants.MOVE_MAX_DIST
    move_cooldown_ms: float = constants.MOVE_COOLDOWN_MS
    shoot_cooldown_ms: float = constants.SHOOT_COOLDOWN_MS
    bullet_speed: float = constants.BULLET_SPEED
    bullet_ttl_ms: float = constants.BULLET_TTL_MS
    hit_radius: float = constants.HIT_RADIUS
    hit_damage: float = constants.HIT_DAMAGE
    respawn_cooldown_ms: float = constants.RESPAWN_COOLDOWN_MS
    respawn_invulnerable_ms: float = constants.RESPAWN_INVULNERABLE_MS
    respawn_jitter: float = constants.RESPAWN_JITTER
    spawn_points: Tuple[Vec2, ...] = constants.SPAWN_POINTS
    aim_radius: float = constants.AIM_RADIUS

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.tick_rate

    @property
    def broadcast_seconds(self) -> float:
        return 1.0 / self.broadcast_rate

    def validate(self) -> None:
        if self.world_width <= 0 or self.world_height <= 0:
            raise ValueError("World dimensions must be positive")
        if self.tick_rate <= 0 or self.broadcast_rate <= 0:
            raise ValueError("Tick and broadcast rates must be positive")
        if self.broadcast_rate > self.tick_rate:
            raise ValueError("broadcast_rate cannot exceed tick_rate")
        if self.move_max_dist <= 0:
            raise ValueError("move_max_dist must be positive")
        if self.move_cooldown_ms <= 0 or self.shoot_cooldown_ms <= 0:
            raise ValueError("Action cooldowns must be positive")
        if self.bullet_ttl_ms <= 0 or self.hit_radius <= 0:
            raise ValueError("Bullet TTL and hit radius must be positive")
        if not 0 < self.hit_damage <= 1:
            raise ValueError("hit_damage must lie in (0, 1]")
        if self.respawn_invulnerable_ms <= 0:
            raise ValueError("Respawn invulnerability must be positive")
        if not self.spawn_points:
            raise ValueError("At least one spawn point is required")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GameConfig":
        """Build a config, overriding rates from ``SKIRMISH_*`` variables."""

        environ = os.environ if environ is None else environ
        config = cls()
        overrides = {}
        if "SKIRMISH_TICK_RATE" in environ:
            overrides["tick_rate"] = int(environ["SKIRMISH_TICK_RATE"])
        if "SKIRMISH_BROADCAST_RATE" in environ:
            overrides["broadcast_rate"] = int(environ["SKIRMISH_BROADCAST_RATE"])
        if overrides:
            config = replace(config, **overrides)
        config.validate()
        return config


@dataclass(frozen=True)
class ServerConfig:
    """Network binding for the ASGI server."""

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        environ = os.environ if environ is None else environ
        return cls(
            host=environ.get("HOST", cls.host),
            port=int(environ.get("PORT", cls.port)),
            log_level=environ.get("LOG_LEVEL", cls.log_level).upper(),
        )
