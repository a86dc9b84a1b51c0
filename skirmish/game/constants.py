"""Constants and geometry helpers for the arena simulation."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """Immutable helper for expressing 2D positions."""

    x: float
    y: float


WORLD_WIDTH: float = 800.0
WORLD_HEIGHT: float = 600.0

TICK_RATE: int = 20  # simulation ticks per second
BROADCAST_RATE: int = 10  # snapshots per second

MOVE_MAX_DIST: float = 220.0
MOVE_COOLDOWN_MS: float = 450.0
SHOOT_COOLDOWN_MS: float = 450.0

BULLET_SPEED: float = 520.0  # world units per second
BULLET_TTL_MS: float = 1500.0
HIT_RADIUS: float = 16.0
HIT_DAMAGE: float = 0.2

RESPAWN_COOLDOWN_MS: float = 600.0
RESPAWN_INVULNERABLE_MS: float = 1000.0
RESPAWN_JITTER: float = 20.0

AIM_RADIUS: float = 24.0
MAX_NAME_LENGTH: int = 16

SPAWN_POINTS: tuple[Vec2, ...] = (
    Vec2(120.0, 120.0),
    Vec2(WORLD_WIDTH - 120.0, WORLD_HEIGHT - 120.0),
    Vec2(WORLD_WIDTH - 120.0, 120.0),
    Vec2(120.0, WORLD_HEIGHT - 120.0),
    Vec2(WORLD_WIDTH / 2.0, WORLD_HEIGHT / 2.0),
)


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp *value* to the inclusive range [minimum, maximum]."""

    return max(minimum, min(value, maximum))


def lerp(start: float, end: float, fraction: float) -> float:
    return start + (end - start) * fraction


def wrap_angle(angle: float) -> float:
    """Wrap *angle* into the half-open interval (-pi, pi]."""

    wrapped = math.remainder(angle, math.tau)
    if wrapped <= -math.pi:
        wrapped += math.tau
    return wrapped


def is_finite_number(value: object) -> bool:
    """True for real ints/floats that are neither NaN nor infinite."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers beyond float range
        return False
