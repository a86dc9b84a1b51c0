"""Data structures used by the arena game state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .constants import Vec2, clamp, lerp


@dataclass
class Tween:
    """Time-bounded linear move from ``start`` to ``end`` (times in ms)."""

    start: Vec2
    end: Vec2
    t0: float
    t1: float

    def fraction(self, now: float) -> float:
        span = self.t1 - self.t0
        if span <= 0:
            return 1.0
        return clamp((now - self.t0) / span, 0.0, 1.0)

    def position(self, now: float) -> Vec2:
        k = self.fraction(now)
        return Vec2(lerp(self.start.x, self.end.x, k), lerp(self.start.y, self.end.y, k))


@dataclass
class Player:
    """Runtime information tracked for a connected session."""

    id: str
    x: float
    y: float
    name: Optional[str] = None
    hp: float = 1.0
    score: int = 0
    deaths: int = 0
    tween: Optional[Tween] = None
    next_action_at: float = 0.0
    invulnerable_until: float = 0.0
    spawn_cursor: int = 0

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)

    def place(self, position: Vec2) -> None:
        self.x = position.x
        self.y = position.y

    def can_act(self, now: float) -> bool:
        return now >= self.next_action_at

    def is_invulnerable(self, now: float) -> bool:
        return now < self.invulnerable_until


@dataclass
class Projectile:
    """A bullet in flight."""

    id: str
    owner_id: str
    x: float
    y: float
    vx: float
    vy: float
    angle: float
    born_at: float

    def age(self, now: float) -> float:
        return now - self.born_at


@dataclass
class Command:
    """Command received from a session, stamped with its arrival time."""

    session_id: str
    type: str
    payload: Dict[str, object] = field(default_factory=dict)
    issued_at: float = 0.0
