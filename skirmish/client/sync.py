"""Snapshot buffering and interpolation for rendering remote state.

The server broadcasts slower than the client draws, so snapping to the
newest snapshot stutters.  We keep the two most recent snapshots and
render a blend of them at the estimated current server time.  The
server/client clock offset is re-estimated from every message and only
ever used relative to snapshot timestamps, so the clocks never need to
agree.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Dict, Optional

from ..game.constants import clamp, lerp
from ..protocol import BulletView, PlayerView, Snapshot


@dataclass
class Frame:
    """What should be on screen: public entity state keyed by id."""

    t: float
    players: Dict[str, PlayerView] = field(default_factory=dict)
    bullets: Dict[str, BulletView] = field(default_factory=dict)
    alpha: float = 1.0

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "Frame":
        return cls(
            t=snapshot.t,
            players={player.id: player for player in snapshot.players},
            bullets={bullet.id: bullet for bullet in snapshot.bullets},
        )


class ClientSynchronizer:
    """Holds at most two snapshots and the estimated server clock offset."""

    def __init__(self) -> None:
        self.buffer: Deque[Snapshot] = deque(maxlen=2)
        self.offset: float = 0.0

    @property
    def latest(self) -> Optional[Snapshot]:
        return self.buffer[-1] if self.buffer else None

    def receive(self, snapshot: Snapshot, local_now: float) -> bool:
        """Buffer ``snapshot``; False when it is older than the newest one held.

        Equal timestamps are kept so a duplicate replaces what is rendered.
        """

        latest = self.latest
        if latest is not None and snapshot.t < latest.t:
            return False
        self.buffer.append(snapshot)
        self.offset = snapshot.t - local_now
        return True

    def server_time(self, local_now: float) -> float:
        return local_now + self.offset

    def render(self, local_now: float) -> Optional[Frame]:
        """Interpolated frame at ``local_now``; None before any snapshot."""

        if not self.buffer:
            return None
        if len(self.buffer) < 2:
            return Frame.from_snapshot(self.buffer[-1])

        prev, nxt = self.buffer
        span = nxt.t - prev.t
        if span <= 0:
            return Frame.from_snapshot(nxt)

        alpha = clamp((self.server_time(local_now) - prev.t) / span, 0.0, 1.0)
        return Frame(
            t=prev.t + span * alpha,
            players=_blend(prev.players, nxt.players, alpha),
            bullets=_blend(prev.bullets, nxt.bullets, alpha),
            alpha=alpha,
        )


def _blend(previous, current, alpha: float) -> dict:
    before = {entity.id: entity for entity in previous}
    blended = {}
    for entity in current:
        old = before.get(entity.id)
        if old is None:
            blended[entity.id] = entity
        else:
            blended[entity.id] = replace(entity, x=lerp(old.x, entity.x, alpha), y=lerp(old.y, entity.y, alpha))
    return blended


__all__ = ["ClientSynchronizer", "Frame"]
