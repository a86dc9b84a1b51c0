"""Pointer gestures to command messages."""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from ..game.constants import AIM_RADIUS
from ..protocol import move_message, shoot_message

Point = Tuple[float, float]


class InputGate:
    """Press on yourself to aim, release to fire; press elsewhere to move."""

    def __init__(self, aim_radius: float = AIM_RADIUS) -> None:
        self.aim_radius = aim_radius
        self.aiming = False

    def pointer_down(self, x: float, y: float, me: Optional[Point]) -> Optional[Dict[str, object]]:
        if me is None:
            return None
        if math.hypot(x - me[0], y - me[1]) < self.aim_radius:
            self.aiming = True
            return None
        return move_message(x, y)

    def pointer_up(self, x: float, y: float, me: Optional[Point]) -> Optional[Dict[str, object]]:
        was_aiming = self.aiming
        self.aiming = False
        if not was_aiming or me is None:
            return None
        return shoot_message(math.atan2(y - me[1], x - me[0]))


__all__ = ["InputGate"]
