"""Wire messages exchanged between the server and its clients.

Client -> server::

    {"type": "move", "payload": {"x": 410.0, "y": 220.5}}
    {"type": "shoot", "payload": {"angle": 1.57}}

Server -> client::

    {"type": "init", "player_id": "..."}
    {"type": "state", "payload": {"t": 1700000000000, "players": [...], "bullets": [...]}}

Snapshots only carry public fields; cooldowns, tweens and invulnerability
stay on the server.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from .game.constants import MAX_NAME_LENGTH, is_finite_number
from .game.models import Command

COMMAND_TYPES = ("move", "shoot")


class MalformedCommand(ValueError):
    """Raised when a client message cannot be turned into a command."""


@dataclass
class PlayerView:
    id: str
    x: float
    y: float
    hp: float
    score: int = 0
    deaths: int = 0
    name: Optional[str] = None

    def to_payload(self) -> Dict[str, object]:
        data = asdict(self)
        if self.name is None:
            del data["name"]
        return data


@dataclass
class BulletView:
    id: str
    x: float
    y: float

    def to_payload(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class Snapshot:
    """Public state of the arena at server time ``t`` (milliseconds)."""

    t: float
    players: List[PlayerView] = field(default_factory=list)
    bullets: List[BulletView] = field(default_factory=list)

    def to_payload(self) -> Dict[str, object]:
        return {
            "t": self.t,
            "players": [player.to_payload() for player in self.players],
            "bullets": [bullet.to_payload() for bullet in self.bullets],
        }

    @classmethod
    def from_payload(cls, payload: object) -> "Snapshot":
        """Parse a ``state`` payload, raising ``ValueError`` when malformed."""

        if not isinstance(payload, dict):
            raise ValueError("state payload must be an object")
        t = payload.get("t")
        if not is_finite_number(t):
            raise ValueError(f"invalid snapshot time {t!r}")
        try:
            players = [_player_from(entry) for entry in _entries(payload, "players")]
            bullets = [_bullet_from(entry) for entry in _entries(payload, "bullets")]
        except TypeError as exc:
            raise ValueError(f"malformed snapshot: {exc}") from exc
        return cls(t=float(t), players=players, bullets=bullets)


def _entries(payload: Dict[str, object], key: str) -> List[Dict[str, object]]:
    entries = payload.get(key, [])
    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        raise ValueError(f"{key} must be a list of objects")
    return entries


def _position(entry: Dict[str, object]) -> tuple:
    x, y = entry.get("x"), entry.get("y")
    if "id" not in entry or not (is_finite_number(x) and is_finite_number(y)):
        raise ValueError(f"invalid entity {entry!r}")
    return str(entry["id"]), float(x), float(y)


def _player_from(entry: Dict[str, object]) -> PlayerView:
    entity_id, x, y = _position(entry)
    hp = entry.get("hp", 1.0)
    if not is_finite_number(hp):
        raise ValueError(f"invalid hp {hp!r}")
    score, deaths = entry.get("score", 0), entry.get("deaths", 0)
    if not (is_finite_number(score) and is_finite_number(deaths)):
        raise ValueError(f"invalid counters score={score!r} deaths={deaths!r}")
    name = entry.get("name")
    return PlayerView(
        id=entity_id,
        x=x,
        y=y,
        hp=float(hp),
        score=int(score),
        deaths=int(deaths),
        name=str(name) if name is not None else None,
    )


def _bullet_from(entry: Dict[str, object]) -> BulletView:
    entity_id, x, y = _position(entry)
    return BulletView(id=entity_id, x=x, y=y)


# ----------------------------------------------------------------------
# Client -> server
# ----------------------------------------------------------------------
def decode_message(raw: str) -> Dict[str, object]:
    try:
        message = json.loads(raw)
    except ValueError as exc:
        raise MalformedCommand(f"invalid JSON: {exc}") from exc
    if not isinstance(message, dict):
        raise MalformedCommand("message must be a JSON object")
    return message


def parse_command(session_id: str, message: Dict[str, object], issued_at: float) -> Command:
    """Validate the envelope of a client message.

    Only the shape is checked here; the resolvers decide whether the
    coordinates or angle are finite numbers.
    """

    command_type = str(message.get("type", "")).lower()
    if command_type not in COMMAND_TYPES:
        raise MalformedCommand(f"unknown command type {message.get('type')!r}")
    payload = message.get("payload")
    if not isinstance(payload, dict):
        raise MalformedCommand(f"{command_type} payload must be an object")
    return Command(session_id=session_id, type=command_type, payload=payload, issued_at=issued_at)


def move_message(x: float, y: float) -> Dict[str, object]:
    return {"type": "move", "payload": {"x": x, "y": y}}


def shoot_message(angle: float) -> Dict[str, object]:
    return {"type": "shoot", "payload": {"angle": angle}}


# ----------------------------------------------------------------------
# Server -> client
# ----------------------------------------------------------------------
def init_message(player_id: str) -> Dict[str, object]:
    return {"type": "init", "player_id": player_id}


def state_message(snapshot: Snapshot) -> Dict[str, object]:
    return {"type": "state", "payload": snapshot.to_payload()}


def clean_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    name = name.strip()[:MAX_NAME_LENGTH]
    return name or None


__all__ = [
    "BulletView",
    "MalformedCommand",
    "PlayerView",
    "Snapshot",
    "clean_name",
    "decode_message",
    "init_message",
    "move_message",
    "parse_command",
    "shoot_message",
    "state_message",
]
