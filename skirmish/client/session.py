"""Client-side glue between server messages, the synchronizer and the view."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from ..protocol import Snapshot
from .input import InputGate
from .sync import ClientSynchronizer, Frame
from .view import ViewDiff, ViewReconciler

logger = logging.getLogger(__name__)


class ClientSession:
    """Consumes server messages and produces frames for a renderer.

    Transport is external: feed every decoded message to :meth:`handle`
    and send whatever the input methods return.
    """

    def __init__(self, input_gate: Optional[InputGate] = None) -> None:
        self.player_id: Optional[str] = None
        self.sync = ClientSynchronizer()
        self.view = ViewReconciler()
        self.input = input_gate or InputGate()
        self.frame: Optional[Frame] = None

    def handle(self, message: Dict[str, object], local_now: float) -> None:
        message_type = message.get("type")
        if message_type == "init":
            self.player_id = str(message.get("player_id"))
        elif message_type == "state":
            try:
                snapshot = Snapshot.from_payload(message.get("payload"))
            except ValueError as exc:
                logger.warning("ignoring malformed snapshot: %s", exc)
                return
            self.sync.receive(snapshot, local_now)
        else:
            logger.debug("ignoring message of type %r", message_type)

    def render(self, local_now: float) -> Dict[str, ViewDiff]:
        self.frame = self.sync.render(local_now)
        return self.view.apply(self.frame)

    def local_position(self) -> Optional[Tuple[float, float]]:
        if self.frame is None or self.player_id is None:
            return None
        me = self.frame.players.get(self.player_id)
        if me is None:
            return None
        return (me.x, me.y)

    def pointer_down(self, x: float, y: float):
        return self.input.pointer_down(x, y, self.local_position())

    def pointer_up(self, x: float, y: float):
        return self.input.pointer_up(x, y, self.local_position())

    def reset(self) -> None:
        """Forget everything after the transport reconnects under a new id."""

        self.player_id = None
        self.sync = ClientSynchronizer()
        self.view = ViewReconciler()
        self.input.aiming = False
        self.frame = None


__all__ = ["ClientSession"]
