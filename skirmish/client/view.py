"""Identity-based reconciliation of rendered entities between frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .sync import Frame


@dataclass
class ViewDiff:
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.created or self.updated or self.removed)


class ViewReconciler:
    """Tracks which players and bullets are on screen.

    Each applied frame is diffed against the previous one by id: unseen ids
    are created, vanished ids removed and the rest updated in place.  A
    renderer consumes the returned diffs instead of rebuilding the scene.
    """

    def __init__(self) -> None:
        self.players: Dict[str, object] = {}
        self.bullets: Dict[str, object] = {}

    def apply(self, frame: Optional[Frame]) -> Dict[str, ViewDiff]:
        if frame is None:
            return {"players": ViewDiff(), "bullets": ViewDiff()}
        return {
            "players": self._sync(self.players, frame.players),
            "bullets": self._sync(self.bullets, frame.bullets),
        }

    @staticmethod
    def _sync(rendered: Dict[str, object], incoming: Dict[str, object]) -> ViewDiff:
        diff = ViewDiff()
        for entity_id, entity in incoming.items():
            if entity_id in rendered:
                diff.updated.append(entity_id)
            else:
                diff.created.append(entity_id)
            rendered[entity_id] = entity
        for entity_id in [eid for eid in rendered if eid not in incoming]:
            del rendered[entity_id]
            diff.removed.append(entity_id)
        return diff


__all__ = ["ViewDiff", "ViewReconciler"]
