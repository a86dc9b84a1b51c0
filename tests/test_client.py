"""Client-side input mapping, view diffing and message handling."""

from __future__ import annotations

import math

import pytest

from skirmish.client import ClientSession, InputGate, ViewReconciler
from skirmish.client.sync import Frame
from skirmish.protocol import BulletView, PlayerView


def _state(t: float, players, bullets=()) -> dict:
    return {
        "type": "state",
        "payload": {
            "t": t,
            "players": [{"id": pid, "x": x, "y": y, "hp": 1.0, "score": 0, "deaths": 0} for pid, x, y in players],
            "bullets": [{"id": bid, "x": x, "y": y} for bid, x, y in bullets],
        },
    }


# ----------------------------------------------------------------------
# Input gate
# ----------------------------------------------------------------------
def test_press_away_from_self_moves() -> None:
    gate = InputGate(aim_radius=24)
    assert gate.pointer_down(300.0, 200.0, me=(100.0, 100.0)) == {"type": "move", "payload": {"x": 300.0, "y": 200.0}}
    assert gate.aiming is False
    assert gate.pointer_up(300.0, 200.0, me=(100.0, 100.0)) is None


def test_press_on_self_aims_and_release_shoots() -> None:
    gate = InputGate(aim_radius=24)
    assert gate.pointer_down(110.0, 100.0, me=(100.0, 100.0)) is None
    assert gate.aiming is True
    command = gate.pointer_up(100.0, 200.0, me=(100.0, 100.0))
    assert command["type"] == "shoot"
    assert command["payload"]["angle"] == pytest.approx(math.pi / 2)
    assert gate.aiming is False


def test_release_clears_aim_even_without_local_player() -> None:
    gate = InputGate()
    gate.pointer_down(100.0, 100.0, me=(100.0, 100.0))
    assert gate.pointer_up(0.0, 0.0, me=None) is None
    assert gate.aiming is False


def test_no_commands_before_local_player_is_rendered() -> None:
    gate = InputGate()
    assert gate.pointer_down(10.0, 10.0, me=None) is None
    assert gate.aiming is False


# ----------------------------------------------------------------------
# View reconciliation
# ----------------------------------------------------------------------
def test_view_diff_creates_updates_and_removes() -> None:
    view = ViewReconciler()
    first = Frame(t=0.0, players={"a": PlayerView(id="a", x=0, y=0, hp=1)}, bullets={"b1": BulletView(id="b1", x=1, y=1)})
    diff = view.apply(first)
    assert diff["players"].created == ["a"]
    assert diff["bullets"].created == ["b1"]

    second = Frame(t=1.0, players={"a": PlayerView(id="a", x=5, y=0, hp=1), "c": PlayerView(id="c", x=0, y=0, hp=1)})
    diff = view.apply(second)
    assert diff["players"].updated == ["a"]
    assert diff["players"].created == ["c"]
    assert diff["bullets"].removed == ["b1"]
    assert view.players["a"].x == 5
    assert not view.bullets


def test_view_ignores_missing_frame() -> None:
    view = ViewReconciler()
    diff = view.apply(None)
    assert not diff["players"] and not diff["bullets"]


# ----------------------------------------------------------------------
# Client session
# ----------------------------------------------------------------------
def test_session_renders_interpolated_state_and_own_position() -> None:
    session = ClientSession()
    session.handle({"type": "init", "player_id": "me"}, local_now=0.0)
    session.handle(_state(1000.0, [("me", 100.0, 100.0), ("them", 0.0, 0.0)]), local_now=0.0)
    session.handle(_state(1100.0, [("me", 200.0, 100.0)], [("b", 5.0, 5.0)]), local_now=100.0)

    diff = session.render(50.0)
    assert diff["players"].created == ["me"]
    assert diff["bullets"].created == ["b"]
    assert session.local_position() == pytest.approx((150.0, 100.0))


def test_session_aims_from_rendered_position() -> None:
    session = ClientSession()
    session.handle({"type": "init", "player_id": "me"}, local_now=0.0)
    session.handle(_state(0.0, [("me", 100.0, 100.0)]), local_now=0.0)
    session.render(0.0)
    assert session.pointer_down(105.0, 100.0) is None
    command = session.pointer_up(200.0, 100.0)
    assert command == {"type": "shoot", "payload": {"angle": 0.0}}


def test_session_drops_malformed_snapshots(caplog) -> None:
    session = ClientSession()
    with caplog.at_level("WARNING"):
        session.handle({"type": "state", "payload": {"t": "soon", "players": []}}, local_now=0.0)
        session.handle({"type": "state", "payload": {"t": 1.0, "players": [{"id": "a", "x": None, "y": 1}]}}, local_now=0.0)
    assert not session.sync.buffer
    assert "malformed snapshot" in caplog.text


def test_session_reset_forgets_previous_identity() -> None:
    session = ClientSession()
    session.handle({"type": "init", "player_id": "me"}, local_now=0.0)
    session.handle(_state(0.0, [("me", 1.0, 1.0)]), local_now=0.0)
    session.render(0.0)
    session.reset()
    assert session.player_id is None
    assert session.local_position() is None
    assert session.sync.render(0.0) is None
