"""Snapshot buffering and interpolation on the client."""

from __future__ import annotations

import pytest

from skirmish.client.sync import ClientSynchronizer
from skirmish.protocol import BulletView, PlayerView, Snapshot


def _snapshot(t: float, x: float, **extra) -> Snapshot:
    return Snapshot(t=t, players=[PlayerView(id="p1", x=x, y=2 * x, hp=1.0, **extra)])


def _synced(prev: Snapshot, nxt: Snapshot, arrival: float = 1000.0) -> ClientSynchronizer:
    sync = ClientSynchronizer()
    sync.receive(prev, local_now=arrival - (nxt.t - prev.t))
    sync.receive(nxt, local_now=arrival)
    return sync


def test_render_without_snapshots_returns_none() -> None:
    assert ClientSynchronizer().render(0.0) is None


def test_single_snapshot_renders_verbatim() -> None:
    sync = ClientSynchronizer()
    sync.receive(_snapshot(50.0, 10.0), local_now=5.0)
    frame = sync.render(1e6)
    assert frame.players["p1"].x == 10.0
    assert frame.t == 50.0


def test_offset_is_recomputed_per_snapshot() -> None:
    sync = ClientSynchronizer()
    sync.receive(_snapshot(500.0, 0.0), local_now=100.0)
    assert sync.offset == 400.0
    sync.receive(_snapshot(600.0, 0.0), local_now=250.0)
    assert sync.offset == 350.0
    assert sync.server_time(300.0) == 650.0


@pytest.mark.parametrize(
    "server_now, expected",
    [(25.0, 25.0), (0.0, 0.0), (-40.0, 0.0), (100.0, 100.0), (180.0, 100.0), (50.0, 50.0)],
)
def test_interpolates_between_buffered_snapshots(server_now: float, expected: float) -> None:
    sync = _synced(_snapshot(0.0, 0.0), _snapshot(100.0, 100.0), arrival=1000.0)
    # offset = 100 - 1000, so local time 900 + s maps to server time s
    frame = sync.render(900.0 + server_now)
    assert frame.players["p1"].x == pytest.approx(expected)
    assert frame.players["p1"].y == pytest.approx(2 * expected)


def test_non_positional_fields_come_from_newest_snapshot() -> None:
    sync = _synced(_snapshot(0.0, 0.0, score=1, deaths=0), _snapshot(100.0, 100.0, score=4, deaths=2))
    frame = sync.render(950.0)
    assert frame.players["p1"].score == 4
    assert frame.players["p1"].deaths == 2


def test_equal_timestamps_fall_back_to_newest() -> None:
    sync = ClientSynchronizer()
    sync.receive(_snapshot(100.0, 0.0), local_now=0.0)
    sync.receive(_snapshot(100.0, 60.0), local_now=10.0)
    frame = sync.render(5.0)
    assert frame.players["p1"].x == 60.0


def test_late_stale_snapshot_is_ignored() -> None:
    sync = ClientSynchronizer()
    sync.receive(_snapshot(100.0, 100.0), local_now=0.0)
    assert sync.receive(_snapshot(0.0, 0.0), local_now=5.0) is False
    assert [snapshot.t for snapshot in sync.buffer] == [100.0]
    assert sync.offset == 100.0
    assert sync.render(1.0).players["p1"].x == 100.0


def test_stale_snapshot_does_not_displace_interpolation_pair() -> None:
    sync = _synced(_snapshot(0.0, 0.0), _snapshot(100.0, 100.0), arrival=1000.0)
    sync.receive(_snapshot(50.0, 999.0), local_now=1010.0)
    assert [snapshot.t for snapshot in sync.buffer] == [0.0, 100.0]
    assert sync.render(925.0).players["p1"].x == pytest.approx(25.0)


def test_new_entities_use_latest_values_and_vanished_ones_drop() -> None:
    prev = Snapshot(
        t=0.0,
        players=[PlayerView(id="old", x=0.0, y=0.0, hp=1.0)],
        bullets=[BulletView(id="b1", x=0.0, y=0.0)],
    )
    nxt = Snapshot(
        t=100.0,
        players=[PlayerView(id="new", x=40.0, y=40.0, hp=0.6)],
        bullets=[BulletView(id="b1", x=100.0, y=0.0), BulletView(id="b2", x=7.0, y=8.0)],
    )
    frame = _synced(prev, nxt).render(950.0)
    assert list(frame.players) == ["new"]
    assert frame.players["new"].x == 40.0
    assert frame.bullets["b1"].x == pytest.approx(50.0)
    assert (frame.bullets["b2"].x, frame.bullets["b2"].y) == (7.0, 8.0)


def test_buffer_keeps_two_most_recent() -> None:
    sync = ClientSynchronizer()
    for index in range(5):
        sync.receive(_snapshot(index * 100.0, index * 10.0), local_now=index * 100.0)
    assert [snapshot.t for snapshot in sync.buffer] == [300.0, 400.0]
    assert sync.latest.t == 400.0
