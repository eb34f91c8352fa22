"""Tests for the expiry sweeper."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from conftest import events_named
from planning_poker.server.tasks.room_sweeper import run_room_sweeper, sweep_expired_rooms

MAX_AGE = timedelta(hours=3)
NOW = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


class _StopSweeper(Exception):
    pass


def test_sweep_deletes_only_rooms_older_than_max_age(controller):
    old = controller.create_room("Old", ["1"], now=NOW - MAX_AGE - timedelta(minutes=1))
    boundary = controller.create_room("Boundary", ["1"], now=NOW - MAX_AGE)
    young = controller.create_room("Young", ["1"], now=NOW - timedelta(hours=1))
    socketio = MagicMock()

    expired = sweep_expired_rooms(socketio, controller, MAX_AGE, now=NOW)

    assert expired == [old.id]
    assert controller.room_exists(old.id) is False
    assert controller.room_exists(boundary.id) is True
    assert controller.room_exists(young.id) is True
    socketio.emit.assert_called_once_with('removed', room=old.id, namespace='/')
    socketio.close_room.assert_called_once_with(old.id, namespace='/')


def test_sweep_notifies_room_before_deleting_it(controller):
    old = controller.create_room("Old", ["1"], now=NOW - MAX_AGE * 2)
    socketio = MagicMock()

    def _emit(*args, **kwargs):
        assert controller.room_exists(old.id)

    socketio.emit.side_effect = _emit

    sweep_expired_rooms(socketio, controller, MAX_AGE, now=NOW)

    assert controller.room_exists(old.id) is False


def test_sweep_broadcasts_removed_to_connected_members(socketio, room_controller, create_room, join):
    host, room_id = create_room()
    ana = join(room_id, "Ana")
    ana.get_received()

    later = datetime.now(timezone.utc) + MAX_AGE + timedelta(minutes=1)
    expired = sweep_expired_rooms(socketio, room_controller, MAX_AGE, now=later)

    assert expired == [room_id]
    assert len(events_named(ana.get_received(), 'removed')) == 1
    assert len(events_named(host.get_received(), 'removed')) == 1
    assert room_controller.room_exists(room_id) is False


def test_run_room_sweeper_sweeps_each_interval(app, room_controller):
    old = room_controller.create_room(
        "Old", ["1"], now=datetime.now(timezone.utc) - timedelta(days=1)
    )
    socketio = MagicMock()
    socketio.sleep.side_effect = [None, _StopSweeper()]

    with pytest.raises(_StopSweeper):
        run_room_sweeper(socketio, app)

    assert room_controller.room_exists(old.id) is False
    socketio.sleep.assert_called_with(app.extensions['settings'].room_sweep_interval_seconds)


def test_run_room_sweeper_survives_a_failing_pass(app, room_controller, monkeypatch):
    calls = []

    def _failing(*args, **kwargs):
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(room_controller, "get_expired_rooms", _failing)
    socketio = MagicMock()
    socketio.sleep.side_effect = [None, None, _StopSweeper()]

    with pytest.raises(_StopSweeper):
        run_room_sweeper(socketio, app)

    assert len(calls) == 2
