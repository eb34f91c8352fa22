"""Pytest configuration and fixtures for planning poker server tests."""

from typing import Any, Dict, List

import pytest

from planning_poker.common.repositories.room_repository import RoomRepository
from planning_poker.common.utils.config import Settings
from planning_poker.server.app import create_app
from planning_poker.server.controllers.room_controller import RoomController


SPRINT_SEQUENCE = ["1", "2", "3", "5", "8", "?"]


def events_named(received: List[Dict[str, Any]], name: str) -> List[List[Any]]:
    """Argument lists of every received event called ``name``."""
    return [event['args'] for event in received if event['name'] == name]


@pytest.fixture
def app_settings():
    """Default settings, ignoring the process environment."""
    return Settings.from_env({})


@pytest.fixture
def app(app_settings):
    """Create application instance for testing.

    Uses the threading async mode and skips the background sweeper.
    """
    return create_app(app_settings, testing=True)


@pytest.fixture
def client(app):
    """Create HTTP test client."""
    return app.test_client()


@pytest.fixture
def socketio(app):
    return app.extensions['socketio']


@pytest.fixture
def room_controller(app):
    return app.extensions['room_controller']


@pytest.fixture
def socket_client_factory(app, socketio):
    """Build Socket.IO test clients, one per simulated browser."""
    clients = []

    def _make():
        socket_client = socketio.test_client(app)
        clients.append(socket_client)
        return socket_client

    yield _make

    for socket_client in clients:
        if socket_client.is_connected():
            socket_client.disconnect()


@pytest.fixture
def create_room(socket_client_factory):
    """Create a room from a fresh connection; returns (host_client, room_id)."""

    def _create(room_name="Sprint 1", sequence=None):
        host = socket_client_factory()
        host.emit('create-room', {
            'roomName': room_name,
            'sequence': sequence or SPRINT_SEQUENCE,
        })
        created = events_named(host.get_received(), 'room-created')
        assert len(created) == 1
        return host, created[0][0]['roomId']

    return _create


@pytest.fixture
def join(socket_client_factory):
    """Join ``room_id`` as ``user_name`` from a new connection."""

    def _join(room_id, user_name):
        member = socket_client_factory()
        ack = member.emit('join-room', {'roomId': room_id, 'userName': user_name}, callback=True)
        assert ack == {'joined': True, 'roomId': room_id}
        return member

    return _join


@pytest.fixture
def repository():
    return RoomRepository()


@pytest.fixture
def controller(repository):
    return RoomController(repository)
