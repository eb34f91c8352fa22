"""Socket.IO handlers for room lifecycle and membership.

Handlers resolve the room controller from ``current_app.extensions`` and
only emit once the controller has finished mutating the room. Events that
reference a room or member that no longer exists are dropped without a
reply; the controller logs them.
"""

import logging
from flask import request, current_app
from flask_socketio import emit, join_room, leave_room

from planning_poker.common.events import ClientEvent, ServerEvent
from planning_poker.server.socket_handlers.room_events import broadcast_members
from planning_poker.server.utils.socket_payload import socket_payload
from planning_poker.server.utils.validation import (
    validate_room_id,
    validate_sequence,
    validate_text,
)

logger = logging.getLogger(__name__)


def register_handlers(socketio):
    """Register room-related Socket.IO event handlers."""

    @socketio.on('connect')
    def handle_connect():
        logger.info("client_connected sid=%s", request.sid)

    @socketio.on(ClientEvent.CREATE_ROOM.value)
    @socket_payload('roomName', 'sequence')
    def handle_create_room(data):
        """Create a room and subscribe the creator to its channel.

        Expected data: {
            "roomName": "Sprint 1",
            "sequence": ["1", "2", "3", "5", "8", "?"]
        }
        """
        room_name = validate_text(data['roomName'], 'roomName')
        sequence = validate_sequence(data['sequence'])

        room_controller = current_app.extensions['room_controller']
        room = room_controller.create_room(room_name, sequence)

        join_room(room.id)
        emit(ServerEvent.ROOM_CREATED.value, {'roomId': room.id})

    @socketio.on(ClientEvent.JOIN_ROOM.value)
    @socket_payload('roomId', 'userName')
    def handle_join_room(data):
        """Join a room as a member.

        Expected data: {
            "roomId": "AB12CD",
            "userName": "Ana"
        }

        The return value is sent back as the acknowledgement.
        """
        room_id = validate_room_id(data['roomId'])
        user_name = validate_text(data['userName'], 'userName')

        room_controller = current_app.extensions['room_controller']
        result = room_controller.join_room(room_id, request.sid, user_name)
        if result is None:
            return None

        if not result['joined']:
            return {'joined': False, 'reason': result['reason']}

        room = result['room']
        join_room(room.id)
        broadcast_members(room)
        emit(ServerEvent.ROOM_DATA.value, room.snapshot())
        return {'joined': True, 'roomId': room.id}

    @socketio.on(ClientEvent.CHECK_ROOM_EXISTS.value)
    @socket_payload('roomId')
    def handle_check_room_exists(data):
        room_id = validate_room_id(data['roomId'])
        room_controller = current_app.extensions['room_controller']
        return {'exists': room_controller.room_exists(room_id)}

    @socketio.on(ClientEvent.LIST_ROOMS.value)
    def handle_list_rooms(*args):
        room_controller = current_app.extensions['room_controller']
        return room_controller.list_rooms()

    @socketio.on(ClientEvent.GET_ROOM_DATA.value)
    @socket_payload('roomId')
    def handle_get_room_data(data):
        room_id = validate_room_id(data['roomId'])
        room_controller = current_app.extensions['room_controller']
        room = room_controller.get_room(room_id)
        if room is None:
            return

        emit(ServerEvent.ROOM_DATA.value, room.snapshot())

    @socketio.on(ClientEvent.REMOVE_USER.value)
    @socket_payload('roomId', 'userName')
    def handle_remove_user(data):
        """Remove a member by display name.

        Expected data: {
            "roomId": "AB12CD",
            "userName": "Bo"
        }
        """
        room_id = validate_room_id(data['roomId'])
        user_name = validate_text(data['userName'], 'userName')

        room_controller = current_app.extensions['room_controller']
        result = room_controller.remove_member(room_id, user_name)
        if result is None:
            return

        room, removed_sid = result['room'], result['sid']
        emit(ServerEvent.REMOVED.value, room=removed_sid)
        leave_room(room.id, sid=removed_sid)
        broadcast_members(room)

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Drop the connection from its room; empty rooms are deleted."""
        room_controller = current_app.extensions['room_controller']
        result = room_controller.disconnect(request.sid)
        if result is None:
            logger.info("client_disconnected sid=%s reason=%s", request.sid, reason)
            return

        if not result['deleted']:
            broadcast_members(result['room'])
