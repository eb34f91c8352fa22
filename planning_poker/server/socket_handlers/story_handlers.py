"""Socket.IO handlers for the story (work item) list of a room.

Creating a story or switching the active one restarts voting, so these
handlers broadcast ``votes-reset`` alongside the new item list.
"""

from flask import current_app

from planning_poker.common.events import ClientEvent
from planning_poker.server.socket_handlers.room_events import (
    broadcast_item_list,
    broadcast_members,
    broadcast_votes_reset,
)
from planning_poker.server.utils.socket_payload import socket_payload
from planning_poker.server.utils.validation import validate_room_id, validate_text


def register_handlers(socketio):
    """Register story-related Socket.IO event handlers."""

    @socketio.on(ClientEvent.CREATE_ITEM.value)
    @socket_payload('roomId', 'itemName')
    def handle_create_item(data):
        """
        Expected data: {
            "roomId": "AB12CD",
            "itemName": "Login page"
        }
        """
        room_id = validate_room_id(data['roomId'])
        item_name = validate_text(data['itemName'], 'itemName')

        room_controller = current_app.extensions['room_controller']
        room = room_controller.create_story(room_id, item_name)
        if room is None:
            return

        broadcast_item_list(room)
        broadcast_votes_reset(room)

    @socketio.on(ClientEvent.DELETE_ITEM.value)
    @socket_payload('roomId', 'itemId')
    def handle_delete_item(data):
        """
        Expected data: {
            "roomId": "AB12CD",
            "itemId": "k3j9x1"
        }
        """
        room_id = validate_room_id(data['roomId'])
        item_id = validate_text(data['itemId'], 'itemId')

        room_controller = current_app.extensions['room_controller']
        result = room_controller.delete_story(room_id, item_id)
        if result is None:
            return

        room = result['room']
        if result['was_active']:
            broadcast_votes_reset(room)
        broadcast_item_list(room)

    @socketio.on(ClientEvent.SET_ACTIVE_ITEM.value)
    @socket_payload('roomId', 'itemId')
    def handle_set_active_item(data):
        """
        Expected data: {
            "roomId": "AB12CD",
            "itemId": "k3j9x1"
        }
        """
        room_id = validate_room_id(data['roomId'])
        item_id = validate_text(data['itemId'], 'itemId')

        room_controller = current_app.extensions['room_controller']
        room = room_controller.set_active_story(room_id, item_id)
        if room is None:
            return

        broadcast_votes_reset(room)
        broadcast_item_list(room)
        broadcast_members(room)
