"""Socket.IO handlers for casting, revealing and resetting votes."""

from flask import request, current_app
from flask_socketio import emit

from planning_poker.common.events import ClientEvent, ServerEvent
from planning_poker.server.socket_handlers.room_events import (
    broadcast_item_list,
    broadcast_members,
    broadcast_votes_reset,
)
from planning_poker.server.utils.socket_payload import socket_payload
from planning_poker.server.utils.validation import validate_card, validate_room_id


def register_handlers(socketio):
    """Register voting Socket.IO event handlers."""

    @socketio.on(ClientEvent.VOTE.value)
    @socket_payload('roomId', 'vote')
    def handle_vote(data):
        """Record the caller's hidden vote.

        Expected data: {
            "roomId": "AB12CD",
            "vote": "5"
        }

        The room only learns that the caller has voted, not the value.
        """
        room_id = validate_room_id(data['roomId'])
        vote = validate_card(data['vote'])

        room_controller = current_app.extensions['room_controller']
        result = room_controller.cast_vote(room_id, request.sid, vote)
        if result is None:
            return

        room = result['room']
        broadcast_members(room)
        if result['all_voted']:
            emit(ServerEvent.ALL_VOTED.value, room=room.id)

    @socketio.on(ClientEvent.REVEAL_VOTES.value)
    @socket_payload('roomId')
    def handle_reveal_votes(data):
        room_id = validate_room_id(data['roomId'])
        room_controller = current_app.extensions['room_controller']
        room = room_controller.reveal_votes(room_id)
        if room is None:
            return

        emit(ServerEvent.VOTES_REVEALED.value, {
            'votes': room.vote_list(),
            'average': room.average
        }, room=room.id)
        broadcast_item_list(room)

    @socketio.on(ClientEvent.RESET_VOTES.value)
    @socket_payload('roomId')
    def handle_reset_votes(data):
        room_id = validate_room_id(data['roomId'])
        room_controller = current_app.extensions['room_controller']
        room = room_controller.reset_votes(room_id)
        if room is None:
            return

        broadcast_votes_reset(room)
        broadcast_members(room)
