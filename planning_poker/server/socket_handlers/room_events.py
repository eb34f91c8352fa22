"""Broadcast helpers shared by the socket handlers.

These run inside a Socket.IO request context and emit to every connection
subscribed to the room.
"""

from flask_socketio import emit

from planning_poker.common.events import ServerEvent
from planning_poker.common.models import Room


def broadcast_members(room: Room):
    """Send member names with vote-presence flags; never vote values."""
    emit(ServerEvent.UPDATED_MEMBERS.value, {'members': room.member_list()}, room=room.id)


def broadcast_item_list(room: Room):
    emit(ServerEvent.ITEM_LIST.value, room.item_list(), room=room.id)


def broadcast_votes_reset(room: Room):
    emit(ServerEvent.VOTES_RESET.value, room=room.id)
