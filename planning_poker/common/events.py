"""Socket.IO event names exchanged between browsers and the room server.

Inbound events are sent by clients, outbound events are emitted by the
server either to the caller or to every connection subscribed to a room.
"""

from enum import Enum


class ClientEvent(str, Enum):
    """Events received from clients."""

    CREATE_ROOM = "create-room"
    JOIN_ROOM = "join-room"
    CHECK_ROOM_EXISTS = "check-room-exists"
    LIST_ROOMS = "list-rooms"
    GET_ROOM_DATA = "get-room-data"
    VOTE = "vote"
    REVEAL_VOTES = "reveal-votes"
    RESET_VOTES = "reset-votes"
    CREATE_ITEM = "create-item"
    DELETE_ITEM = "delete-item"
    SET_ACTIVE_ITEM = "set-active-item"
    REMOVE_USER = "remove-user"


class ServerEvent(str, Enum):
    """Events emitted to clients."""

    ROOM_CREATED = "room-created"
    ROOM_DATA = "room-data"
    UPDATED_MEMBERS = "updated-members"
    ALL_VOTED = "all-voted"
    VOTES_REVEALED = "votes-revealed"
    VOTES_RESET = "votes-reset"
    ITEM_LIST = "item-list"
    REMOVED = "removed"
