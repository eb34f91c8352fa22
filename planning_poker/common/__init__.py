"""Room state shared by the socket handlers, HTTP routes and sweeper."""

from planning_poker.common.events import ClientEvent, ServerEvent
from planning_poker.common.models import NO_DATA, Room, Story, calculate_average, new_room
from planning_poker.common.repositories import RoomRepository

__all__ = [
    "ClientEvent",
    "ServerEvent",
    "NO_DATA",
    "Room",
    "Story",
    "RoomRepository",
    "calculate_average",
    "new_room",
]
