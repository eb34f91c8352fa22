"""In-memory registry of active rooms.

The repository is the only owner of room state. It is created once per
application by ``create_app`` and handed to the controller, so tests get a
fresh store each time. All access happens on the server's single cooperative
event loop, which is why no locking is done here.
"""

from __future__ import annotations

import logging
import random
import string
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from planning_poker.common.models import Room, new_room
from planning_poker.common.utils.config import MIN_ROOM_ID_LENGTH

logger = logging.getLogger(__name__)

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits
ROOM_ID_MAX_ATTEMPTS = 100


class RoomRepository:
    """Process-wide mapping of room id to ``Room``."""

    def __init__(self, room_id_length: int = MIN_ROOM_ID_LENGTH) -> None:
        if room_id_length < MIN_ROOM_ID_LENGTH:
            raise ValueError(f"room_id_length must be at least {MIN_ROOM_ID_LENGTH}")
        self.room_id_length = room_id_length
        self._rooms: Dict[str, Room] = {}

    def _generate_room_id(self) -> str:
        """Draw a room id that is not in use, retrying on collision."""
        for _ in range(ROOM_ID_MAX_ATTEMPTS):
            room_id = "".join(random.choices(ROOM_ID_ALPHABET, k=self.room_id_length))
            if room_id not in self._rooms:
                return room_id
            logger.warning("room_id_collision room=%s", room_id)
        raise RuntimeError("Could not generate a unique room id")

    def create(
        self, name: str, sequence: Iterable[Any], now: Optional[datetime] = None
    ) -> Room:
        room = new_room(self._generate_room_id(), name, sequence, now=now)
        self._rooms[room.id] = room
        logger.debug("room_stored room=%s total=%d", room.id, len(self._rooms))
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def exists(self, room_id: str) -> bool:
        return room_id in self._rooms

    def delete(self, room_id: str) -> Optional[Room]:
        room = self._rooms.pop(room_id, None)
        if room is not None:
            logger.debug("room_deleted room=%s total=%d", room_id, len(self._rooms))
        return room

    def list(self) -> List[Room]:
        return list(self._rooms.values())

    def find_by_member(self, sid: str) -> Optional[Room]:
        """First room, in creation order, that has ``sid`` as a member."""
        for room in self._rooms.values():
            if sid in room.members:
                return room
        return None

    def __iter__(self) -> Iterator[Room]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms
