"""State transitions for planning poker rooms.

Every method reads and mutates the repository without yielding and returns
the data the socket handlers need to broadcast. A missing room, member or
story is not an error: the method logs it and returns ``None`` so the
handler can drop the event.
"""

import logging
import random
import string
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from planning_poker.common.models import Room, Story, calculate_average, utc_now
from planning_poker.common.repositories.room_repository import RoomRepository

logger = logging.getLogger(__name__)

STORY_ID_ALPHABET = string.ascii_lowercase + string.digits
STORY_ID_LENGTH = 6
STORY_ID_MAX_ATTEMPTS = 100


class RoomController:
    def __init__(self, room_repository: RoomRepository, duplicate_name_policy: str = "reconnect"):
        self.room_repository = room_repository
        self.duplicate_name_policy = duplicate_name_policy

    def _get_room(self, room_id: str, action: str) -> Optional[Room]:
        room = self.room_repository.get(room_id)
        if room is None:
            logger.info("room_not_found action=%s room=%s", action, room_id)
        return room

    # ==================== Rooms ====================

    def create_room(self, name: str, sequence: Iterable[Any], now: Optional[datetime] = None) -> Room:
        room = self.room_repository.create(name, sequence, now=now)
        logger.info("room_created room=%s name=%s cards=%d", room.id, name, len(room.sequence))
        return room

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._get_room(room_id, "get_room")

    def room_exists(self, room_id: str) -> bool:
        return self.room_repository.exists(room_id)

    def list_rooms(self) -> List[Dict[str, Any]]:
        return [room.summary() for room in self.room_repository]

    def delete_room(self, room_id: str) -> Optional[Room]:
        return self.room_repository.delete(room_id)

    def get_expired_rooms(self, max_age: timedelta, now: Optional[datetime] = None) -> List[Room]:
        """Rooms whose age is strictly greater than ``max_age``."""
        now = now or utc_now()
        return [room for room in self.room_repository if now - room.created_at > max_age]

    # ==================== Membership ====================

    def join_room(self, room_id: str, sid: str, user_name: str) -> Optional[Dict[str, Any]]:
        """Add ``sid`` to the room under ``user_name``.

        When another connection already holds the name, the duplicate-name
        policy decides: ``reconnect`` moves that entry (and its vote) to
        ``sid``, ``reject`` leaves the room untouched.
        """
        room = self._get_room(room_id, "join_room")
        if room is None:
            return None

        result = {"room": room, "joined": True, "reason": None, "migrated_from": None}
        existing_sid = room.find_member(user_name)

        if existing_sid is not None and existing_sid != sid:
            if self.duplicate_name_policy == "reject":
                logger.info("join_rejected_name_taken room=%s user=%s sid=%s", room_id, user_name, sid)
                result.update(joined=False, reason="name-taken")
                return result

            previous_name = room.members.get(sid)
            if previous_name is not None:
                # sid gives up its own entry and vote for the one it takes over
                room.votes.pop(sid, None)
                logger.info(
                    "member_replaced_own_entry room=%s old_user=%s user=%s sid=%s",
                    room_id, previous_name, user_name, sid,
                )

            vote = room.votes.pop(existing_sid, None)
            del room.members[existing_sid]
            room.members[sid] = user_name
            if vote is not None:
                room.votes[sid] = vote
            room.sync_completion()
            result["migrated_from"] = existing_sid
            logger.info(
                "member_reconnected room=%s user=%s old_sid=%s sid=%s vote_kept=%s",
                room_id, user_name, existing_sid, sid, vote is not None,
            )
            return result

        room.members[sid] = user_name
        room.sync_completion()
        logger.info("member_joined room=%s user=%s sid=%s members=%d", room_id, user_name, sid, len(room.members))
        return result

    def remove_member(self, room_id: str, user_name: str) -> Optional[Dict[str, Any]]:
        room = self._get_room(room_id, "remove_member")
        if room is None:
            return None

        sid = room.find_member(user_name)
        if sid is None:
            logger.info("member_not_found action=remove_member room=%s user=%s", room_id, user_name)
            return None

        room.remove_member(sid)
        logger.info("member_removed room=%s user=%s sid=%s", room_id, user_name, sid)
        return {"room": room, "sid": sid}

    def disconnect(self, sid: str) -> Optional[Dict[str, Any]]:
        """Drop ``sid`` from the first room it belongs to.

        A connection is expected to be a member of at most one room. The room
        is deleted when its last member leaves.
        """
        room = self.room_repository.find_by_member(sid)
        if room is None:
            return None

        user_name = room.remove_member(sid)
        deleted = not room.members
        if deleted:
            self.room_repository.delete(room.id)
        logger.info(
            "member_disconnected room=%s user=%s sid=%s room_deleted=%s",
            room.id, user_name, sid, deleted,
        )
        return {"room": room, "deleted": deleted}

    # ==================== Stories ====================

    def _generate_story_id(self, room: Room) -> str:
        for _ in range(STORY_ID_MAX_ATTEMPTS):
            story_id = "".join(random.choices(STORY_ID_ALPHABET, k=STORY_ID_LENGTH))
            if room.find_story(story_id) is None:
                return story_id
            logger.warning("story_id_collision room=%s story=%s", room.id, story_id)
        raise RuntimeError("Could not generate a unique story id")

    def create_story(self, room_id: str, story_name: str) -> Optional[Room]:
        """Append a story, make it active and restart voting."""
        room = self._get_room(room_id, "create_story")
        if room is None:
            return None

        story = Story(id=self._generate_story_id(room), name=story_name)
        room.stories.append(story)
        room.active_story_id = story.id
        room.reset_votes()
        logger.info("story_created room=%s story=%s name=%s", room_id, story.id, story_name)
        return room

    def delete_story(self, room_id: str, story_id: str) -> Optional[Dict[str, Any]]:
        room = self._get_room(room_id, "delete_story")
        if room is None:
            return None

        story = room.find_story(story_id)
        if story is None:
            logger.info("story_not_found action=delete_story room=%s story=%s", room_id, story_id)
            return None

        room.stories.remove(story)
        was_active = room.active_story_id == story_id
        if was_active:
            room.active_story_id = None
            room.reset_votes()
        logger.info("story_deleted room=%s story=%s was_active=%s", room_id, story_id, was_active)
        return {"room": room, "was_active": was_active}

    def set_active_story(self, room_id: str, story_id: str) -> Optional[Room]:
        room = self._get_room(room_id, "set_active_story")
        if room is None:
            return None

        if room.find_story(story_id) is None:
            logger.info("story_not_found action=set_active_story room=%s story=%s", room_id, story_id)
            return None

        room.active_story_id = story_id
        room.reset_votes()
        logger.info("story_activated room=%s story=%s", room_id, story_id)
        return room

    # ==================== Voting ====================

    def cast_vote(self, room_id: str, sid: str, vote: str) -> Optional[Dict[str, Any]]:
        """Record the vote of a member.

        Completion is checked after every vote. ``all_voted`` is true for the
        first vote that finds the room complete, including a room completed
        by a departure; later vote changes in the same round stay quiet.
        """
        room = self._get_room(room_id, "cast_vote")
        if room is None:
            return None

        if sid not in room.members:
            logger.warning("vote_from_non_member room=%s sid=%s", room_id, sid)
            return None

        room.votes[sid] = vote
        all_voted = room.all_voted and not room.completion_signalled
        if all_voted:
            room.completion_signalled = True
        logger.info(
            "vote_cast room=%s sid=%s votes=%d members=%d all_voted=%s",
            room_id, sid, len(room.votes), len(room.members), all_voted,
        )
        return {"room": room, "all_voted": all_voted}

    def reveal_votes(self, room_id: str) -> Optional[Room]:
        room = self._get_room(room_id, "reveal_votes")
        if room is None:
            return None

        average = calculate_average(room.votes.values())
        room.revealed = True
        room.average = average
        story = room.active_story
        if story is not None:
            story.revealed = True
            story.average = average
        logger.info("votes_revealed room=%s votes=%d average=%s", room_id, len(room.votes), average)
        return room

    def reset_votes(self, room_id: str) -> Optional[Room]:
        room = self._get_room(room_id, "reset_votes")
        if room is None:
            return None

        room.reset_votes()
        logger.info("votes_reset room=%s", room_id)
        return room
