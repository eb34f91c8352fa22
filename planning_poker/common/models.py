"""Room and story state plus the projections sent over the wire."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterable, List, Optional

# Average shown while votes are hidden or no vote is numeric.
NO_DATA = "?"

_TWO_PLACES = Decimal("0.01")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass
class Story:
    """A work item estimated inside a room."""

    id: str
    name: str
    created_at: datetime = field(default_factory=utc_now)
    revealed: bool = False
    average: str = NO_DATA

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": to_epoch_millis(self.created_at),
            "revealed": self.revealed,
            "average": self.average,
        }


@dataclass
class Room:
    """Voting session state.

    ``members`` and ``votes`` are both keyed by connection id (Socket.IO sid);
    display names are values only.
    """

    id: str
    name: str
    sequence: List[str]
    members: Dict[str, str] = field(default_factory=dict)
    votes: Dict[str, str] = field(default_factory=dict)
    stories: List[Story] = field(default_factory=list)
    active_story_id: Optional[str] = None
    revealed: bool = False
    average: str = NO_DATA
    # all-voted has been sent for the current complete round
    completion_signalled: bool = False
    created_at: datetime = field(default_factory=utc_now)

    @property
    def active_story(self) -> Optional[Story]:
        return self.find_story(self.active_story_id) if self.active_story_id else None

    def find_story(self, story_id: str) -> Optional[Story]:
        for story in self.stories:
            if story.id == story_id:
                return story
        return None

    def find_member(self, display_name: str) -> Optional[str]:
        """Return the connection id holding ``display_name``, if any."""
        for sid, name in self.members.items():
            if name == display_name:
                return sid
        return None

    def reset_votes(self) -> None:
        self.votes = {}
        self.revealed = False
        self.average = NO_DATA
        self.completion_signalled = False

    def remove_member(self, sid: str) -> Optional[str]:
        self.votes.pop(sid, None)
        return self.members.pop(sid, None)

    @property
    def all_voted(self) -> bool:
        return len(self.members) > 0 and len(self.members) == len(self.votes)

    def sync_completion(self) -> None:
        """Forget a sent all-voted once the round is no longer complete."""
        if not self.all_voted:
            self.completion_signalled = False

    # ==================== Wire projections ====================

    def member_list(self) -> List[Dict[str, Any]]:
        return [
            {"name": name, "hasVoted": sid in self.votes}
            for sid, name in self.members.items()
        ]

    def vote_list(self) -> List[Dict[str, Any]]:
        """Individual votes; empty until the room is revealed."""
        if not self.revealed:
            return []
        return [
            {"user": self.members[sid], "vote": vote}
            for sid, vote in self.votes.items()
            if sid in self.members
        ]

    def story_list(self) -> List[Dict[str, Any]]:
        return [story.to_dict() for story in self.stories]

    def item_list(self) -> Dict[str, Any]:
        return {"items": self.story_list(), "activeItemId": self.active_story_id}

    def snapshot(self) -> Dict[str, Any]:
        """Payload of the ``room-data`` event."""
        return {
            "roomName": self.name,
            "cardOptions": list(self.sequence),
            "members": self.member_list(),
            "votes": self.vote_list(),
            "votingOpen": not self.revealed,
            "items": self.story_list(),
            "activeItemId": self.active_story_id,
        }

    def summary(self) -> Dict[str, Any]:
        """Read-only description used by room listings."""
        return {
            "roomId": self.id,
            "roomName": self.name,
            "members": list(self.members.values()),
            "memberCount": len(self.members),
            "sequence": list(self.sequence),
            "revealed": self.revealed,
            "average": self.average,
            "items": self.story_list(),
            "activeItemId": self.active_story_id,
            "createdAt": to_epoch_millis(self.created_at),
        }


def new_room(
    room_id: str,
    name: str,
    sequence: Iterable[Any],
    now: Optional[datetime] = None,
) -> Room:
    """Build a room with empty membership and hidden votes."""
    return Room(
        id=room_id,
        name=name,
        sequence=[str(card) for card in sequence],
        created_at=now or utc_now(),
    )


def parse_vote(value: str) -> Optional[Decimal]:
    """Return the numeric value of a vote, or None for cards like ``?``.

    Votes are read like floating-point numbers, so magnitudes beyond the
    float range count as non-finite.
    """
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or math.isinf(float(number)):
        return None
    return number


def calculate_average(values: Iterable[str]) -> str:
    """Mean of the numeric votes, half-up rounded to two places.

    >>> calculate_average(["3", "5", "?"])
    '4.00'
    """
    numbers = [n for n in (parse_vote(v) for v in values) if n is not None]
    if not numbers:
        return NO_DATA
    mean = sum(numbers, Decimal(0)) / len(numbers)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two decimal places
        ctx.prec = max(ctx.prec, mean.adjusted() + 3)
        return str(mean.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
