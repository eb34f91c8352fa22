"""Socket.IO event handlers for the planning poker server.

These handlers own the real-time protocol:
1. Room lifecycle and membership (create, join, lookups, remove, disconnect)
2. Voting (vote, reveal, reset)
3. Story list management (create, delete, activate)
"""

from planning_poker.server.socket_handlers import room_handlers
from planning_poker.server.socket_handlers import story_handlers
from planning_poker.server.socket_handlers import voting_handlers

__all__ = ['room_handlers', 'story_handlers', 'voting_handlers']
