"""Background eviction of rooms older than the configured maximum age.

The sweeper runs as a SocketIO background task, so with eventlet it shares
the green-thread loop with the event handlers and a pass never interleaves
with a handler mid-mutation. Expiry is coarse: a room can outlive its
maximum age by up to one sweep interval.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from planning_poker.common.events import ServerEvent

logger = logging.getLogger(__name__)


def sweep_expired_rooms(socketio, room_controller, max_age: timedelta, now: Optional[datetime] = None) -> List[str]:
    """Delete every room older than ``max_age``; return the deleted ids.

    A room exactly ``max_age`` old is kept. Subscribers get ``removed``
    before the room goes away.
    """
    expired = room_controller.get_expired_rooms(max_age, now=now)
    for room in expired:
        socketio.emit(ServerEvent.REMOVED.value, room=room.id, namespace='/')
        socketio.close_room(room.id, namespace='/')
        room_controller.delete_room(room.id)
        logger.info("room_expired room=%s members=%d", room.id, len(room.members))
    return [room.id for room in expired]


def run_room_sweeper(socketio, app):
    """Loop forever, sweeping every ``room_sweep_interval_seconds``."""
    app_settings = app.extensions['settings']
    interval = app_settings.room_sweep_interval_seconds
    max_age = timedelta(hours=app_settings.room_max_age_hours)
    logger.info("room_sweeper_started interval=%ds max_age=%s", interval, max_age)

    while True:
        socketio.sleep(interval)
        with app.app_context():
            try:
                room_controller = app.extensions['room_controller']
                expired = sweep_expired_rooms(socketio, room_controller, max_age)
                if expired:
                    logger.info("room_sweep_completed expired=%d", len(expired))
            except Exception as e:
                logger.error("room_sweep_failed error=%s", e, exc_info=True)


def start_room_sweeper(socketio, app):
    """Start the sweeper loop as a SocketIO background task."""
    return socketio.start_background_task(run_room_sweeper, socketio, app)
