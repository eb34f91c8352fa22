from planning_poker.server.tasks.room_sweeper import (
    run_room_sweeper,
    start_room_sweeper,
    sweep_expired_rooms,
)

__all__ = ["run_room_sweeper", "start_room_sweeper", "sweep_expired_rooms"]
