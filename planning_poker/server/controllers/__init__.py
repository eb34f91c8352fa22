from planning_poker.server.controllers.room_controller import RoomController

__all__ = ["RoomController"]
