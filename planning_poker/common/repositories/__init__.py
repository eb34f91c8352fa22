from planning_poker.common.repositories.room_repository import RoomRepository

__all__ = ["RoomRepository"]
