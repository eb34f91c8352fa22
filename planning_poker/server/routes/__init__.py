from planning_poker.server.routes.health_routes import init_health_routes
from planning_poker.server.routes.room_routes import init_room_routes

__all__ = ["init_health_routes", "init_room_routes"]
