"""Planning poker Socket.IO server - application factory.

This module provides the Flask-SocketIO application for real-time rooms.
All room state lives in an in-memory RoomRepository owned by the app:
1. Socket.IO handlers mutate rooms through the RoomController
2. Socket.IO rooms (one per poker room) carry the broadcasts
3. A background task evicts rooms older than the configured maximum age

NOTE: Eventlet monkey patching is done in wsgi.py entry point
"""

import logging
from typing import Optional

from flask import Flask, request
from flask_cors import CORS
from flask_socketio import SocketIO
from prometheus_client import REGISTRY, CollectorRegistry, Gauge
from prometheus_flask_exporter import PrometheusMetrics

from planning_poker import __version__
from planning_poker.common.repositories.room_repository import RoomRepository
from planning_poker.common.utils.config import Settings, settings
from planning_poker.server.controllers.room_controller import RoomController

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_metrics(app: Flask, registry: Optional[CollectorRegistry] = None) -> None:
    """Expose Prometheus metrics, including the number of rooms in memory."""
    registry = registry or REGISTRY
    metrics = PrometheusMetrics(app, registry=registry)
    metrics.info("planning_poker_info", "Planning Poker Socket.IO Server", version=__version__)

    room_repository = app.extensions['room_repository']
    active_rooms = Gauge(
        "planning_poker_active_rooms",
        "Rooms currently held in memory",
        registry=registry,
    )
    active_rooms.set_function(lambda: len(room_repository))
    logger.info("prometheus_metrics_initialized")


def register_socket_handlers(socketio: SocketIO) -> None:
    from planning_poker.server.socket_handlers import room_handlers, story_handlers, voting_handlers
    room_handlers.register_handlers(socketio)
    voting_handlers.register_handlers(socketio)
    story_handlers.register_handlers(socketio)

    @socketio.on_error_default
    def handle_socket_error(e):
        """Log a failing handler; other connections and rooms carry on."""
        event = getattr(request, 'event', None) or {}
        logger.error(
            "socket_handler_error event=%s sid=%s error=%s",
            event.get('message'), request.sid, e, exc_info=True,
        )


def create_app(app_settings: Optional[Settings] = None, testing: bool = False) -> Flask:
    """Application factory for the planning poker server.

    With ``testing`` the app uses the threading async mode, a private
    metrics registry, and does not start the room sweeper.
    """
    app_settings = app_settings or settings
    app = Flask(__name__)
    app.config['TESTING'] = testing

    # Configure CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": app_settings.websocket_cors_origins,
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type"],
            "expose_headers": ["Content-Type"],
        }
    })

    socketio = SocketIO()
    socketio.init_app(
        app,
        cors_allowed_origins=app_settings.websocket_cors_origins,
        async_mode='threading' if testing else app_settings.socketio_async_mode,
        ping_interval=app_settings.websocket_ping_interval,
        ping_timeout=app_settings.websocket_ping_timeout,
        logger=app_settings.socketio_logger,
        engineio_logger=app_settings.socketio_logger
    )

    # Room state and services
    room_repository = RoomRepository(room_id_length=app_settings.room_id_length)
    room_controller = RoomController(
        room_repository,
        duplicate_name_policy=app_settings.duplicate_name_policy,
    )

    # Store dependencies in app.extensions
    app.extensions['settings'] = app_settings
    app.extensions['socketio'] = socketio
    app.extensions['room_repository'] = room_repository
    app.extensions['room_controller'] = room_controller

    setup_metrics(app, registry=CollectorRegistry() if testing else None)

    # Register HTTP routes
    from planning_poker.server.routes.health_routes import init_health_routes
    from planning_poker.server.routes.room_routes import init_room_routes
    app.register_blueprint(init_health_routes())
    app.register_blueprint(init_room_routes(room_controller))

    register_socket_handlers(socketio)

    if not testing:
        from planning_poker.server.tasks.room_sweeper import start_room_sweeper
        start_room_sweeper(socketio, app)

    logger.info(
        "planning_poker_server_initialized async_mode=%s duplicate_name_policy=%s max_room_age_hours=%s",
        socketio.async_mode, app_settings.duplicate_name_policy, app_settings.room_max_age_hours,
    )
    return app


def main():
    app = create_app()
    logger.info("=" * 60)
    logger.info("Starting Planning Poker Server on %s:%s", settings.host, settings.port)
    logger.info("=" * 60)
    app.extensions['socketio'].run(app, host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == '__main__':
    main()
