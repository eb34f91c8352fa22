"""Runtime configuration helpers for the planning poker server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping

MIN_ROOM_ID_LENGTH = 6
DUPLICATE_NAME_POLICIES = ("reconnect", "reject")


def _as_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Immutable application configuration loaded from the environment."""

    debug: bool
    host: str
    port: int
    log_level: str
    # WebSocket configuration
    websocket_cors_origins: str
    websocket_ping_interval: int
    websocket_ping_timeout: int
    socketio_async_mode: str
    socketio_logger: bool
    # Room configuration
    room_id_length: int
    room_max_age_hours: float
    room_sweep_interval_seconds: int
    duplicate_name_policy: str

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env

        room_id_length = int(env.get("ROOM_ID_LENGTH", str(MIN_ROOM_ID_LENGTH)))
        if room_id_length < MIN_ROOM_ID_LENGTH:
            raise ValueError(
                f"ROOM_ID_LENGTH must be at least {MIN_ROOM_ID_LENGTH}, got {room_id_length}"
            )

        duplicate_name_policy = env.get("DUPLICATE_NAME_POLICY", "reconnect").lower()
        if duplicate_name_policy not in DUPLICATE_NAME_POLICIES:
            raise ValueError(
                f"DUPLICATE_NAME_POLICY must be one of {DUPLICATE_NAME_POLICIES}"
            )

        return Settings(

            # toggle Flask debugger (disabled in prod)
            debug=_as_bool(env.get("FLASK_DEBUG", "false")),
            host=env.get("FLASK_HOST", "0.0.0.0"),  # nosec B104 - Required for containerized deployment
            port=int(env.get("PORT", "4000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),

            # websocket configuration
            websocket_cors_origins=env.get("WEBSOCKET_CORS_ORIGINS", "*"),
            websocket_ping_interval=int(env.get("WEBSOCKET_PING_INTERVAL", "25")),
            websocket_ping_timeout=int(env.get("WEBSOCKET_PING_TIMEOUT", "60")),
            socketio_async_mode=env.get("SOCKETIO_ASYNC_MODE", "eventlet"),
            socketio_logger=_as_bool(env.get("SOCKETIO_LOGGER", "false")),

            # room lifecycle; VIDASALA is the variable older deployments used
            room_id_length=room_id_length,
            room_max_age_hours=float(
                env.get("ROOM_MAX_AGE_HOURS", env.get("VIDASALA", "3"))
            ),
            room_sweep_interval_seconds=int(env.get("ROOM_SWEEP_INTERVAL_SECONDS", "300")),
            duplicate_name_policy=duplicate_name_policy,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings loaded from environment variables."""

    return Settings.from_env()


settings = get_settings()
