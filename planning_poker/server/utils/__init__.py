"""Helpers shared by socket handlers and routes."""

from planning_poker.server.utils.socket_payload import socket_payload
from planning_poker.server.utils.validation import (
    validate_card,
    validate_required_fields,
    validate_room_id,
    validate_sequence,
    validate_text,
    MAX_NAME_LENGTH,
    MAX_SEQUENCE_LENGTH,
    MAX_VOTE_LENGTH,
)

__all__ = [
    "socket_payload",
    "validate_card",
    "validate_required_fields",
    "validate_room_id",
    "validate_sequence",
    "validate_text",
    "MAX_NAME_LENGTH",
    "MAX_SEQUENCE_LENGTH",
    "MAX_VOTE_LENGTH",
]
