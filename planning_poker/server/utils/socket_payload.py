"""Payload middleware for Socket.IO handlers.

Normalizes the single argument a client sends with an event into a dict and
rejects malformed payloads before the handler body runs. A rejected event is
logged and dropped; the connection stays open and nothing is emitted.
"""

import logging
from functools import wraps

from flask import request

from planning_poker.server.utils.validation import validate_required_fields

logger = logging.getLogger(__name__)


def socket_payload(*required_fields):
    """Decorator that passes a validated payload dict to the handler.

    Events whose payload is a bare room id (``reveal-votes``, ``reset-votes``,
    ``get-room-data``, ``check-room-exists``) declare exactly one required
    field, and a plain string argument is accepted for it.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args):
            data = args[0] if args else {}
            if isinstance(data, str) and len(required_fields) == 1:
                data = {required_fields[0]: data}
            elif data is None:
                data = {}

            try:
                if not isinstance(data, dict):
                    raise ValueError("Payload must be an object")
                validate_required_fields(data, required_fields)
                return f(data)
            except ValueError as e:
                logger.warning(
                    "socket_payload_rejected handler=%s error=%s sid=%s",
                    f.__name__, e, request.sid,
                )
                return None

        return wrapped
    return decorator
