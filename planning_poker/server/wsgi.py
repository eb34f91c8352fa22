"""WSGI entry point for the planning poker server.

This module MUST be the entry point for gunicorn to ensure eventlet
monkey patching happens before any other imports:

    gunicorn -k eventlet -w 1 planning_poker.server.wsgi:app

A single worker is required: rooms live in process memory.
"""

# CRITICAL: Monkey-patch FIRST, before ANY other imports
import eventlet
eventlet.monkey_patch()

# Now safe to import the app
from planning_poker.server.app import create_app  # noqa: E402

# Create the app instance for gunicorn
app = create_app()
