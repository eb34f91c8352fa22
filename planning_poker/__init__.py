"""Real-time planning poker rooms over Socket.IO."""

__version__ = "1.0.0"
