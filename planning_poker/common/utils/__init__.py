"""Shared utilities."""

from planning_poker.common.utils.config import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
