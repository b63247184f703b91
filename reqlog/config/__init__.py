"""Configuration Package

Purpose: Centralized configuration management for reqlog

Holds the pydantic-settings model that is resolved once when a Logger is
built. Values that must be re-read on every log call (the debug bypass toggle
and the service name) are configured here by variable *name* only.
"""

from .settings import LogFormat, LogLevel, LoggingSettings, get_settings, reset_settings

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
]
