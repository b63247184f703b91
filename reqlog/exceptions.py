"""Custom exceptions for reqlog."""

from typing import Any, Dict, Optional


class ReqlogException(Exception):
    """Base exception for all reqlog errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationException(ReqlogException):
    """Raised when logging configuration is invalid."""
    pass


class SyncException(ReqlogException):
    """Raised when the structured engine fails to flush its output."""
    pass


class LoggerPanic(ReqlogException):
    """Raised by the engine after writing a panic (or development dpanic) record."""
    pass
