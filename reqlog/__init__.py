"""reqlog: request-scoped structured logging."""

__version__ = "0.1.0"

from reqlog.infrastructure.logging import (
    FieldSet,
    Logger,
    LoggerExtras,
    Severity,
    new_development,
    new_logger,
    new_production,
)

__all__ = [
    "FieldSet",
    "Logger",
    "LoggerExtras",
    "Severity",
    "new_development",
    "new_logger",
    "new_production",
]
