"""
Severity levels for reqlog records.

Severities are a closed, totally ordered set. Each one carries the name written
into the record's ``level`` field and the stdlib numeric level the structlog
engine filters on.
"""

import logging
from enum import Enum

from reqlog.exceptions import ConfigurationException


class Severity(str, Enum):
    """Log severity, ordered from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DPANIC = "dpanic"
    PANIC = "panic"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]

    @classmethod
    def parse(cls, name: str) -> "Severity":
        """Resolve a case-insensitive level name (``warning`` is accepted for ``warn``)."""
        key = str(name).strip().lower()
        if key == "warning":
            key = "warn"
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationException(
                f"Unknown log level: {name!r}",
                details={"valid_levels": [s.value for s in cls]},
            ) from None

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_ORDER = list(Severity)

_STDLIB_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.DPANIC: logging.CRITICAL,
    Severity.PANIC: logging.CRITICAL,
    Severity.FATAL: logging.CRITICAL,
}
