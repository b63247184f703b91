"""
Debug bypass gate.

When the bypass toggle is present in the environment every log call writes its
formatted message straight to the raw output stream and skips the structured
engine entirely. The toggle is re-read on each call.
"""

import sys
from typing import Optional, TextIO

from reqlog.infrastructure.logging.enrichment import EnvLookup, environ_lookup
from reqlog.infrastructure.logging.levels import Severity


class LevelGate:
    """Decides per call whether emission bypasses the structured engine."""

    def __init__(self, toggle_var: str = "REQLOG_DEBUG", lookup: Optional[EnvLookup] = None):
        self.toggle_var = toggle_var
        self._lookup = lookup or environ_lookup

    def should_bypass(self) -> bool:
        # presence alone enables the bypass, whatever the value
        return self._lookup(self.toggle_var) is not None

    @staticmethod
    def write_raw(line: str, stream: Optional[TextIO] = None) -> None:
        """Write one unformatted line and flush it immediately."""
        out = stream if stream is not None else sys.stderr
        out.write(f"{line}\n")
        out.flush()

    @staticmethod
    def debug_enabled(engine) -> bool:
        """Whether ``engine`` would emit debug records at its configured threshold."""
        return engine.would_emit(Severity.DEBUG)
