"""
reqlog Logger Facade

Every log call runs the same pipeline:

1. The debug bypass gate is checked; when active the formatted message is
   written raw and nothing else happens.
2. Fields are extracted from the logger's context (the service field is added
   for any recognized context shape).
3. Positional arguments, if any, are substituted into the message.
4. The structured engine writes the record at the call's severity.

Formatting mismatches, unknown contexts and missing environment variables
degrade the record instead of raising. Only ``sync`` reports errors, and the
engine's own panic and fatal behavior passes through untouched.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, TextIO

from reqlog.config.settings import LogFormat, LogLevel, LoggingSettings, get_settings
from reqlog.exceptions import SyncException
from reqlog.infrastructure.logging.config import StructuredEngine, build_engine
from reqlog.infrastructure.logging.context import ContextAdapter
from reqlog.infrastructure.logging.enrichment import EnvironmentEnricher, EnvLookup
from reqlog.infrastructure.logging.formatting import sprintf
from reqlog.infrastructure.logging.gate import LevelGate
from reqlog.infrastructure.logging.levels import Severity

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not valid JSON
    raise ValueError(f"Invalid JSON constant: {name}")


@dataclass(frozen=True)
class LoggerExtras:
    """
    Extra structured value attached by ``Logger.info_json``.

    Attributes:
        key: Field name; nothing is attached when empty or blank
        value: Mapping stored under ``key``; nothing is attached when empty
        filter: Accepted for callers that pass key filters; not applied
    """
    key: str = ""
    value: Mapping[str, Any] = field(default_factory=dict)
    filter: Sequence[str] = ()


class Logger:
    """
    Structured logger bound to one request or component context.

    Attributes:
        engine: Structured engine receiving the assembled records
        context: Opaque caller-owned context fields are extracted from
        adapter: Context field extractor (owns the environment enricher)
        gate: Debug bypass gate
    """

    def __init__(
        self,
        engine: StructuredEngine,
        context: Any = None,
        adapter: Optional[ContextAdapter] = None,
        gate: Optional[LevelGate] = None,
        raw_output: Optional[TextIO] = None,
    ):
        self._engine = engine
        self._context = context
        self._adapter = adapter or ContextAdapter()
        self._gate = gate or LevelGate()
        self._raw_output = raw_output

    @property
    def engine(self) -> StructuredEngine:
        return self._engine

    @property
    def context(self) -> Any:
        return self._context

    @property
    def adapter(self) -> ContextAdapter:
        return self._adapter

    @property
    def gate(self) -> LevelGate:
        return self._gate

    def with_context(self, context: Any) -> "Logger":
        """Return a logger for ``context`` sharing this logger's engine and settings."""
        return Logger(
            self._engine,
            context,
            adapter=self._adapter,
            gate=self._gate,
            raw_output=self._raw_output,
        )

    def _log(self, severity: Severity, message: str, args: Sequence[Any]) -> None:
        if self._gate.should_bypass():
            self._gate.write_raw(sprintf(message, args), self._raw_output)
            return

        fields = self._adapter.extract(self._context)
        if len(args) > 0:
            message = sprintf(message, args)
        self._engine.emit(severity, message, fields)

    def fatal(self, message: str, *args: Any) -> None:
        """Log at fatal severity; the engine terminates the process afterwards."""
        self._log(Severity.FATAL, message, args)

    def panic(self, message: str, *args: Any) -> None:
        """Log at panic severity; the engine raises ``LoggerPanic`` afterwards."""
        self._log(Severity.PANIC, message, args)

    def dpanic(self, message: str, *args: Any) -> None:
        """Log at dpanic severity; raises ``LoggerPanic`` in development mode."""
        self._log(Severity.DPANIC, message, args)

    def error(self, message: str, *args: Any) -> None:
        self._log(Severity.ERROR, message, args)

    def warn(self, message: str, *args: Any) -> None:
        self._log(Severity.WARN, message, args)

    warning = warn

    def info(self, message: str, *args: Any) -> None:
        self._log(Severity.INFO, message, args)

    def debug(self, message: str, *args: Any) -> None:
        self._log(Severity.DEBUG, message, args)

    def info_json(self, message: str, json_fragment: str, extras: Optional[LoggerExtras] = None) -> None:
        """
        Log ``message`` followed by a JSON fragment at info severity.

        An invalid fragment is dropped and ``message`` is logged on its own.
        When ``extras`` names a key and carries a non-empty value, that value
        is attached as one extra field.

        Args:
            message: Message text
            json_fragment: Text expected to be a complete JSON document
            extras: Optional extra field to attach
        """
        if self._gate.should_bypass():
            self._gate.write_raw(message, self._raw_output)
            return

        fields = self._adapter.extract(self._context)

        try:
            json.loads(json_fragment, parse_constant=_reject_constant)
        except (TypeError, ValueError) as e:
            logger.debug(f"Dropping invalid JSON fragment from record: {e}")
            self._engine.emit(Severity.INFO, message, fields)
            return

        if extras is not None:
            if extras.key.strip() and extras.value:
                fields.append(extras.key, dict(extras.value))
            if extras.filter:
                logger.debug(f"LoggerExtras.filter is not applied: {list(extras.filter)}")

        self._engine.emit(Severity.INFO, f"{message} {json_fragment}", fields)

    def debug_enabled(self) -> bool:
        """Whether the engine would write debug records, regardless of the bypass toggle."""
        return self._gate.debug_enabled(self._engine)

    def sync(self) -> None:
        """
        Flush buffered records in the engine.

        Raises:
            SyncException: If the engine fails to flush
        """
        try:
            self._engine.flush()
        except (OSError, ValueError) as e:
            raise SyncException(
                f"Failed to flush log output: {e}",
                details={"error_type": type(e).__name__},
            ) from e


def new_logger(
    context: Any = None,
    settings: Optional[LoggingSettings] = None,
    stream: Optional[TextIO] = None,
    raw_output: Optional[TextIO] = None,
    lookup: Optional[EnvLookup] = None,
    engine: Optional[StructuredEngine] = None,
) -> Logger:
    """
    Build a Logger entirely from settings.

    Args:
        context: Opaque request or component context
        settings: Logging settings, the global instance when omitted
        stream: Engine output stream, ``sys.stderr`` when omitted
        raw_output: Bypass output stream, ``sys.stderr`` when omitted
        lookup: Environment lookup for per-call values, ``os.environ`` by default
        engine: Prebuilt engine to share instead of building one

    Returns:
        Configured Logger
    """
    settings = settings or get_settings()
    enricher = EnvironmentEnricher(settings.service_name_var, lookup=lookup)
    return Logger(
        engine if engine is not None else build_engine(settings, stream=stream),
        context,
        adapter=ContextAdapter(enricher),
        gate=LevelGate(settings.debug_bypass_var, lookup=lookup),
        raw_output=raw_output,
    )


def new_production(context: Any = None, settings: Optional[LoggingSettings] = None, stream: Optional[TextIO] = None) -> Logger:
    """Logger writing info and above to stderr as JSON with a ``message`` key."""
    base = settings or get_settings()
    production = base.model_copy(
        update={"level": LogLevel.INFO, "format": LogFormat.JSON, "message_key": "message", "development": False}
    )
    return new_logger(context, settings=production, stream=stream)


def new_development(context: Any = None, settings: Optional[LoggingSettings] = None, stream: Optional[TextIO] = None) -> Logger:
    """Logger writing debug and above to stderr in console format; dpanic raises."""
    base = settings or get_settings()
    development = base.model_copy(
        update={"level": LogLevel.DEBUG, "format": LogFormat.CONSOLE, "development": True}
    )
    return new_logger(context, settings=development, stream=stream)
