"""
reqlog Structured Engine

Provides the structlog-backed engine the Logger facade delegates to: JSON (or
console) rendering, threshold filtering, OpenTelemetry trace correlation, and
the engine-defined behavior of the panic and fatal severities.
"""

import sys
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, TextIO

import structlog
from opentelemetry import trace

from reqlog.config.settings import LogFormat, LoggingSettings
from reqlog.exceptions import LoggerPanic
from reqlog.infrastructure.logging.fields import FieldSet
from reqlog.infrastructure.logging.levels import Severity

# Prefix for caller fields that share a name with an engine-owned key
CALLER_FIELD_PREFIX = "fields."


class StructuredEngine(Protocol):
    """Capability contract the Logger facade requires from its backend."""

    def emit(self, severity: Severity, message: str, fields: FieldSet) -> None: ...

    def flush(self) -> None: ...

    def would_emit(self, severity: Severity) -> bool: ...


def add_trace_context(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add OpenTelemetry trace context to log entries.

    This processor injects distributed tracing information into logs,
    enabling correlation between logs and traces in observability systems.

    Args:
        logger: Logger instance
        method_name: Log method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with trace context
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        span_context = span.get_span_context()
        # Add trace information only if not already present
        if 'trace_id' not in event_dict:
            event_dict['trace_id'] = format(span_context.trace_id, '032x')
        if 'span_id' not in event_dict:
            event_dict['span_id'] = format(span_context.span_id, '016x')

    return event_dict


class StructlogEngine:
    """
    Structured engine built on a private structlog pipeline.

    Each engine wraps its own ``PrintLogger`` instead of configuring structlog
    globally, so several engines (and test engines on in-memory streams) can
    coexist in one process.

    Attributes:
        min_severity: Lowest severity written to the stream
        development: When True, dpanic records raise ``LoggerPanic``
        message_key: Record key carrying the message text
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        min_severity: Severity = Severity.INFO,
        log_format: LogFormat = LogFormat.JSON,
        message_key: str = "message",
        development: bool = False,
        exit_func: Optional[Callable[[int], Any]] = None,
    ):
        self.stream = stream if stream is not None else sys.stderr
        self.min_severity = min_severity
        self.log_format = log_format
        self.message_key = message_key
        self.development = development
        self._exit = exit_func or sys.exit
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(self.stream),
            processors=self._build_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(min_severity.stdlib_level),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    def _build_processors(self) -> List[Callable]:
        """
        Processor chain:
        - Stack and exception rendering
        - ISO timestamp
        - OpenTelemetry trace context
        - Message key renaming (JSON only)
        - Final JSON or console rendering
        """
        processors: List[Callable] = [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            add_trace_context,
        ]
        if self.log_format == LogFormat.CONSOLE:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        else:
            if self.message_key != "event":
                processors.append(structlog.processors.EventRenamer(self.message_key))
            processors.append(structlog.processors.JSONRenderer())
        return processors

    def would_emit(self, severity: Severity) -> bool:
        return severity >= self.min_severity

    def _engine_keys(self) -> Set[str]:
        # keys written by the processors or consumed by bind()
        return {self.message_key, "event", "timestamp", "level", "self"}

    def _record_context(self, severity: Severity, fields: FieldSet) -> Dict[str, Any]:
        """
        Collapse caller fields into the bound context.

        Caller fields named like an engine-owned key are kept under
        ``fields.<key>`` instead of being overwritten.
        """
        reserved = self._engine_keys()
        context: Dict[str, Any] = {}
        for key, value in fields.as_dict().items():
            if key in reserved:
                key = f"{CALLER_FIELD_PREFIX}{key}"
                while key in context or key in fields:
                    key = f"{CALLER_FIELD_PREFIX}{key}"
            context.setdefault(key, value)
        context["level"] = severity.value
        return context

    def emit(self, severity: Severity, message: str, fields: FieldSet) -> None:
        """
        Write one record, then apply the severity's engine behavior.

        Duplicate field keys render first-match-wins. The ``level`` key is
        owned by the engine and always carries the severity name. Records
        below ``min_severity`` are not written, but panic and fatal behavior
        still applies to them.
        """
        context = self._record_context(severity, fields)
        if self.would_emit(severity):
            self._logger.bind(**context).log(severity.stdlib_level, message)

        if severity == Severity.FATAL:
            self.flush()
            self._exit(1)
        elif severity == Severity.PANIC or (severity == Severity.DPANIC and self.development):
            raise LoggerPanic(message, details={"level": severity.value, "fields": context})

    def flush(self) -> None:
        self.stream.flush()


def build_engine(
    settings: LoggingSettings,
    stream: Optional[TextIO] = None,
    exit_func: Optional[Callable[[int], Any]] = None,
) -> StructlogEngine:
    """
    Create an engine from logging settings.

    Args:
        settings: Resolved logging settings
        stream: Output stream, ``sys.stderr`` when omitted
        exit_func: Called with status 1 after a fatal record, ``sys.exit`` by default

    Returns:
        Configured StructlogEngine
    """
    return StructlogEngine(
        stream=stream,
        min_severity=Severity.parse(settings.level.value),
        log_format=settings.format,
        message_key=settings.message_key,
        development=settings.development,
        exit_func=exit_func,
    )
