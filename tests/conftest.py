"""Shared pytest fixtures and configuration for reqlog tests."""

import io
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pytest

from reqlog.config.settings import reset_settings
from reqlog.infrastructure.logging.context import ContextAdapter
from reqlog.infrastructure.logging.enrichment import EnvironmentEnricher
from reqlog.infrastructure.logging.fields import FieldSet
from reqlog.infrastructure.logging.gate import LevelGate
from reqlog.infrastructure.logging.levels import Severity
from reqlog.infrastructure.logging.logger import Logger


@dataclass
class EmittedRecord:
    severity: Severity
    message: str
    fields: FieldSet


class RecordingEngine:
    """Lightweight structured engine that keeps every emitted record in memory."""

    def __init__(self, min_severity: Severity = Severity.DEBUG):
        self.min_severity = min_severity
        self.records: List[EmittedRecord] = []
        self.flush_calls = 0
        self.flush_error: Optional[Exception] = None

    def emit(self, severity: Severity, message: str, fields: FieldSet) -> None:
        self.records.append(EmittedRecord(severity, message, fields))

    def flush(self) -> None:
        self.flush_calls += 1
        if self.flush_error is not None:
            raise self.flush_error

    def would_emit(self, severity: Severity) -> bool:
        return severity >= self.min_severity

    @property
    def last(self) -> EmittedRecord:
        return self.records[-1]


class LookupContext:
    """Context exposing a string lookup (first recognized shape)."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = values or {}

    def get_string(self, key: str) -> str:
        value = self.values.get(key)
        return value if isinstance(value, str) else ""


class PlainRequest:
    """Generic HTTP request with no identifier (second recognized shape)."""

    def __init__(self):
        self.method = "GET"
        self.url = "http://testserver/orders"
        self.headers = {"accept": "application/json"}


class ValueStoreContext:
    """Context carrying a per-request value store (third recognized shape)."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = values or {}

    def user_value(self, key: str) -> Any:
        return self.values.get(key)


@pytest.fixture(autouse=True)
def clean_settings():
    """Drop cached settings around each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def env() -> Dict[str, str]:
    """In-memory environment read by enrichers and gates built from fixtures."""
    return {}


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def raw_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_logger(engine, env, raw_output):
    """Factory for loggers wired to the recording engine and in-memory environment."""

    def _make(context: Any = None) -> Logger:
        enricher = EnvironmentEnricher("SERVICE_NAME", lookup=env.get)
        return Logger(
            engine,
            context,
            adapter=ContextAdapter(enricher),
            gate=LevelGate("REQLOG_DEBUG", lookup=env.get),
            raw_output=raw_output,
        )

    return _make
