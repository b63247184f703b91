"""
reqlog Logging Infrastructure

Structured logging facade that enriches records with request-scoped fields.

Components:
- levels: Severity enumeration
- fields: FieldSet and canonical field names
- context: ContextAdapter and the recognized context shapes
- adapters: Starlette/ASGI objects exposed as context shapes
- enrichment: EnvironmentEnricher for process-wide fields
- gate: LevelGate for the debug bypass
- config: structlog-backed StructuredEngine
- logger: Logger facade, LoggerExtras and factory functions
"""

from .levels import Severity
from .fields import FieldSet, KEY_SERVICE, KEY_X_REQUEST_ID
from .context import ContextAdapter, HTTPRequestLike, RequestIDLookup, UserValueStore
from .adapters import ASGIScopeContext, StarletteStateContext
from .enrichment import EnvironmentEnricher
from .gate import LevelGate
from .config import StructlogEngine, StructuredEngine, build_engine
from .logger import Logger, LoggerExtras, new_development, new_logger, new_production

__all__ = [
    'Severity',
    'FieldSet',
    'KEY_SERVICE',
    'KEY_X_REQUEST_ID',
    'ContextAdapter',
    'HTTPRequestLike',
    'RequestIDLookup',
    'UserValueStore',
    'ASGIScopeContext',
    'StarletteStateContext',
    'EnvironmentEnricher',
    'LevelGate',
    'StructlogEngine',
    'StructuredEngine',
    'build_engine',
    'Logger',
    'LoggerExtras',
    'new_development',
    'new_logger',
    'new_production',
]
