"""
Adapters from concrete web framework objects to the recognized context shapes.

A Starlette/FastAPI ``Request`` already matches ``HTTPRequestLike`` and needs
no wrapping. Wrap it in ``StarletteStateContext`` to expose the identifier the
request-id middleware stored in ``request.state``, or wrap a raw ASGI scope in
``ASGIScopeContext`` to read the same per-request store without building a
``Request``.
"""

from typing import Any

from starlette.requests import HTTPConnection
from starlette.types import Scope


class StarletteStateContext:
    """``RequestIDLookup`` over ``request.state`` of a Starlette connection."""

    __slots__ = ("connection",)

    def __init__(self, connection: HTTPConnection):
        self.connection = connection

    def get_string(self, key: str) -> str:
        value = getattr(self.connection.state, key, None)
        return value if isinstance(value, str) else ""


class ASGIScopeContext:
    """``UserValueStore`` over the ``state`` mapping of an ASGI scope."""

    __slots__ = ("scope",)

    def __init__(self, scope: Scope):
        self.scope = scope

    def user_value(self, key: str) -> Any:
        state = self.scope.get("state")
        if not state:
            return None
        return state.get(key)
