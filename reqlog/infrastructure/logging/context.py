"""
Request context field extraction.

A Logger holds an opaque context value supplied by the caller. This module
recognizes a fixed set of context shapes by their capabilities (never by a
discriminant field) and turns the first matching one into structured fields:

1. ``RequestIDLookup``: exposes ``get_string(key)``; contributes ``x-request-id``
   when the ``request_id`` lookup is non-empty.
2. ``HTTPRequestLike``: exposes ``method``, ``url`` and ``headers``;
   contributes no identifier.
3. ``UserValueStore``: exposes ``user_value(key)``; contributes ``x-request-id``
   whenever the stored ``request_id`` is a string, empty or not.

Every matched shape is then enriched once with the environment-derived
``service`` field. Anything else, including ``None``, yields an empty set.

Shape matching only inspects attributes. Lookups on the context run after a
shape has been chosen, and a failing lookup counts as "no identifier".
"""

import logging
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, runtime_checkable

from reqlog.infrastructure.logging.enrichment import EnvironmentEnricher
from reqlog.infrastructure.logging.fields import (
    KEY_X_REQUEST_ID,
    REQUEST_ID_LOOKUP_KEY,
    FieldSet,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class RequestIDLookup(Protocol):
    """Context offering a string-valued lookup, e.g. a framework request with state."""

    def get_string(self, key: str) -> str: ...


@runtime_checkable
class HTTPRequestLike(Protocol):
    """Plain HTTP request object with no identifier lookup."""

    method: Any
    url: Any
    headers: Any


@runtime_checkable
class UserValueStore(Protocol):
    """Context carrying a per-request value store."""

    def user_value(self, key: str) -> Any: ...


Rule = Tuple[type, Callable[["ContextAdapter", Any, FieldSet], None]]


class ContextAdapter:
    """
    Extracts structured fields from an opaque logging context.

    Attributes:
        enricher: Applied once to the fields of whichever shape matched
    """

    def __init__(self, enricher: Optional[EnvironmentEnricher] = None):
        self.enricher = enricher or EnvironmentEnricher()

    def extract(self, ctx: Any) -> FieldSet:
        """
        Build the field set for ``ctx``.

        The first matching shape is applied and ends the pass; no further
        shapes are tried for the same context.

        Args:
            ctx: Opaque caller-owned context, possibly ``None``

        Returns:
            Fields for the matched shape, or an empty set when none matched
        """
        fields = FieldSet()
        if ctx is None:
            return fields

        for shape, apply in self._rules:
            if self._matches(ctx, shape):
                apply(self, ctx, fields)
                self.enricher.enrich(fields)
                return fields

        return fields

    def _from_lookup(self, ctx: RequestIDLookup, fields: FieldSet) -> None:
        request_id = self._safe_call(ctx, "get_string")
        if isinstance(request_id, str) and request_id.strip():
            fields.append(KEY_X_REQUEST_ID, request_id)

    def _from_http_request(self, ctx: HTTPRequestLike, fields: FieldSet) -> None:
        # generic requests carry no identifier
        return None

    def _from_value_store(self, ctx: UserValueStore, fields: FieldSet) -> None:
        request_id = self._safe_call(ctx, "user_value")
        if isinstance(request_id, str):
            fields.append(KEY_X_REQUEST_ID, request_id)

    @staticmethod
    def _matches(ctx: Any, shape: type) -> bool:
        # attribute access during the check may run arbitrary context code
        try:
            return isinstance(ctx, shape)
        except Exception as e:
            logger.debug(f"Context shape check {shape.__name__} failed: {e}")
            return False

    @staticmethod
    def _safe_call(ctx: Any, name: str) -> Any:
        try:
            return getattr(ctx, name)(REQUEST_ID_LOOKUP_KEY)
        except Exception as e:
            logger.debug(f"Context {name}({REQUEST_ID_LOOKUP_KEY!r}) failed: {e}")
            return None

    # priority order
    _rules: Sequence[Rule] = (
        (RequestIDLookup, _from_lookup),
        (HTTPRequestLike, _from_http_request),
        (UserValueStore, _from_value_store),
    )
