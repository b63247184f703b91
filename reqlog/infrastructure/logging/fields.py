"""
Structured field collection and canonical field names.

The key constants are part of the external record contract and are emitted
verbatim. ``FieldSet`` keeps insertion order and duplicate keys; consumers that
need a single value per key resolve duplicates first-match-wins.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

KEY_X_REQUEST_ID = "x-request-id"
KEY_SERVICE = "service"

# Request metadata keys available to callers building their own fields
KEY_API_REQUEST_ID = "api-request-id"
KEY_DOMAIN_NAME = "domain-name"
KEY_SOURCE_IP = "source-ip"
KEY_PROTOCOL = "protocol"
KEY_API_KEY = "api-key"
KEY_DOMAIN_PREFIX = "domain-prefix"
KEY_ACCOUNT = "account"
KEY_REQUEST_URI = "request_uri"

# Lookup key used by request contexts that carry an identifier
REQUEST_ID_LOOKUP_KEY = "request_id"


class FieldSet:
    """Ordered, append-only collection of ``(key, value)`` pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Optional[Iterable[Tuple[str, Any]]] = None):
        self._pairs: List[Tuple[str, Any]] = []
        if pairs is not None:
            self.extend(pairs)

    def append(self, key: str, value: Any) -> "FieldSet":
        self._pairs.append((str(key), value))
        return self

    def extend(self, pairs: Iterable[Tuple[str, Any]]) -> "FieldSet":
        for key, value in pairs:
            self.append(key, value)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        for k, v in self._pairs:
            if k == key:
                return v
        return default

    def count(self, key: str) -> int:
        return sum(1 for k, _ in self._pairs if k == key)

    def keys(self) -> List[str]:
        return [k for k, _ in self._pairs]

    def as_dict(self) -> Dict[str, Any]:
        """Collapse to a dict, keeping the first value of each duplicated key."""
        result: Dict[str, Any] = {}
        for key, value in self._pairs:
            result.setdefault(key, value)
        return result

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldSet):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"FieldSet({self._pairs!r})"
