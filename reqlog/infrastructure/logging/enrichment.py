"""
Process-wide field enrichment.

Environment values are looked up on every call so that changes to the process
configuration show up in the next record without rebuilding the logger.
"""

import os
from typing import Callable, Optional

from reqlog.infrastructure.logging.fields import KEY_SERVICE, FieldSet

EnvLookup = Callable[[str], Optional[str]]


def environ_lookup(name: str) -> Optional[str]:
    """Default lookup: the live process environment."""
    return os.environ.get(name)


class EnvironmentEnricher:
    """
    Appends the ``service`` field from a named environment variable.

    A variable that is present with an empty value still contributes a field.
    Each call appends again, so callers enrich once per record.
    """

    def __init__(self, service_var: str = "SERVICE_NAME", lookup: Optional[EnvLookup] = None):
        self.service_var = service_var
        self._lookup = lookup or environ_lookup

    def enrich(self, fields: FieldSet) -> FieldSet:
        service = self._lookup(self.service_var)
        if service is not None:
            fields.append(KEY_SERVICE, service)
        return fields
