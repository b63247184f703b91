"""
Test module for reqlog.infrastructure.logging.context
"""

from unittest.mock import patch

import pytest

from reqlog.infrastructure.logging.context import (
    ContextAdapter,
    HTTPRequestLike,
    RequestIDLookup,
    UserValueStore,
)
from reqlog.infrastructure.logging.enrichment import EnvironmentEnricher
from reqlog.infrastructure.logging.fields import KEY_SERVICE, KEY_X_REQUEST_ID, FieldSet

from conftest import LookupContext, PlainRequest, ValueStoreContext


class RecordingLookup:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def get_string(self, key):
        self.calls.append(key)
        return self.result


class EveryShape(PlainRequest):
    """Exposes the lookup, the HTTP request attributes and the value store."""

    def __init__(self):
        super().__init__()
        self.store_reads = 0

    def get_string(self, key):
        return "from-lookup"

    def user_value(self, key):
        self.store_reads += 1
        return "from-store"


class FailingStore:
    def user_value(self, key):
        raise KeyError(key)


class ExplodingAttributes:
    """Every dynamic attribute lookup fails with a non-AttributeError."""

    def __getattr__(self, name):
        raise RuntimeError(f"no access to {name}")


class _ExplodingMeta(type):
    def __instancecheck__(cls, instance):
        raise RuntimeError("shape check failed")


class ExplodingShape(metaclass=_ExplodingMeta):
    pass


class ExplodingLookup:
    @property
    def get_string(self):
        raise RuntimeError("lookup unavailable")


class TestShapeProtocols:
    """Structural matching of the recognized context shapes."""

    def test_lookup_shape(self):
        assert isinstance(LookupContext(), RequestIDLookup)
        assert not isinstance(LookupContext(), UserValueStore)

    def test_http_request_shape(self):
        assert isinstance(PlainRequest(), HTTPRequestLike)
        assert not isinstance(PlainRequest(), RequestIDLookup)

    def test_value_store_shape(self):
        assert isinstance(ValueStoreContext(), UserValueStore)
        assert not isinstance(ValueStoreContext(), HTTPRequestLike)

    @pytest.mark.parametrize("value", [{"request_id": "r"}, "request", 42, object()])
    def test_unrelated_values_match_nothing(self, value):
        for shape in (RequestIDLookup, HTTPRequestLike, UserValueStore):
            assert not isinstance(value, shape)


class TestContextAdapter:
    """Test cases for ContextAdapter.extract."""

    def setup_method(self):
        """Setup for each test method."""
        self.env = {}
        self.adapter = ContextAdapter(EnvironmentEnricher("SERVICE_NAME", lookup=self.env.get))

    def test_lookup_shape_with_identifier(self):
        """The request id becomes exactly one x-request-id field."""
        fields = self.adapter.extract(LookupContext({"request_id": "req-123"}))

        assert list(fields) == [(KEY_X_REQUEST_ID, "req-123")]

    def test_lookup_shape_with_identifier_and_service(self):
        self.env["SERVICE_NAME"] = "orders"

        fields = self.adapter.extract(LookupContext({"request_id": "req-123"}))

        assert list(fields) == [(KEY_X_REQUEST_ID, "req-123"), (KEY_SERVICE, "orders")]
        assert fields.count(KEY_X_REQUEST_ID) == 1
        assert fields.count(KEY_SERVICE) == 1

    @pytest.mark.parametrize("request_id", ["", "   ", None, 123])
    def test_lookup_shape_without_usable_identifier(self, request_id):
        """Empty or non-string identifiers contribute no field; service is still added."""
        self.env["SERVICE_NAME"] = "orders"
        ctx = RecordingLookup(request_id)

        fields = self.adapter.extract(ctx)

        assert ctx.calls == ["request_id"]
        assert list(fields) == [(KEY_SERVICE, "orders")]

    def test_http_request_shape_contributes_only_service(self):
        assert len(self.adapter.extract(PlainRequest())) == 0

        self.env["SERVICE_NAME"] = "orders"
        assert list(self.adapter.extract(PlainRequest())) == [(KEY_SERVICE, "orders")]

    def test_value_store_shape_with_identifier(self):
        self.env["SERVICE_NAME"] = "orders"

        fields = self.adapter.extract(ValueStoreContext({"request_id": "req-9"}))

        assert list(fields) == [(KEY_X_REQUEST_ID, "req-9"), (KEY_SERVICE, "orders")]

    def test_value_store_shape_keeps_empty_string_identifier(self):
        """A stored empty string is still a string and is emitted as-is."""
        fields = self.adapter.extract(ValueStoreContext({"request_id": ""}))

        assert list(fields) == [(KEY_X_REQUEST_ID, "")]

    @pytest.mark.parametrize("values", [{}, {"request_id": 7}, {"request_id": None}])
    def test_value_store_shape_without_identifier(self, values):
        """Absent or non-string entries end extraction without raising."""
        fields = self.adapter.extract(ValueStoreContext(values))

        assert len(fields) == 0

    def test_value_store_match_applies_no_other_rule(self):
        """Once the value-store shape matched, only its rule and one enrichment apply."""
        self.env["SERVICE_NAME"] = "orders"

        fields = self.adapter.extract(ValueStoreContext({}))

        assert list(fields) == [(KEY_SERVICE, "orders")]

    def test_first_matching_shape_wins(self):
        """A context exposing several shapes is handled by the highest-priority one."""
        self.env["SERVICE_NAME"] = "orders"
        ctx = EveryShape()

        fields = self.adapter.extract(ctx)

        assert list(fields) == [(KEY_X_REQUEST_ID, "from-lookup"), (KEY_SERVICE, "orders")]
        assert ctx.store_reads == 0

    @pytest.mark.parametrize("ctx", [None, {"request_id": "r"}, "ctx", 0, object()])
    def test_unrecognized_context_yields_empty_set(self, ctx):
        """No shape, no fields, even when the service variable is set."""
        self.env["SERVICE_NAME"] = "orders"

        fields = self.adapter.extract(ctx)

        assert isinstance(fields, FieldSet)
        assert len(fields) == 0

    def test_failing_lookup_is_absorbed(self):
        """A lookup that raises counts as no identifier."""
        self.env["SERVICE_NAME"] = "orders"
        fields = self.adapter.extract(FailingStore())

        assert list(fields) == [(KEY_SERVICE, "orders")]

    def test_context_with_failing_attribute_access_matches_nothing(self):
        """Shape matching never lets attribute errors escape."""
        self.env["SERVICE_NAME"] = "orders"

        fields = self.adapter.extract(ExplodingAttributes())

        assert isinstance(fields, FieldSet)
        assert len(fields) == 0

    def test_shape_check_failure_is_absorbed(self):
        self.env["SERVICE_NAME"] = "orders"

        with patch.object(ContextAdapter, "_rules", ((ExplodingShape, ContextAdapter._from_lookup),)):
            fields = self.adapter.extract(LookupContext({"request_id": "req-1"}))

        assert len(fields) == 0

    def test_failing_lookup_attribute_is_absorbed(self):
        """A lookup whose attribute access raises counts as no identifier."""
        ctx = ExplodingLookup()

        fields = self.adapter.extract(ctx)

        assert len(fields) == 0

    def test_context_is_not_mutated(self):
        values = {"request_id": "req-1"}
        ctx = LookupContext(values)

        self.adapter.extract(ctx)
        self.adapter.extract(ctx)

        assert ctx.values == {"request_id": "req-1"}

    def test_service_is_read_on_every_call(self):
        """Environment changes show up in the next extraction."""
        ctx = PlainRequest()
        self.env["SERVICE_NAME"] = "orders"
        first = self.adapter.extract(ctx)
        self.env["SERVICE_NAME"] = "billing"
        second = self.adapter.extract(ctx)
        del self.env["SERVICE_NAME"]
        third = self.adapter.extract(ctx)

        assert first.get(KEY_SERVICE) == "orders"
        assert second.get(KEY_SERVICE) == "billing"
        assert len(third) == 0

    def test_default_enricher(self):
        adapter = ContextAdapter()
        assert adapter.enricher.service_var == "SERVICE_NAME"
