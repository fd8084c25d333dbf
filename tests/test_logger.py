"""Tests for logging context."""

import pytest
import structlog
from decimal import Decimal
from fastapi.testclient import TestClient

from travelhub.api.app import create_app
from travelhub.utils.logger import (
    _json_default,
    bind_request_context,
    clear_request_context,
    new_request_id,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_request_context()
    yield
    clear_request_context()


class TestRequestContext:
    """Tests for contextvar binding."""

    def test_bind_and_clear(self):
        bind_request_context(request_id="abc123", booking_code="TH-Bh7kQ2gN9")

        context = structlog.contextvars.get_contextvars()
        assert context["request_id"] == "abc123"
        assert context["booking_code"] == "TH-Bh7kQ2gN9"

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_new_request_id(self):
        request_id = new_request_id()
        assert len(request_id) == 12
        assert request_id != new_request_id()

    def test_json_default_renders_decimal(self):
        assert _json_default(Decimal("337.25")) == "337.25"


class TestRequestIdHeader:
    """Tests for the request id middleware."""

    def test_echoes_supplied_id(self):
        with TestClient(create_app()) as client:
            response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_generates_id(self):
        with TestClient(create_app()) as client:
            response = client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 12
