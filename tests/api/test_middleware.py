"""Tests for RequestIDMiddleware."""

import logging
from uuid import UUID

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.testclient import TestClient

from api.base import success_response
from api.middleware import RequestIDMiddleware
from utils.request_context import get_request_id


@pytest.fixture
def client():
    """Minimal app echoing the request ID from state and from the envelope."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return JSONResponse({
            "state_id": request.state.request_id,
            "envelope_id": success_response({}).meta.request_id,
        })

    return TestClient(app)


class TestRequestIDMiddleware:
    """Request ID binding, header echo and access log."""

    def test_generated_id_is_uuid(self, client):
        """Without an incoming header a UUID is generated."""
        response = client.get("/echo")
        UUID(response.headers["X-Request-ID"])

    def test_header_state_and_envelope_agree(self, client):
        """Header, request.state and envelope share one ID."""
        response = client.get("/echo")

        header_id = response.headers["X-Request-ID"]
        body = response.json()
        assert body["state_id"] == header_id
        assert body["envelope_id"] == header_id

    def test_each_request_gets_unique_id(self, client):
        """Separate requests never share an ID."""
        r1 = client.get("/echo")
        r2 = client.get("/echo")
        assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]

    def test_incoming_request_id_is_kept(self, client):
        """A caller-supplied X-Request-ID is reused."""
        response = client.get("/echo", headers={"X-Request-ID": "ui-1234"})

        assert response.headers["X-Request-ID"] == "ui-1234"
        assert response.json()["envelope_id"] == "ui-1234"

    def test_context_cleared_after_request(self, client):
        """The contextvar is unbound once the response is sent."""
        client.get("/echo", headers={"X-Request-ID": "ui-1234"})
        assert get_request_id() is None

    def test_request_is_logged(self, client, caplog):
        """Method, path, status and ID are logged."""
        with caplog.at_level(logging.INFO, logger="api.middleware"):
            client.get("/echo", headers={"X-Request-ID": "log-me"})

        assert "GET /echo -> 200" in caplog.text
        assert "request_id=log-me" in caplog.text
