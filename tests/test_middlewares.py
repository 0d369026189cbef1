"""Tests for the correlation ID and logging context middlewares."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from library_api.logging import get_log_context
from library_api.middlewares.correlation_id import (
    CorrelationIDMiddleware,
    get_correlation_id,
)
from library_api.middlewares.logging_context import LoggingContextMiddleware


def _app():
    app = FastAPI()
    seen = {}

    @app.get("/echo")
    async def echo():
        seen["correlation_id"] = get_correlation_id()
        seen["context"] = dict(get_log_context())
        return {}

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    return app, seen


def test_generates_short_correlation_id():
    app, seen = _app()

    response = TestClient(app).get("/echo")

    cid = response.headers["X-Correlation-ID"]
    assert len(cid) == 8
    assert seen["correlation_id"] == cid


def test_keeps_client_correlation_id_truncated():
    app, seen = _app()

    response = TestClient(app).get(
        "/echo", headers={"X-Correlation-ID": "abcdef0123456789"}
    )

    assert response.headers["X-Correlation-ID"] == "abcdef01"
    assert seen["correlation_id"] == "abcdef01"


def test_log_context_set_during_request_and_cleared_after():
    app, seen = _app()

    TestClient(app).get("/echo")

    assert seen["context"] == {"endpoint": "/echo", "method": "GET"}
    assert get_log_context() == {}
