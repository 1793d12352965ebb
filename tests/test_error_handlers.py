"""
Tests for Error Handlers (backend/error_handlers.py)

Covers exception handlers invoked through a small FastAPI app.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.error_handlers import get_request_id, register_exception_handlers
from backend.exceptions import InvalidPortfolioError, MarketDataError, PortfolioMirrorException
from backend.models.portfolio import PortfolioRequest


def build_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/custom")
    def custom():
        raise PortfolioMirrorException("custom failure", error_code="SOMETHING", status_code=418)

    @app.get("/portfolio")
    def bad_portfolio():
        raise InvalidPortfolioError("portfolio array is required")

    @app.get("/market")
    def market():
        raise MarketDataError("TCS", provider="yfinance")

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    @app.post("/submit")
    def submit(payload: PortfolioRequest):
        return {"count": len(payload.portfolio)}

    @app.get("/items/{item_id}")
    def item(item_id: int):
        return {"item_id": item_id}

    return app


@pytest.fixture
def client():
    return TestClient(build_app(), raise_server_exceptions=False)


class TestGetRequestId:
    """Tests for get_request_id() helper."""

    def test_prefers_request_state(self):
        request = MagicMock()
        request.state = SimpleNamespace(request_id="state-1")
        request.headers = {"X-Request-ID": "header-1"}
        assert get_request_id(request) == "state-1"

    def test_returns_custom_header(self):
        request = MagicMock()
        request.state = SimpleNamespace()
        request.headers = {"X-Request-ID": "custom-123"}
        assert get_request_id(request) == "custom-123"

    def test_generates_fallback_id(self):
        request = MagicMock()
        request.state = SimpleNamespace()
        request.headers = {}
        assert get_request_id(request).startswith("req_")


class TestCustomExceptionHandler:
    """Tests for portfolio_mirror_exception_handler."""

    def test_custom_status_and_code(self, client):
        resp = client.get("/custom")
        assert resp.status_code == 418
        data = resp.json()
        assert data["error"] == "SOMETHING"
        assert data["message"] == "custom failure"
        assert data["path"] == "/custom"

    def test_invalid_portfolio(self, client):
        resp = client.get("/portfolio")
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_PORTFOLIO"

    def test_market_data_error_details(self, client):
        resp = client.get("/market")
        assert resp.status_code == 502
        data = resp.json()
        assert data["error"] == "EXTERNAL_SERVICE_ERROR"
        assert data["details"]["ticker"] == "TCS"

    def test_request_id_header_echoed_in_body(self, client):
        resp = client.get("/custom", headers={"X-Request-ID": "trace-42"})
        assert resp.json()["request_id"] == "trace-42"


class TestValidationExceptionHandler:
    """Tests for validation_exception_handler."""

    def test_missing_portfolio_is_invalid_portfolio(self, client):
        resp = client.post("/submit", json={})
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "INVALID_PORTFOLIO"
        assert data["message"] == "Invalid portfolio"
        assert any("portfolio" in e["field"] for e in data["validation_errors"])

    def test_bad_holding_is_invalid_portfolio(self, client):
        resp = client.post("/submit", json={"portfolio": [{"ticker": "TCS", "percentage": -5}]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_PORTFOLIO"

    def test_other_field_is_validation_error(self, client):
        resp = client.get("/items/not-a-number")
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["message"] == "Request validation failed"


class TestHTTPExceptionHandler:
    """Tests for http_exception_handler."""

    def test_404_mapped_to_resource_not_found(self, client):
        resp = client.get("/nonexistent")
        assert resp.status_code == 404
        assert resp.json()["error"] == "RESOURCE_NOT_FOUND"

    def test_405_mapped(self, client):
        resp = client.post("/custom")
        assert resp.status_code == 405
        assert resp.json()["error"] == "METHOD_NOT_ALLOWED"


class TestGenericExceptionHandler:
    """Tests for generic_exception_handler."""

    def test_unhandled_error_is_500(self, client, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        resp = client.get("/boom")
        assert resp.status_code == 500
        data = resp.json()
        assert data["error"] == "INTERNAL_ERROR"
        assert data["message"] == "An internal server error occurred"
        assert data["details"] == {"error_type": "RuntimeError"}

    def test_development_includes_message(self, client, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        data = client.get("/boom").json()
        assert data["message"] == "Internal error: unexpected"
        assert "traceback" in data["details"]
