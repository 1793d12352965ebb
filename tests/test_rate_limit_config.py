"""Tests for rate limit configuration (backend/config/rate_limit_config.py)."""

from unittest.mock import MagicMock

from backend.config.rate_limit_config import (
    RateLimits,
    get_identifier,
    get_rate_limit_config,
    get_rate_limit_key,
    limiter,
)


def make_request(headers=None, host="10.0.0.1", path="/api/v1/portfolio/mirror"):
    request = MagicMock()
    request.headers = headers or {}
    request.client.host = host
    request.url.path = path
    return request


class TestIdentifier:
    """Tests for get_identifier / get_rate_limit_key."""

    def test_client_id_header_preferred(self):
        request = make_request(headers={"X-Client-ID": "browser-1"})
        assert get_identifier(request) == "client:browser-1"

    def test_client_id_truncated(self):
        request = make_request(headers={"X-Client-ID": "x" * 150})
        assert get_identifier(request) == "client:" + "x" * 100

    def test_falls_back_to_ip(self):
        assert get_identifier(make_request()) == "10.0.0.1"

    def test_key_includes_path(self):
        request = make_request(path="/api/v1/chat/debate")
        assert get_rate_limit_key(request) == "10.0.0.1:/api/v1/chat/debate"


class TestRateLimitConfig:
    """Tests for limits and configuration summary."""

    def test_presets(self):
        assert RateLimits.READ_ONLY == "500/minute"
        assert RateLimits.WRITE == "50/minute"

    def test_config_summary(self):
        config = get_rate_limit_config()
        assert config["limits"]["expensive"] == RateLimits.EXPENSIVE
        assert config["limits"]["default"] == RateLimits.PUBLIC_API

    def test_disabled_in_tests(self):
        assert get_rate_limit_config()["enabled"] is False
        assert limiter.enabled is False
