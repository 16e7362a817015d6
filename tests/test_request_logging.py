"""Tests for request logging middleware and client IP resolution."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from whitehatlink.api.middleware.rate_limit import get_client_ip


def _request(headers: dict[str, str], client=("10.0.0.1", 1234)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": client,
    }
    return Request(scope)


@pytest.mark.parametrize(
    "headers,expected",
    [
        ({"CF-Connecting-IP": "203.0.113.9", "X-Forwarded-For": "198.51.100.1"}, "203.0.113.9"),
        ({"X-Forwarded-For": "198.51.100.1, 10.0.0.2"}, "198.51.100.1"),
        ({"X-Real-IP": "192.0.2.5"}, "192.0.2.5"),
        ({}, "10.0.0.1"),
    ],
)
def test_client_ip_priority(headers, expected):
    assert get_client_ip(_request(headers)) == expected


def test_client_ip_unknown_without_peer():
    assert get_client_ip(_request({}, client=None)) == "unknown"


def test_request_completed_logged(client):
    with patch("whitehatlink.api.middleware.logging.log") as log:
        client.get("/robots.txt")

    log.info.assert_called_once()
    event = log.info.call_args.args[0]
    kwargs = log.info.call_args.kwargs
    assert event == "request_completed"
    assert kwargs["status_code"] == 200
    assert kwargs["duration_ms"] >= 0


def test_redirects_are_logged(client):
    with patch("whitehatlink.api.middleware.logging.log") as log:
        client.get("/Robots.txt")

    assert log.info.call_args.kwargs["status_code"] == 308


def test_health_check_not_logged(client):
    with patch("whitehatlink.api.middleware.logging.log", MagicMock()) as log:
        client.get("/api/health")

    log.info.assert_not_called()
