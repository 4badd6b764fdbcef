"""
Unit tests for the procurement backend gateway.

The requests.Session is replaced by a MagicMock, so no network is used.
"""

import pytest
import requests
from unittest.mock import MagicMock

from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    SubscriptionRequiredError,
)
from core.gateway import RemoteGateway


BASE_URL = "https://backend.test"


# Fixtures

def http_response(status_code, body=None):
    """Mock requests.Response; body=None means a non-JSON body."""
    response = MagicMock()
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def gateway(http):
    return RemoteGateway(BASE_URL + "/", timeout=5.0, http=http)


class TestGatewayRequests:
    """URLs, methods, payloads and headers."""

    def test_login_posts_credentials_without_auth_header(self, gateway, http):
        http.request.return_value = http_response(200, {"token": "t1", "user": {"id": 1}})

        response = gateway.login("a@b.com", "secret")

        assert response.ok
        assert response.data["token"] == "t1"
        http.request.assert_called_once_with(
            "POST",
            BASE_URL + "/api/login",
            json={"email": "a@b.com", "password": "secret"},
            headers={},
            timeout=5.0,
        )

    def test_bearer_token_attached(self, gateway, http):
        http.request.return_value = http_response(200, {"user": {"id": 1}})

        gateway.fetch_profile("tok-123")

        _, kwargs = http.request.call_args
        assert kwargs["headers"] == {"Authorization": "Bearer tok-123"}

    @pytest.mark.parametrize("call, method, path", [
        (lambda g: g.fetch_profile("t"), "GET", "/api/profile"),
        (lambda g: g.update_profile("t", {"phone": "1"}), "PUT", "/api/profile"),
        (lambda g: g.list_part_requests("t"), "GET", "/api/part-requests"),
        (lambda g: g.create_part_request("t", {"quantity": 1}), "POST", "/api/part-requests"),
        (lambda g: g.register({"email": "a@b.com"}), "POST", "/api/register"),
    ])
    def test_endpoint_mapping(self, gateway, http, call, method, path):
        http.request.return_value = http_response(200, {})

        call(gateway)

        args, _ = http.request.call_args
        assert args == (method, BASE_URL + path)

    def test_checkout_returns_url(self, gateway, http):
        http.request.return_value = http_response(200, {"checkout_url": "https://pay.test/s/1"})

        response = gateway.create_checkout_session("t", "price_1")

        assert response.ok
        assert response.data["checkout_url"] == "https://pay.test/s/1"
        _, kwargs = http.request.call_args
        assert kwargs["json"] == {"price_id": "price_1"}

    def test_checkout_without_url_is_an_error(self, gateway, http):
        http.request.return_value = http_response(200, {})

        response = gateway.create_checkout_session("t", "price_1")

        assert not response.ok
        with pytest.raises(GatewayError):
            response.raise_for_error()


class TestGatewayErrors:
    """Error normalization; 401/403 never raise on their own."""

    def test_unauthorized_is_a_value_not_an_exception(self, gateway, http):
        http.request.return_value = http_response(401, {"error": "Invalid token"})

        response = gateway.fetch_profile("bad")

        assert response.is_unauthorized
        assert isinstance(response.error, AuthenticationError)
        assert response.error.message == "Invalid token"

    def test_forbidden_is_subscription_required(self, gateway, http):
        http.request.return_value = http_response(403, {"error": "Subscription required"})

        response = gateway.list_part_requests("t")

        assert response.is_subscription_required
        with pytest.raises(SubscriptionRequiredError):
            response.raise_for_error()

    def test_error_message_from_body(self, gateway, http):
        http.request.return_value = http_response(400, {"error": "Email already registered"})

        response = gateway.register({"email": "a@b.com"})

        assert response.status_code == 400
        assert response.error.message == "Email already registered"
        assert response.error.status_code == 400

    def test_generic_message_without_body(self, gateway, http):
        http.request.return_value = http_response(500)

        response = gateway.list_part_requests("t")

        assert response.status_code == 500
        assert response.error.message == "The request failed. Please try again."

    def test_transport_failure_is_network_error(self, gateway, http):
        http.request.side_effect = requests.ConnectionError("connection refused")

        response = gateway.list_part_requests("t")

        assert response.status_code is None
        assert isinstance(response.error, NetworkError)

    def test_timeout_is_network_error(self, gateway, http):
        http.request.side_effect = requests.Timeout("slow")

        response = gateway.login("a@b.com", "x")

        assert isinstance(response.error, NetworkError)

    def test_non_json_success_is_network_error(self, gateway, http):
        http.request.return_value = http_response(200)

        response = gateway.fetch_profile("t")

        assert not response.ok
        assert isinstance(response.error, NetworkError)


class TestGatewayConfiguration:
    """Fail fast on a bad backend URL."""

    @pytest.mark.parametrize("url", ["", "backend.test", "ftp://backend.test"])
    def test_invalid_base_url(self, url):
        with pytest.raises(ConfigurationError):
            RemoteGateway(url, http=MagicMock())

    def test_trailing_slash_stripped(self, gateway):
        assert gateway.base_url == BASE_URL
