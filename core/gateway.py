"""
REST client for the PartsQuest procurement backend.

One method per backend capability. Every method returns a GatewayResponse
instead of raising, so 401 and 403 reach the caller as ordinary values that
the access logic turns into view transitions:

    response = gateway.fetch_profile(token)
    if response.is_unauthorized:
        ...                      # force logout
    elif response.is_subscription_required:
        ...                      # subscription selection
    elif response.ok:
        user = response.data["user"]
    else:
        flash(response.error.message)

Callers that prefer exceptions use response.raise_for_error(), which maps
401 -> AuthenticationError, 403 -> SubscriptionRequiredError, no answer ->
NetworkError and anything else -> GatewayError.

Endpoints:
    POST /api/login                              { token, user }
    POST /api/register                           { token, user }
    GET  /api/profile                    bearer  { user }
    PUT  /api/profile                    bearer  { user }
    GET  /api/part-requests              bearer  { part_requests: [...] }
    POST /api/part-requests              bearer  created object
    POST /api/stripe/create-checkout-session bearer { checkout_url }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, Optional

import requests

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    SubscriptionRequiredError,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "The request failed. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


@dataclass
class GatewayResponse:
    """
    Normalized outcome of one backend call.

    status_code is None when no HTTP response was received.
    error is set for every non-success outcome.
    """

    operation: str
    status_code: Optional[int]
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_subscription_required(self) -> bool:
        return self.status_code == 403

    def raise_for_error(self) -> "GatewayResponse":
        """Raise the matching GatewayError subclass; return self on success."""
        if self.error is not None:
            raise self.error
        return self


class RemoteGateway:
    """
    requests-based client for the procurement backend.

    A single instance is shared by all Flask request threads; it keeps no
    per-user state. The bearer token is passed to each call by the caller.

    Attributes:
        base_url: Backend root, e.g. "https://partsquest-backend-production.onrender.com"
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        http: Optional[requests.Session] = None
    ):
        """
        Args:
            base_url: Backend root URL (http or https)
            timeout: Seconds before a call is treated as a network failure
            http: Optional requests.Session (injected in tests)

        Raises:
            ConfigurationError: If base_url is empty or not http(s)
        """
        if not base_url or not base_url.startswith(("http://", "https://")):
            raise ConfigurationError("PARTSQUEST_API_URL", f"not an http(s) URL: {base_url!r}")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http or requests.Session()
        self._http.headers.update({"Accept": "application/json"})

        logger.info(f"RemoteGateway initialized for {self.base_url}")

    # =========================================================================
    # AUTHENTICATION (no bearer token)
    # =========================================================================

    def login(self, email: str, password: str) -> GatewayResponse:
        return self._request(
            "login", "POST", "/api/login",
            payload={"email": email, "password": password},
        )

    def register(self, user_data: Dict[str, Any]) -> GatewayResponse:
        """user_data: email, password, first_name, last_name, company, phone."""
        return self._request("register", "POST", "/api/register", payload=user_data)

    # =========================================================================
    # PROFILE
    # =========================================================================

    def fetch_profile(self, token: str) -> GatewayResponse:
        return self._request("fetch_profile", "GET", "/api/profile", token=token)

    def update_profile(self, token: str, changes: Dict[str, Any]) -> GatewayResponse:
        return self._request(
            "update_profile", "PUT", "/api/profile", token=token, payload=changes
        )

    # =========================================================================
    # PART REQUESTS (subscription-gated: 403 means "upgrade required")
    # =========================================================================

    def list_part_requests(self, token: str) -> GatewayResponse:
        return self._request(
            "list_part_requests", "GET", "/api/part-requests", token=token
        )

    def create_part_request(self, token: str, payload: Dict[str, Any]) -> GatewayResponse:
        return self._request(
            "create_part_request", "POST", "/api/part-requests",
            token=token, payload=payload,
        )

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    def create_checkout_session(self, token: str, price_id: str) -> GatewayResponse:
        """
        Ask the backend for a hosted checkout session.

        On success data["checkout_url"] is the page the browser must be sent
        to as a whole-page redirect. A success without that URL is reported as
        an error.
        """
        response = self._request(
            "create_checkout_session", "POST", "/api/stripe/create-checkout-session",
            token=token, payload={"price_id": price_id},
        )
        if response.ok and not response.data.get("checkout_url"):
            response.error = GatewayError(
                "Checkout could not be started. Please try again.",
                status_code=response.status_code,
                operation=response.operation,
            )
        return response

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        token: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> GatewayResponse:
        url = f"{self.base_url}{path}"
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            http_response = self._http.request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            return GatewayResponse(
                operation=operation,
                status_code=None,
                error=NetworkError(NETWORK_ERROR_MESSAGE, operation=operation),
            )

        status_code = http_response.status_code
        body = self._parse_body(http_response)
        logger.info(f"{method} {path} -> {status_code}")

        if 200 <= status_code < 300:
            if body is None:
                logger.error(f"{method} {path} returned a non-JSON success body")
                return GatewayResponse(
                    operation=operation,
                    status_code=status_code,
                    error=NetworkError(NETWORK_ERROR_MESSAGE, operation=operation),
                )
            return GatewayResponse(operation=operation, status_code=status_code, data=body)

        message = self._error_message(body)
        return GatewayResponse(
            operation=operation,
            status_code=status_code,
            data=body or {},
            error=self._build_error(status_code, message, operation),
        )

    @staticmethod
    def _parse_body(http_response: requests.Response) -> Optional[Dict[str, Any]]:
        try:
            body = http_response.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else {"items": body}

    @staticmethod
    def _error_message(body: Optional[Dict[str, Any]]) -> Optional[str]:
        if body:
            message = body.get("error")
            if isinstance(message, str) and message.strip():
                return message.strip()
        return None

    @staticmethod
    def _build_error(status_code: int, message: Optional[str], operation: str) -> GatewayError:
        if status_code == 401:
            if message:
                return AuthenticationError(message, operation=operation)
            return AuthenticationError(operation=operation)
        if status_code == 403:
            if message:
                return SubscriptionRequiredError(message, operation=operation)
            return SubscriptionRequiredError(operation=operation)
        return GatewayError(message or GENERIC_ERROR_MESSAGE, status_code=status_code, operation=operation)
