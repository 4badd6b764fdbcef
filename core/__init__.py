"""
Core module for PartsQuest Web.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- session_store: Bearer token storage (the only state kept across reloads)
- gateway: REST client for the procurement backend
"""

from .exceptions import (
    PartsQuestError,
    ConfigurationError,
    GatewayError,
    AuthenticationError,
    SubscriptionRequiredError,
    NetworkError,
    ValidationError,
    PartRequestValidationError,
    ProfileValidationError,
    DuplicateSubmissionError,
)
from .session_store import SessionStore, mask_token
from .gateway import RemoteGateway, GatewayResponse

__all__ = [
    "PartsQuestError",
    "ConfigurationError",
    "GatewayError",
    "AuthenticationError",
    "SubscriptionRequiredError",
    "NetworkError",
    "ValidationError",
    "PartRequestValidationError",
    "ProfileValidationError",
    "DuplicateSubmissionError",
    "SessionStore",
    "mask_token",
    "RemoteGateway",
    "GatewayResponse",
]
