"""
Custom exceptions for PartsQuest Web.

Exception Hierarchy:
    PartsQuestError (base)
    ├── ConfigurationError         - Backend URL missing/invalid (startup failure)
    ├── GatewayError               - Backend answered with a non-success status
    │   ├── AuthenticationError        - 401 / bad credentials / expired token
    │   ├── SubscriptionRequiredError  - 403 on a subscription-gated endpoint
    │   └── NetworkError               - No usable answer at all (retryable)
    ├── ValidationError            - Bad form input, nothing was sent
    │   ├── PartRequestValidationError
    │   └── ProfileValidationError
    └── DuplicateSubmissionError   - Same form already in flight

Usage:
    ConfigurationError makes the app fail fast at startup.
    Everything else is a runtime error the routes turn into a view transition
    or a flashed message. Nothing is retried automatically.
"""

from typing import Optional, Dict, Any


class PartsQuestError(Exception):
    """
    Base exception for all PartsQuest Web errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class ConfigurationError(PartsQuestError):
    """
    The application configuration cannot be used.

    Typical causes:
    - PARTSQUEST_API_URL empty or not an http(s) URL
    - Unknown config name passed to create_app()
    """

    def __init__(self, setting: str, reason: str):
        message = f"Invalid configuration for {setting}: {reason}"
        details = {
            "setting": setting,
            "resolution": f"Check {setting} in .env or the process environment"
        }
        super().__init__(message, details)
        self.setting = setting


# =============================================================================
# RUNTIME ERRORS - Operation fails, application continues
# =============================================================================

class GatewayError(PartsQuestError):
    """
    The procurement backend answered with a non-success status.

    status_code is None when no HTTP answer was received (see NetworkError).
    The message is the backend's own "error" text when it sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if status_code is not None:
            error_details["status_code"] = status_code
        if operation:
            error_details["operation"] = operation
        super().__init__(message, error_details)
        self.status_code = status_code
        self.operation = operation


class AuthenticationError(GatewayError):
    """
    The backend rejected the credentials or the bearer token.

    The session is cleared and the user is sent back to the login screen.
    """

    def __init__(self, message: str = "Your session has expired. Please sign in again.",
                 operation: Optional[str] = None):
        super().__init__(message, status_code=401, operation=operation)


class SubscriptionRequiredError(GatewayError):
    """
    A subscription-gated endpoint answered 403.

    Not shown as a raw error: the user lands on subscription selection with an
    explanatory message.
    """

    def __init__(self, message: str = "An active subscription is required for this feature.",
                 operation: Optional[str] = None):
        super().__init__(message, status_code=403, operation=operation)


class NetworkError(GatewayError):
    """
    No usable answer from the backend (connection refused, timeout, garbage body).

    State is left unchanged; the user may simply resubmit.
    """

    def __init__(self, message: str = "Network error. Please check your connection and try again.",
                 operation: Optional[str] = None):
        super().__init__(message, status_code=None, operation=operation)


class ValidationError(PartsQuestError):
    """
    Form input failed client-side validation. No network call was made.

    errors maps field name -> message.
    """

    def __init__(self, errors: Dict[str, str]):
        message = "; ".join(f"{field}: {text}" for field, text in errors.items())
        super().__init__(message, {"fields": sorted(errors)})
        self.errors = dict(errors)


class PartRequestValidationError(ValidationError):
    """Part request draft is invalid (quantity, target price, urgency, part number)."""


class ProfileValidationError(ValidationError):
    """Profile update or registration form is invalid."""


class DuplicateSubmissionError(PartsQuestError):
    """A submission of the same form is still in flight for this session."""

    def __init__(self, form: str):
        super().__init__(
            "This form is already being submitted. Please wait.",
            {"form": form}
        )
        self.form = form
